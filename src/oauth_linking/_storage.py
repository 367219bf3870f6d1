from datetime import datetime
from typing import Any

from typing_extensions import Protocol


class Session(Protocol):
    """Session of an already authenticated requester."""

    id: str
    user_id: Any
    expires_at: datetime


class SessionStorage(Protocol):
    def get_session(self, session_id: str) -> Session | None:
        """Get a session by its ID. Returns None if not found or expired."""
        ...


class Account(Protocol):
    id: Any
    user_id: Any
    provider: str
    provider_account_id: str


class User(Protocol):
    id: Any
    email: str | None
    email_verified: datetime | None
    name: str | None
    image: str | None


class AccountsStorage(Protocol):
    """Storage protocol for users and their OAuth accounts.

    Implementations must enforce uniqueness of ``User.email`` and of
    ``(Account.provider, Account.provider_account_id)`` in the storage layer
    itself, and raise when a write would violate it.
    """

    def find_user_by_email(self, email: str) -> User | None: ...

    def find_user_by_id(self, id: Any) -> User | None: ...

    def find_account(
        self,
        *,
        provider: str,
        provider_account_id: str,
    ) -> Account | None: ...

    def find_accounts_by_user(self, user_id: Any) -> list[Account]: ...

    def create_user(
        self,
        *,
        email: str | None,
        name: str | None,
        image: str | None,
        email_verified: datetime | None,
    ) -> User: ...

    def update_user(self, user_id: Any, **fields: Any) -> User: ...

    def create_account(
        self,
        *,
        user_id: Any,
        provider: str,
        provider_account_id: str,
        type: str,
        access_token: str | None,
        refresh_token: str | None,
        expires_at: int | None,
        token_type: str | None,
        scope: str | None,
        id_token: str | None,
    ) -> Account: ...

    def create_user_with_account(
        self,
        *,
        user: dict[str, Any],
        account: dict[str, Any],
    ) -> tuple[User, Account]:
        """Create a user and its first account as a single unit.

        Args:
            user: Keyword arguments accepted by ``create_user``
            account: Keyword arguments accepted by ``create_account``,
                without ``user_id``

        Returns:
            The created user and account

        Raises:
            An exception if either row cannot be written, in which case
            neither row is kept
        """
        ...
