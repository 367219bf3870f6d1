import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from oauth_linking._context import Context
from oauth_linking._storage import AccountsStorage, SessionStorage
from oauth_linking.models.sign_in import CandidateUser, OAuthAccount, SignInAttempt

CALLBACK_SECRET = "test-callback-secret"


@dataclass
class Session:
    """In-memory session for testing."""

    id: str
    user_id: str
    expires_at: datetime


class MemorySessionStorage:
    """In-memory session storage for testing.

    Implements SessionStorage protocol via duck typing.
    """

    def __init__(self):
        self.sessions: dict[str, Session] = {}

    def create_session(self, user_id: str) -> Session:
        session = Session(
            id=str(uuid.uuid4()),
            user_id=user_id,
            expires_at=datetime.now(tz=timezone.utc) + timedelta(days=7),
        )
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        session = self.sessions.get(session_id)
        if session and session.expires_at < datetime.now(tz=timezone.utc):
            del self.sessions[session_id]
            return None
        return session


@dataclass
class Account:
    id: str
    user_id: str
    provider: str
    provider_account_id: str
    type: str = "oauth"
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None
    token_type: str | None = None
    scope: str | None = None
    id_token: str | None = None


@dataclass
class User:
    id: str
    email: str | None
    email_verified: datetime | None = None
    name: str | None = None
    image: str | None = None
    accounts: list[Account] = field(default_factory=list)


class MemoryAccountsStorage:
    """In-memory account store enforcing the same uniqueness rules as a database.

    ``fail_user_creation``, ``fail_account_creation`` and ``fail_user_update``
    simulate storage failures.
    """

    def __init__(self):
        self.users: dict[str, User] = {}
        self.fail_user_creation = False
        self.fail_account_creation = False
        self.fail_user_update = False

    @property
    def accounts(self) -> list[Account]:
        return [account for user in self.users.values() for account in user.accounts]

    def find_user_by_email(self, email: str) -> User | None:
        return next((user for user in self.users.values() if user.email == email), None)

    def find_user_by_id(self, id: Any) -> User | None:
        return self.users.get(id)

    def find_account(self, *, provider: str, provider_account_id: str) -> Account | None:
        return next(
            (
                account
                for account in self.accounts
                if account.provider == provider
                and account.provider_account_id == provider_account_id
            ),
            None,
        )

    def find_accounts_by_user(self, user_id: Any) -> list[Account]:
        user = self.users.get(user_id)
        return list(user.accounts) if user else []

    def _check_user(self, email: str | None) -> None:
        if self.fail_user_creation:
            raise ValueError("Database unavailable")

        if email is not None and self.find_user_by_email(email) is not None:
            raise ValueError("User already exists")

    def _check_account(self, provider: str, provider_account_id: str) -> None:
        if self.fail_account_creation:
            raise ValueError("Database unavailable")

        if self.find_account(
            provider=provider, provider_account_id=provider_account_id
        ):
            raise ValueError("Account already exists")

    def create_user(
        self,
        *,
        email: str | None,
        name: str | None = None,
        image: str | None = None,
        email_verified: datetime | None = None,
    ) -> User:
        self._check_user(email)

        user = User(
            id=str(uuid.uuid4()),
            email=email,
            email_verified=email_verified,
            name=name,
            image=image,
        )
        self.users[user.id] = user

        return user

    def update_user(self, user_id: Any, **fields: Any) -> User:
        if self.fail_user_update:
            raise ValueError("Database unavailable")

        user = self.users.get(user_id)

        if user is None:
            raise ValueError("User does not exist")

        for key, value in fields.items():
            setattr(user, key, value)

        return user

    def create_account(self, *, user_id: Any, **fields: Any) -> Account:
        if user_id not in self.users:
            raise ValueError("User does not exist")

        self._check_account(fields["provider"], fields["provider_account_id"])

        account = Account(id=str(uuid.uuid4()), user_id=user_id, **fields)
        self.users[user_id].accounts.append(account)

        return account

    def create_user_with_account(
        self, *, user: dict[str, Any], account: dict[str, Any]
    ) -> tuple[User, Account]:
        self._check_user(user["email"])
        self._check_account(account["provider"], account["provider_account_id"])

        created_user = self.create_user(**user)

        return created_user, self.create_account(user_id=created_user.id, **account)


def make_attempt(
    provider: str = "github",
    provider_account_id: str = "1234",
    profile: dict[str, Any] | None = None,
    user_id: str | None = None,
    email: str = "pollo@example.com",
) -> SignInAttempt:
    return SignInAttempt(
        account=OAuthAccount(
            provider=provider,
            provider_account_id=provider_account_id,
            access_token="test_access_token",
            token_type="bearer",
            scope="user:email",
        ),
        profile=profile if profile is not None else {"email": email},
        user=CandidateUser(id=user_id, email=email, name="Pollo"),
    )


@pytest.fixture
def accounts_storage() -> MemoryAccountsStorage:
    return MemoryAccountsStorage()


@pytest.fixture
def session_storage() -> MemorySessionStorage:
    return MemorySessionStorage()


@pytest.fixture
def context(
    accounts_storage: AccountsStorage, session_storage: SessionStorage
) -> Context:
    return Context(
        accounts_storage=accounts_storage,
        session_storage=session_storage,
        config={"callback_secret": CALLBACK_SECRET},
    )


@pytest.fixture
def two_step_context(
    accounts_storage: AccountsStorage, session_storage: SessionStorage
) -> Context:
    return Context(
        accounts_storage=accounts_storage,
        session_storage=session_storage,
        config={"atomic_sign_up": False, "callback_secret": CALLBACK_SECRET},
    )


@pytest.fixture
def verified_user(accounts_storage: MemoryAccountsStorage) -> User:
    return accounts_storage.create_user(
        email="test@example.com",
        name="Test",
        email_verified=datetime(2020, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def other_user(accounts_storage: MemoryAccountsStorage) -> User:
    return accounts_storage.create_user(
        email="other@example.com",
        email_verified=datetime(2020, 1, 1, tzinfo=timezone.utc),
    )
