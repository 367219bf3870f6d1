"""SQLModel-backed account store.

Uniqueness of user emails and of ``(provider, provider_account_id)`` is
enforced by the database, so two concurrent sign-ins for the same new
identity cannot both succeed.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, select

from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class UserRecord(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=_new_id, primary_key=True)
    email: Optional[str] = Field(default=None, index=True, unique=True)
    email_verified: Optional[datetime] = None
    name: Optional[str] = None
    image: Optional[str] = None


class AccountRecord(SQLModel, table=True):
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint(
            "provider", "provider_account_id", name="uq_accounts_provider_account"
        ),
    )

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    type: str = "oauth"
    provider: str
    provider_account_id: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None
    id_token: Optional[str] = None


class SQLAccountsStorage:
    """Implements the ``AccountsStorage`` protocol on top of a SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create_tables(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            try:
                yield session
            except SQLAlchemyError as e:
                session.rollback()
                logger.warning("Account store operation failed: %s", e)
                raise PersistenceError(str(e)) from e

    def find_user_by_email(self, email: str) -> UserRecord | None:
        with self._session() as session:
            return session.exec(
                select(UserRecord).where(UserRecord.email == email)
            ).first()

    def find_user_by_id(self, id: Any) -> UserRecord | None:
        with self._session() as session:
            return session.get(UserRecord, id)

    def find_account(
        self, *, provider: str, provider_account_id: str
    ) -> AccountRecord | None:
        with self._session() as session:
            return session.exec(
                select(AccountRecord).where(
                    AccountRecord.provider == provider,
                    AccountRecord.provider_account_id == provider_account_id,
                )
            ).first()

    def find_accounts_by_user(self, user_id: Any) -> list[AccountRecord]:
        with self._session() as session:
            return list(
                session.exec(
                    select(AccountRecord).where(AccountRecord.user_id == user_id)
                ).all()
            )

    def create_user(
        self,
        *,
        email: str | None,
        name: str | None,
        image: str | None,
        email_verified: datetime | None,
    ) -> UserRecord:
        user = UserRecord(
            email=email, name=name, image=image, email_verified=email_verified
        )

        with self._session() as session:
            session.add(user)
            session.commit()
            session.refresh(user)

        return user

    def update_user(self, user_id: Any, **fields: Any) -> UserRecord:
        with self._session() as session:
            user = session.get(UserRecord, user_id)

            if user is None:
                raise PersistenceError(f"User {user_id} does not exist")

            for key, value in fields.items():
                setattr(user, key, value)

            session.add(user)
            session.commit()
            session.refresh(user)

        return user

    def create_account(self, *, user_id: Any, **fields: Any) -> AccountRecord:
        account = AccountRecord(user_id=user_id, **fields)

        with self._session() as session:
            session.add(account)
            session.commit()
            session.refresh(account)

        return account

    def create_user_with_account(
        self, *, user: dict[str, Any], account: dict[str, Any]
    ) -> tuple[UserRecord, AccountRecord]:
        user_record = UserRecord(**user)

        with self._session() as session:
            session.add(user_record)
            # The user row has to exist before the account references it
            session.flush()

            account_record = AccountRecord(user_id=user_record.id, **account)
            session.add(account_record)
            session.commit()

            session.refresh(user_record)
            session.refresh(account_record)

        return user_record, account_record


__all__ = ["AccountRecord", "SQLAccountsStorage", "UserRecord"]
