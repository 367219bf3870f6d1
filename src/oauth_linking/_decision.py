"""Outcomes of the account linking policy.

Every sign-in attempt resolves to exactly one of ``Allow``, ``Deny`` or
``RedirectWithReason``. Only the outermost boundary turns a decision into
the ``True`` / ``False`` / redirect URL shape expected by the sign-in
framework (see ``utils._redirect``).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Union

UNVERIFIED_EMAIL_MESSAGE = (
    "That account has an unverified email address.\n"
    "Try using a Google or GitHub account to sign in."
)
EMAIL_NOT_VERIFIABLE_MESSAGE = (
    "The email address of that account couldn't be verified.\n"
    "Please try using another service to sign in."
)
ALREADY_LINKED_MESSAGE = (
    "That account has already been linked to another user.\n"
    "If you believe this is a mistake, contact us."
)
ACCOUNT_LINKED_MESSAGE = "Your {provider} account has been successfully linked."


class DenyReason(enum.Enum):
    ACCOUNT_OWNED_BY_ANOTHER_USER = "account_owned_by_another_user"
    PERSISTENCE_FAILURE = "persistence_failure"
    INCONSISTENT_STATE = "inconsistent_state"


class RedirectReason(enum.Enum):
    UNVERIFIED_EMAIL = "unverified_email"
    EMAIL_NOT_VERIFIABLE = "email_not_verifiable"
    ALREADY_LINKED = "already_linked"


@dataclass(frozen=True)
class Allow:
    user_id: Any
    # True when the account is not stored yet and still has to be bound to
    # ``user_id``: a signed in user linking a new provider, or a verified
    # sign-in merged into an existing user by email
    link: bool = False


@dataclass(frozen=True)
class Deny:
    reason: DenyReason


@dataclass(frozen=True)
class RedirectWithReason:
    reason: RedirectReason
    detail: str


LinkDecision = Union[Allow, Deny, RedirectWithReason]
