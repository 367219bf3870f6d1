import logging
from datetime import datetime, timezone

from ._context import Context
from ._decision import (
    ALREADY_LINKED_MESSAGE,
    EMAIL_NOT_VERIFIABLE_MESSAGE,
    UNVERIFIED_EMAIL_MESSAGE,
    Allow,
    Deny,
    DenyReason,
    LinkDecision,
    RedirectReason,
    RedirectWithReason,
)
from ._storage import Account, Session, User
from ._verification import EmailVerification, check_email_verification
from .models.sign_in import SignInAttempt

logger = logging.getLogger(__name__)


def decide_sign_in(
    attempt: SignInAttempt, context: Context, session: Session | None
) -> LinkDecision:
    """Decide what happens with an OAuth sign-in attempt.

    The checks run in a fixed order: an account owned by someone else is
    always rejected before looking at whether the requester is signed in.
    """
    account = attempt.account
    storage = context.accounts_storage

    existing_account = storage.find_account(
        provider=account.provider,
        provider_account_id=account.provider_account_id,
    )
    email = attempt.email
    existing_user = storage.find_user_by_email(email) if email else None

    # Disallow signing in with an account that belongs to another user
    if existing_account and existing_account.user_id != attempt.user.id:
        logger.warning(
            "%s account %s is linked to another user",
            account.provider,
            account.provider_account_id,
        )
        return Deny(DenyReason.ACCOUNT_OWNED_BY_ANOTHER_USER)

    if session is None:
        verification = check_email_verification(
            account.provider, attempt.profile, context.providers
        )

        if verification is EmailVerification.VERIFIED:
            return verify_and_upsert(attempt, context, existing_user, existing_account)

        logger.warning(
            "Rejected sign in with %s: email %s", account.provider, verification.value
        )

        if verification is EmailVerification.UNVERIFIED:
            return RedirectWithReason(
                RedirectReason.UNVERIFIED_EMAIL, UNVERIFIED_EMAIL_MESSAGE
            )

        return RedirectWithReason(
            RedirectReason.EMAIL_NOT_VERIFIABLE, EMAIL_NOT_VERIFIABLE_MESSAGE
        )

    # Signed in users may link any account nobody has claimed, whatever its email
    if not existing_account:
        return Allow(user_id=session.user_id, link=True)

    return RedirectWithReason(RedirectReason.ALREADY_LINKED, ALREADY_LINKED_MESSAGE)


def verify_and_upsert(
    attempt: SignInAttempt,
    context: Context,
    existing_user: User | None,
    existing_account: Account | None,
) -> LinkDecision:
    """Reconcile a sign-in whose email the provider has verified."""
    storage = context.accounts_storage
    now = datetime.now(tz=timezone.utc)

    if existing_user and existing_user.email_verified is None:
        try:
            storage.update_user(existing_user.id, email_verified=now)
        except Exception as e:
            logger.error("Failed to verify email of user %s", existing_user.id, exc_info=e)
            return Deny(DenyReason.PERSISTENCE_FAILURE)

        return Allow(user_id=existing_user.id, link=existing_account is None)

    if not existing_user and not existing_account:
        return _create_user_with_account(attempt, context, now)

    if existing_user and existing_user.email_verified is not None:
        return Allow(user_id=existing_user.id, link=existing_account is None)

    logger.error(
        "Inconsistent state for %s account %s: existing account without a user",
        attempt.account.provider,
        attempt.account.provider_account_id,
    )
    return Deny(DenyReason.INCONSISTENT_STATE)


def _create_user_with_account(
    attempt: SignInAttempt, context: Context, now: datetime
) -> LinkDecision:
    storage = context.accounts_storage

    # The candidate id is discarded, the store generates a fresh one
    user_fields = {
        "email": attempt.email,
        "name": attempt.user.name,
        "image": attempt.user.image,
        "email_verified": now,
    }
    account_fields = attempt.account.account_fields()

    try:
        if context.atomic_sign_up:
            user, _ = storage.create_user_with_account(
                user=user_fields, account=account_fields
            )
        else:
            user = storage.create_user(**user_fields)
            storage.create_account(user_id=user.id, **account_fields)
    except Exception as e:
        logger.error(
            "Failed to create user for %s account %s",
            attempt.account.provider,
            attempt.account.provider_account_id,
            exc_info=e,
        )
        return Deny(DenyReason.PERSISTENCE_FAILURE)

    logger.info("Created user %s with %s account", user.id, attempt.account.provider)

    return Allow(user_id=user.id)
