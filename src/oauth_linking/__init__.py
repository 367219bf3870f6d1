from oauth_linking._context import Context
from oauth_linking._decision import (
    Allow,
    Deny,
    DenyReason,
    LinkDecision,
    RedirectReason,
    RedirectWithReason,
)
from oauth_linking._policy import decide_sign_in, verify_and_upsert
from oauth_linking._verification import EmailVerification, check_email_verification
from oauth_linking.models.sign_in import CandidateUser, OAuthAccount, SignInAttempt
from oauth_linking.utils._redirect import build_link_page_url, to_callback_result

__all__ = [
    "Allow",
    "CandidateUser",
    "Context",
    "Deny",
    "DenyReason",
    "EmailVerification",
    "LinkDecision",
    "OAuthAccount",
    "RedirectReason",
    "RedirectWithReason",
    "SignInAttempt",
    "build_link_page_url",
    "check_email_verification",
    "decide_sign_in",
    "to_callback_result",
    "verify_and_upsert",
]
