from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

from .social_providers import Provider


class EmailVerification(enum.Enum):
    VERIFIED = "verified"
    # The provider is known but reported the email as unverified
    UNVERIFIED = "unverified"
    # No configured provider can vouch for the email
    UNKNOWN_PROVIDER = "unknown_provider"


def check_email_verification(
    provider_id: str,
    profile: dict[str, Any],
    providers: Mapping[str, Provider],
) -> EmailVerification:
    provider = providers.get(provider_id)

    if provider is None:
        return EmailVerification.UNKNOWN_PROVIDER

    if provider.is_email_verified(profile):
        return EmailVerification.VERIFIED

    return EmailVerification.UNVERIFIED
