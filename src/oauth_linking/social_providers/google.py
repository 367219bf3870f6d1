from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .provider import Provider


class GoogleProfile(BaseModel):
    """Verification claim of a Google ID token, other claims are ignored.

    See: https://developers.google.com/identity/openid-connect/openid-connect#an-id-tokens-payload
    """

    email_verified: bool | None = Field(default=None, examples=[True])


class GoogleProvider(Provider):
    id = "google"
    name = "Google"
    profile_model = GoogleProfile

    def is_email_verified(self, profile: dict[str, Any]) -> bool:
        parsed = self.parse_profile(profile)

        if not isinstance(parsed, GoogleProfile):
            return False

        return parsed.email_verified is True
