from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .provider import Provider


class DiscordProfile(BaseModel):
    """Verification flag of a Discord user object, other fields are ignored.

    See: https://discord.com/developers/docs/resources/user#user-object
    """

    verified: bool | None = Field(default=None, examples=[True])


class DiscordProvider(Provider):
    id = "discord"
    name = "Discord"
    profile_model = DiscordProfile

    def is_email_verified(self, profile: dict[str, Any]) -> bool:
        parsed = self.parse_profile(profile)

        if not isinstance(parsed, DiscordProfile):
            return False

        return parsed.verified is True
