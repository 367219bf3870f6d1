from __future__ import annotations

from typing import Any

from .provider import Provider


class GitHubProvider(Provider):
    id = "github"
    name = "GitHub"

    def is_email_verified(self, profile: dict[str, Any]) -> bool:
        # GitHub only hands out verified addresses to OAuth apps
        return True
