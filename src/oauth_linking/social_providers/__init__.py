from .discord import DiscordProvider
from .github import GitHubProvider
from .google import GoogleProvider
from .provider import Provider


def default_providers() -> list[Provider]:
    return [GitHubProvider(), DiscordProvider(), GoogleProvider()]


__all__ = [
    "DiscordProvider",
    "GitHubProvider",
    "GoogleProvider",
    "Provider",
    "default_providers",
]
