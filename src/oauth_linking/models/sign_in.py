from typing import Any

from pydantic import BaseModel, Field


class OAuthAccount(BaseModel):
    """Credential returned by the provider for this sign-in attempt."""

    provider: str = Field(examples=["github"])
    provider_account_id: str = Field(examples=["583231"])
    type: str = "oauth"
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None
    token_type: str | None = None
    scope: str | None = None
    id_token: str | None = None

    def account_fields(self) -> dict[str, Any]:
        """Fields accepted by ``AccountsStorage.create_account``."""
        return self.model_dump()


class CandidateUser(BaseModel):
    """User the sign-in framework tentatively matched or synthesized."""

    id: str | None = None
    email: str | None = Field(default=None, examples=["octocat@github.com"])
    name: str | None = None
    image: str | None = None


class SignInAttempt(BaseModel):
    account: OAuthAccount
    profile: dict[str, Any] = Field(default_factory=dict)
    user: CandidateUser = Field(default_factory=CandidateUser)

    @property
    def email(self) -> str | None:
        # Providers may report anything under "email", only a string counts
        profile_email = self.profile.get("email")

        if isinstance(profile_email, str) and profile_email:
            return profile_email

        return self.user.email or None
