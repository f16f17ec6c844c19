"""Pydantic schemas for identity provider responses."""

from pydantic import BaseModel, ConfigDict, Field


class ProviderUser(BaseModel):
    """User object returned by the identity provider's ``/user`` endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Provider subject identifier")
    email: str | None = Field(default=None, description="Primary email address")
    role: str | None = Field(default=None, description="Provider-side role claim")


class ExternalIdentity(BaseModel):
    """An authenticated identity, independent of how it was verified."""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(description="Provider subject identifier")
    email: str | None = Field(default=None, description="Email address, if shared")

    @classmethod
    def from_provider_user(cls, user: ProviderUser) -> "ExternalIdentity":
        """Build an identity from a provider user lookup."""
        return cls(subject=user.id, email=user.email)

    @classmethod
    def from_claims(cls, claims: dict) -> "ExternalIdentity | None":
        """Build an identity from verified token claims, if a subject is present."""
        subject = claims.get("sub")
        if not subject:
            return None
        return cls(subject=str(subject), email=claims.get("email"))
