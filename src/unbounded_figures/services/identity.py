"""Identity provider integration.

Tokens issued by the hosted auth provider are resolved to an
``ExternalIdentity`` either by verifying the JWT signature locally (when the
shared secret is configured) or by asking the provider who the token
belongs to.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from jose import JWTError, jwt

from unbounded_figures.config import Settings, get_settings
from unbounded_figures.schemas.external import ExternalIdentity, ProviderUser
from unbounded_figures.services.base import AuthenticationError, BaseAPIClient, NotFoundError

logger = logging.getLogger(__name__)


class IdentityProviderClient(BaseAPIClient):
    """Client for the identity provider's user endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the provider client.

        Args:
            base_url: Provider auth base URL. If not provided, uses settings.
            api_key: Project API key sent as ``apikey``. If not provided, uses settings.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        base = base_url or settings.auth_provider_url
        self._api_key = api_key if api_key is not None else settings.auth_provider_api_key

        if not base:
            raise ValueError("Identity provider URL is required")

        super().__init__(base_url=base, timeout=timeout)

    @property
    def default_headers(self) -> dict[str, str]:
        """Return default headers including the project API key."""
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
        return headers

    async def get_user(self, access_token: str) -> ProviderUser:
        """Look up the user an access token was issued to.

        Raises:
            AuthenticationError: If the provider does not accept the token.
        """
        try:
            data = await self.get("user", headers={"Authorization": f"Bearer {access_token}"})
        except NotFoundError as e:
            raise AuthenticationError("Unknown identity") from e
        return ProviderUser.model_validate(data)


def decode_identity_token(token: str, settings: Settings) -> ExternalIdentity | None:
    """Verify a provider-issued JWT with the shared secret.

    Returns:
        The identity in the token, or None if the token is invalid or expired.
    """
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience or None,
        )
    except JWTError:
        return None
    return ExternalIdentity.from_claims(claims)


async def resolve_identity(
    token: str,
    settings: Settings,
    client: IdentityProviderClient | None = None,
) -> ExternalIdentity | None:
    """Resolve an access token to an identity, or None if it is not accepted."""
    if settings.auth_jwt_secret:
        return decode_identity_token(token, settings)

    if client is None:
        logger.warning("No identity verification configured; rejecting token")
        return None

    try:
        user = await client.get_user(token)
    except AuthenticationError:
        return None
    return ExternalIdentity.from_provider_user(user)


async def get_identity_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncGenerator[IdentityProviderClient | None]:
    """Provide the provider client, if one is configured.

    Used as a FastAPI dependency; the client is closed after the request.
    """
    if not settings.auth_provider_url:
        yield None
        return

    client = IdentityProviderClient(
        base_url=settings.auth_provider_url,
        api_key=settings.auth_provider_api_key,
    )
    try:
        yield client
    finally:
        await client.close()
