"""Business logic and external API clients."""

from unbounded_figures.services.base import (
    APIError,
    AuthenticationError,
    BaseAPIClient,
    NotFoundError,
)
from unbounded_figures.services.identity import (
    IdentityProviderClient,
    get_identity_client,
    resolve_identity,
)

__all__ = [
    "APIError",
    "AuthenticationError",
    "BaseAPIClient",
    "NotFoundError",
    "IdentityProviderClient",
    "get_identity_client",
    "resolve_identity",
]
