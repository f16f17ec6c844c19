"""Request identity resolution and local-user dependencies."""

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from unbounded_figures.config import Settings, get_settings
from unbounded_figures.database import get_db
from unbounded_figures.schemas.external import ExternalIdentity
from unbounded_figures.services.identity import (
    IdentityProviderClient,
    get_identity_client,
    resolve_identity,
)
from unbounded_figures.services.users import get_by_auth_id

if TYPE_CHECKING:
    from unbounded_figures.models.user import User

# Bearer token issued by the identity provider; optional so that anonymous
# requests reach the handlers that accept them.
bearer_scheme = HTTPBearer(auto_error=False)

NOT_PROVISIONED_DETAIL = "Local user not initialized. Call /api/me/ensure first."


def extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
) -> str | None:
    """Read the access token from the Authorization header or the session cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name) or None


async def get_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
    client: Annotated[IdentityProviderClient | None, Depends(get_identity_client)],
) -> ExternalIdentity | None:
    """Resolve the caller's external identity, or None for anonymous callers.

    A token that is present but not accepted counts as anonymous.
    """
    token = extract_token(request, credentials, settings)
    if token is None:
        return None
    return await resolve_identity(token, settings, client)


async def get_required_identity(
    identity: Annotated[ExternalIdentity | None, Depends(get_identity)],
) -> ExternalIdentity:
    """Require an authenticated external identity.

    Raises:
        HTTPException 401: If the request carries no accepted token
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def _get_seed_user(db: AsyncSession, settings: Settings):
    """The development seed user, when the bypass is switched on."""
    # Import here to avoid circular import
    from unbounded_figures.models.user import User

    if not settings.dev_bypass_active:
        return None
    result = await db.execute(select(User).where(User.id == settings.dev_seed_user_id))
    return result.scalar_one_or_none()


async def get_optional_user(
    identity: Annotated[ExternalIdentity | None, Depends(get_identity)],
    settings: Annotated[Settings, Depends(get_settings)],
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's local user if there is one, else None.

    Anonymous callers resolve to the seed user only under the
    development bypass.
    """
    if identity is None:
        return await _get_seed_user(db, settings)
    return await get_by_auth_id(db, identity.subject)


async def get_current_user(
    identity: Annotated[ExternalIdentity | None, Depends(get_identity)],
    settings: Annotated[Settings, Depends(get_settings)],
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's local user.

    Returns:
        The local User object

    Raises:
        HTTPException 401: If the caller is not authenticated
        HTTPException 409: If the identity has no local user yet
    """
    if identity is None:
        seed_user = await _get_seed_user(db, settings)
        if seed_user is not None:
            return seed_user
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await get_by_auth_id(db, identity.subject)
    if user is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=NOT_PROVISIONED_DETAIL)
    return user


# Type aliases for use in route dependencies
Identity = Annotated[ExternalIdentity, Depends(get_required_identity)]
MaybeIdentity = Annotated[ExternalIdentity | None, Depends(get_identity)]
CurrentUser = Annotated["User", Depends(get_current_user)]
OptionalUser = Annotated["User | None", Depends(get_optional_user)]
