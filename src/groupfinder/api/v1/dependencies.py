"""Shared API dependencies for authentication and service access."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from groupfinder.core.security import TokenError, decode_access_token
from groupfinder.services.authz import ANONYMOUS, Caller
from groupfinder.services.container import ServiceContainer

# Anonymous visitors may browse and submit, so a missing header is not an error.
bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    """Return the services wired at application startup."""
    container: ServiceContainer | None = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up",
        )
    return container


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]


def get_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Caller:
    """Resolve the caller from an optional bearer token.

    Raises:
        HTTPException: If a token is supplied but cannot be validated.
    """
    if credentials is None:
        return ANONYMOUS
    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err
    return Caller.from_claims(claims)


CallerDep = Annotated[Caller, Depends(get_caller)]


def get_signed_in_caller(caller: CallerDep) -> Caller:
    """Require a signed-in caller."""
    if caller.is_anonymous:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return caller


SignedInCallerDep = Annotated[Caller, Depends(get_signed_in_caller)]


def get_admin_caller(caller: SignedInCallerDep, container: ContainerDep) -> Caller:
    """Require a caller with admin capability."""
    if not container.authorizer.is_admin(caller):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You're not authorized to perform this action",
        )
    return caller


AdminCallerDep = Annotated[Caller, Depends(get_admin_caller)]
