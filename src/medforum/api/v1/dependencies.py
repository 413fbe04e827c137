"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from medforum.core.security import decode_subject
from medforum.core.settings import settings
from medforum.db.session import get_db
from medforum.models import User
from medforum.services import ForumServices

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session) -> User:
    try:
        user_id = decode_subject(token)
    except JWTError as err:
        raise _credentials_error() from err
    if user_id is None:
        raise _credentials_error()
    user = db.get(User, user_id)
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        HTTPException: If the token is invalid or the user does not exist.
    """
    return _user_from_token(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the caller when a bearer token is present, otherwise None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


def get_services(db: SessionDep) -> ForumServices:
    """Build the forum services around the request's session."""
    return ForumServices.from_session(db, settings)


# Type aliases for endpoint signatures
CurrentUserDep = Annotated[User, Depends(get_current_user)]
ViewerDep = Annotated[User | None, Depends(get_optional_user)]
ServicesDep = Annotated[ForumServices, Depends(get_services)]
