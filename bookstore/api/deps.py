from typing import Annotated
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookstore.core.errors import AuthError
from bookstore.core.security import Identity
from bookstore.db.session import get_db
from bookstore.services.auth_service import AuthService

_bearer = HTTPBearer(auto_error=False)

DbSession = Annotated[Session, Depends(get_db)]


def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> Identity:
    """
    Verify the bearer token and attach the caller to the request.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("Authorization header with Bearer token required")

    identity = AuthService.verify(credentials.credentials)
    request.state.user_id = str(identity.id)
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
