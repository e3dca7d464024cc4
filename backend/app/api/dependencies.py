from fastapi import Depends, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from typing import Optional

from ..core.config import settings
from ..crud import crud_client
from ..database import get_db
from ..models import Client
from ..schemas.client import TokenData
from ..utils import error_response

# auto_error=False so a missing header is reported as 401 by get_current_user
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Client:
    """Resolve the bearer token to a client.

    No token is a 401; a bad, expired or orphaned token is a 403.
    """
    if not token:
        raise error_response("Token required", {}, status.HTTP_401_UNAUTHORIZED)
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        claims = TokenData(id=int(payload.get("sub")), is_admin=bool(payload.get("is_admin")))
    except (JWTError, TypeError, ValueError):
        raise error_response("Invalid token", {}, status.HTTP_403_FORBIDDEN)
    client = crud_client.get_client(db, claims.id)
    if client is None:
        raise error_response("Invalid token", {}, status.HTTP_403_FORBIDDEN)
    return client


def require_admin(current_user: Client = Depends(get_current_user)) -> Client:
    # Role is read from the stored account, not the token claim
    if not current_user.is_admin:
        raise error_response("Admin access required", {}, status.HTTP_403_FORBIDDEN)
    return current_user
