# backend/app/api/auth.py

from fastapi import APIRouter, Depends, status
from jose import jwt
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from ..crud import crud_client
from ..database import get_db
from ..models import Client
from ..schemas.client import ClientCreate, ClientLogin, ClientResponse, AuthResponse
from ..utils import error_response
from .dependencies import get_current_user
from app.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# JWT Configuration
SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    # Token lifetime follows wall time, not the ledger clock
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def token_for(client: Client, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(
        {"sub": str(client.id), "id": client.id, "is_admin": bool(client.is_admin)},
        expires_delta,
    )


def _auth_payload(client: Client) -> AuthResponse:
    return AuthResponse(
        token=token_for(client),
        user=ClientResponse.model_validate(client),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(client_data: ClientCreate, db: Session = Depends(get_db)):
    db_client = crud_client.create_client(db, client_data)
    return _auth_payload(db_client)


@router.post("/login", response_model=AuthResponse)
def login(credentials: ClientLogin, db: Session = Depends(get_db)):
    client = crud_client.authenticate(db, credentials.email, credentials.password)
    if client is None:
        logger.info("Failed login attempt")
        raise error_response(
            "Invalid credentials",
            {},
            status.HTTP_401_UNAUTHORIZED,
        )
    logger.info("Client %s logged in", client.id)
    return _auth_payload(client)


@router.get("/me", response_model=ClientResponse)
def read_me(current_user: Client = Depends(get_current_user)):
    return current_user
