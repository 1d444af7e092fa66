"""
Authentication — signup, login, and token resolution.

Passwords are bcrypt-hashed; tokens are HMAC-signed claims of
``{id, username}`` valid for ``config.jwt_expiry_seconds``.
Response bodies keep the shapes the front end already consumes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_bearer_token, get_settings, get_user_store
from auth.exceptions import InvalidCredentials, InvalidToken, UsernameTaken
from auth.password import (
    MAX_PASSWORD_BYTES,
    hash_password_async,
    password_too_long,
    verify_password_async,
)
from auth.tokens import issue_token, verify_token
from config.settings import Settings
from database.helpers import UserStore
from database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

MSG_REGISTERED = "User registered successfully"
MSG_MISSING_FIELDS = "Username and password are required."
MSG_PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes."
MSG_USERNAME_TAKEN = "Username already taken."
MSG_BAD_CREDENTIALS = "Username or password incorrect"
ERR_ACCESS_DENIED = "Access Denied"
ERR_INVALID_TOKEN = "Invalid Token"


class CredentialsRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    auth: bool
    token: Optional[str] = None


class UsernameResponse(BaseModel):
    username: str


def _error(status_code: int, **body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


async def authenticate_user(store: UserStore, username: str, password: str) -> User:
    """
    Return the user for a matching username/password pair.

    Raises ``InvalidCredentials`` for an unknown username or a wrong
    password.
    """
    user = await store.find_by_username(username) if username else None
    if user is None:
        raise InvalidCredentials(user_found=False)
    if not await verify_password_async(password, user.password_hash):
        raise InvalidCredentials(user_found=True)
    return user


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    req: CredentialsRequest,
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a new user. No token is issued here."""
    if not req.username or not req.password:
        return _error(status.HTTP_400_BAD_REQUEST, message=MSG_MISSING_FIELDS)
    if password_too_long(req.password):
        return _error(status.HTTP_400_BAD_REQUEST, message=MSG_PASSWORD_TOO_LONG)

    try:
        password_hash = await hash_password_async(req.password, settings.bcrypt_rounds)
        if await store.find_by_username(req.username) is not None:
            return _error(status.HTTP_400_BAD_REQUEST, message=MSG_USERNAME_TAKEN)
        user = await store.insert(req.username, password_hash)
    except UsernameTaken:
        return _error(status.HTTP_400_BAD_REQUEST, message=MSG_USERNAME_TAKEN)
    except (SQLAlchemyError, ValueError) as exc:
        logger.error("Signup failed: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, error=str(exc))

    logger.info("Registered user %s (%s)", user.username, user.id)
    return {"message": MSG_REGISTERED}


@router.post("/login", response_model=LoginResponse)
async def login(
    req: CredentialsRequest,
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Check credentials and hand back a signed token."""
    try:
        user = await authenticate_user(store, req.username or "", req.password or "")
    except InvalidCredentials as exc:
        if exc.user_found:
            return _error(status.HTTP_400_BAD_REQUEST, auth=False, token=None)
        return _error(status.HTTP_400_BAD_REQUEST, message=MSG_BAD_CREDENTIALS)
    except SQLAlchemyError as exc:
        logger.error("Login failed: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, error=str(exc))

    token = issue_token(
        {"id": user.id, "username": user.username},
        settings.jwt_secret,
        settings.jwt_expiry_seconds,
    )
    logger.info("Login: %s (%s)", user.username, user.id)
    return {"auth": True, "token": token}


@router.get("/username", response_model=UsernameResponse)
async def username(
    token: Optional[str] = Depends(get_bearer_token),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Resolve a token to the username it was issued for."""
    if token is None:
        return _error(status.HTTP_401_UNAUTHORIZED, error=ERR_ACCESS_DENIED)

    try:
        claims = verify_token(token, settings.jwt_secret)
    except InvalidToken as exc:
        logger.debug("Rejected token: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, error=ERR_INVALID_TOKEN)

    name = claims.get("username")
    if not isinstance(name, str):
        return _error(status.HTTP_400_BAD_REQUEST, error=ERR_INVALID_TOKEN)
    return {"username": name}
