"""Common dependencies."""
import secrets
from functools import lru_cache
from typing import Optional
from uuid import uuid4

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from passlib.context import CryptContext

from injurylog.config import settings
from injurylog.context import LogContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
security = HTTPBasic()


def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Get or generate request ID."""
    return x_request_id or str(uuid4())


@lru_cache()
def _shared_context() -> LogContext:
    return LogContext.from_settings(settings)


def get_context() -> LogContext:
    """Storage context dependency."""
    return _shared_context()


def _matches(credentials: HTTPBasicCredentials, username: Optional[str], password_hash: Optional[str]) -> bool:
    if not username or not password_hash:
        return False
    correct_username = secrets.compare_digest(credentials.username.encode(), username.encode())
    return correct_username and pwd_context.verify(credentials.password, password_hash)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"},
    )


def verify_user(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """Any configured account may read."""
    if _matches(credentials, settings.EDITOR_USERNAME, settings.EDITOR_PASSWORD_HASH):
        return credentials.username
    if _matches(credentials, settings.VIEWER_USERNAME, settings.VIEWER_PASSWORD_HASH):
        return credentials.username
    raise _unauthorized("Invalid credentials")


def verify_editor(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """Only the editor (physio) account may make changes."""
    if _matches(credentials, settings.EDITOR_USERNAME, settings.EDITOR_PASSWORD_HASH):
        return credentials.username
    raise _unauthorized("You are not authorized to make changes.")
