"""FastAPI authentication dependencies for route protection."""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from riadops.auth.jwt import OPERATOR_SUBJECT, decode_token
from riadops.config import settings

# Requests without a bearer token are rejected before the handler runs
_bearer_scheme = HTTPBearer()


def verify_ops_password(password: str) -> bool:
    """Constant-time comparison against the configured operator password."""
    return secrets.compare_digest(password.encode("utf-8"), settings.ops_password.encode("utf-8"))


async def get_current_operator(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
) -> str:
    """Validate the Bearer token and return its subject.

    Raises:
        HTTPException 401: If the token is invalid, expired or of the wrong type.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise credentials_exception from None

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("sub") != OPERATOR_SUBJECT:
        raise credentials_exception

    return payload["sub"]
