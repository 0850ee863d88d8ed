"""Auth API router — exchange the operator password for a bearer token."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from riadops.auth.dependencies import get_current_operator, verify_ops_password
from riadops.auth.jwt import create_operator_token
from riadops.schemas.auth import LoginRequest, MessageResponse, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest) -> TokenResponse:
    """Authenticate with the shared operator password."""
    if not verify_ops_password(body.password):
        logger.warning("Rejected operator login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenResponse(**create_operator_token())


@router.get("/me", response_model=MessageResponse)
async def me(operator: str = Depends(get_current_operator)) -> MessageResponse:
    """Confirm that the presented token is still valid."""
    return MessageResponse(message=f"Authenticated as {operator}")
