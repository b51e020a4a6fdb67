"""
Authentication endpoints for user registration, login, and token refresh.

Implements JWT-based stateless authentication:
- POST /register: Create new account (worker role, empty profile)
- POST /login: Authenticate and receive JWT tokens
- POST /refresh: Get new token pair using refresh token
- GET /me: Get current user with resolved role
"""

import logging
from uuid import UUID
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from jose import JWTError
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.core.security import create_access_token, create_refresh_token, decode_token, verify_password
from worknexus.crud import user as user_crud
from worknexus.models.user import User
from worknexus.schemas.user import TokenRefreshRequest, TokenResponse, UserRegisterRequest, UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


def _issue_tokens(user: User) -> TokenResponse:
    claims = {"sub": str(user.id), "role": user.role.value}
    return TokenResponse(
        access_token=create_access_token(data=claims),
        refresh_token=create_refresh_token(data={"sub": str(user.id)}),
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(
    request: UserRegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user account.

    Creates:
    1. User record with hashed password
    2. Empty profile sharing the user's id
    3. The default "user" (worker) role

    Returns JWT tokens for immediate login.
    """
    if user_crud.get_by_email(db, request.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = user_crud.create(db, request.email, request.password, request.full_name)
    logger.info(f"New user registered: {new_user.email}")

    return _issue_tokens(new_user)


@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Authenticate with email (sent as `username`) and password.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account is inactive
    """
    user = user_crud.get_by_email(db, form_data.username)

    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    user_crud.touch_login(db, user)
    logger.info(f"User logged in: {user.email}")

    return _issue_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(
    request: TokenRefreshRequest,
    db: Session = Depends(get_db)
):
    """
    Exchange a refresh token for a new token pair.

    Access tokens are rejected here.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(request.refresh_token)
        if payload.get("type") != "refresh" or payload.get("sub") is None:
            raise credentials_exception
        user_id = UUID(payload["sub"])
    except (JWTError, ValueError):
        raise credentials_exception

    user = user_crud.get_by_id(db, user_id)
    if not user or not user.is_active:
        raise credentials_exception

    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Current user's account and role."""
    return current_user
