"""
Authentication Routes
"""
from fastapi import APIRouter, Depends, Response
from typing import Optional
import logging

from ..config import settings
from ..dependencies import get_identity_gateway, get_request_token, require_auth
from ..exceptions import AuthError, AuthErrorKind
from ..models import User, SignupRequest, LoginRequest, AuthResponse
from ..services.identity import IdentityGateway

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


def _signed_in(response: Response, gateway: IdentityGateway, user: User) -> AuthResponse:
    response.set_cookie(
        settings.session_cookie_name,
        gateway.token,
        max_age=settings.jwt_expiration_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return AuthResponse(access_token=gateway.token, user=user.public())


@router.post("/signup", response_model=AuthResponse)
async def signup(
    request: SignupRequest,
    response: Response,
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    """Sign up with email/password; the new account is signed in"""
    if request.confirm_password is not None and request.confirm_password != request.password:
        raise AuthError(AuthErrorKind.OTHER, "Password confirmation mismatch",
                        user_message="Passwords do not match.")

    user = await gateway.signup(request.email, request.password)
    return _signed_in(response, gateway, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    user = await gateway.login(request.email, request.password)
    logger.info(f"User logged in: {user.id}")
    return _signed_in(response, gateway, user)


@router.post("/logout")
async def logout(
    response: Response,
    gateway: IdentityGateway = Depends(get_identity_gateway),
    token: Optional[str] = Depends(get_request_token),
):
    """End the current session and drop the cookie"""
    await gateway.restore(token)
    await gateway.logout()
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_me(user: User = Depends(require_auth)):
    return user.public()
