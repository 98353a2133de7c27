"""
Request Dependencies
Each request gets its own identity gateway and guard; services are passed in explicitly.
"""
from typing import Optional
from urllib.parse import quote
import logging

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings
from .database import (
    database,
    get_users_collection,
    get_sessions_collection,
    get_checklists_collection,
)
from .exceptions import StoreError
from .models import User
from .services.checklist import ChecklistService
from .services.encryption import get_encryption
from .services.generator import ChecklistGenerator, get_checklist_generator
from .services.guard import RouteGuard
from .services.identity import IdentityGateway
from .services.store import ChecklistStore

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class LoginRedirect(Exception):
    """Raised by view dependencies; answered with a redirect to the login surface"""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


async def get_identity_gateway() -> IdentityGateway:
    if not await database.check_connection():
        raise StoreError("Database not connected")
    return IdentityGateway(get_users_collection(), get_sessions_collection())


async def get_checklist_store() -> ChecklistStore:
    if not await database.check_connection():
        raise StoreError("Database not connected")
    return ChecklistStore(get_checklists_collection(), get_encryption())


def get_checklist_service(
    generator: ChecklistGenerator = Depends(get_checklist_generator),
    store: ChecklistStore = Depends(get_checklist_store),
) -> ChecklistService:
    return ChecklistService(generator, store)


def get_request_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Bearer token first, then the session cookie"""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def guard_request(gateway: IdentityGateway, token: Optional[str]) -> RouteGuard:
    """Mount a guard, resolve the gateway from the token and return the settled guard"""
    guard = RouteGuard(gateway.stream, login_path=settings.login_path)
    try:
        await gateway.restore(token)
    finally:
        guard.unmount()
    return guard


async def require_auth(
    gateway: IdentityGateway = Depends(get_identity_gateway),
    token: Optional[str] = Depends(get_request_token),
) -> User:
    """Require authenticated user (API routes)"""
    guard = await guard_request(gateway, token)
    if not guard.can_render:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return guard.user


async def require_view_auth(
    request: Request,
    gateway: IdentityGateway = Depends(get_identity_gateway),
    token: Optional[str] = Depends(get_request_token),
) -> User:
    """Require authenticated user (views); otherwise redirect to login"""
    guard = await guard_request(gateway, token)
    if not guard.can_render:
        logger.info(f"Redirecting unauthenticated request for {request.url.path}")
        raise LoginRedirect(f"{guard.redirect_to}?next={quote(request.url.path)}")
    return guard.user
