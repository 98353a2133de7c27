"""
View Routes
Everything under /brain is protected; unauthenticated visits are redirected to /auth.
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from ..dependencies import get_checklist_service, require_view_auth
from ..models import User, BrainView, Checklist
from ..services.checklist import ChecklistService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Views"])
brain_router = APIRouter(
    prefix="/brain",
    tags=["Views"],
    dependencies=[Depends(require_view_auth)],
)


@router.get("/auth")
async def auth_view(next_path: Optional[str] = Query(None, alias="next")):
    """Login surface"""
    return {
        "view": "auth",
        "login": "/api/auth/login",
        "signup": "/api/auth/signup",
        "next": next_path or "/brain",
    }


@brain_router.get("", response_model=BrainView)
async def brain_view(
    user: User = Depends(require_view_auth),
    service: ChecklistService = Depends(get_checklist_service),
):
    checklist = await service.current(user.id)
    return BrainView(user=user.public(), checklist=checklist)


@brain_router.get("/checklist", response_model=Optional[Checklist])
async def brain_checklist_view(
    user: User = Depends(require_view_auth),
    service: ChecklistService = Depends(get_checklist_service),
):
    return await service.current(user.id)
