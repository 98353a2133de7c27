"""
Checklist Routes
"""
from fastapi import APIRouter, Depends
from typing import Optional
import logging

from ..dependencies import get_checklist_service, require_auth
from ..models import User, Checklist, ChecklistReplace, ClarityRequest, ErrorResponse
from ..services.checklist import ChecklistService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/checklist", tags=["Checklist"])


@router.get("", response_model=Optional[Checklist])
async def get_checklist(
    user: User = Depends(require_auth),
    service: ChecklistService = Depends(get_checklist_service),
):
    """Current checklist, or null if none was generated yet"""
    return await service.current(user.id)


@router.post("/generate", response_model=Checklist, responses={500: {"model": ErrorResponse}})
async def generate_checklist(
    request: ClarityRequest,
    user: User = Depends(require_auth),
    service: ChecklistService = Depends(get_checklist_service),
):
    """Generate a new checklist from raw input, replacing the old one"""
    checklist = await service.generate(user.id, request.raw_input)
    logger.info(f"Checklist generated for {user.id}: {len(checklist.checklist)} items")
    return checklist


@router.put("", response_model=Checklist)
async def replace_checklist(
    request: ChecklistReplace,
    user: User = Depends(require_auth),
    service: ChecklistService = Depends(get_checklist_service),
):
    return await service.replace(user.id, request.checklist)


@router.put("/items/{index}", response_model=Checklist, responses={404: {"model": ErrorResponse}})
async def toggle_checklist_item(
    index: int,
    user: User = Depends(require_auth),
    service: ChecklistService = Depends(get_checklist_service),
):
    """Flip the done flag of one item"""
    return await service.toggle(user.id, index)


@router.delete("")
async def reset_checklist(
    user: User = Depends(require_auth),
    service: ChecklistService = Depends(get_checklist_service),
):
    await service.reset(user.id)
    return {"message": "Checklist cleared"}
