"""
Clarity Route - raw thoughts in, task list out (nothing persisted)
"""
from fastapi import APIRouter, Depends
import logging

from ..dependencies import require_auth
from ..models import User, ClarityRequest, ClarityResponse, ErrorResponse
from ..services.generator import ChecklistGenerator, get_checklist_generator

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Clarity"])


@router.post(
    "/clarity",
    response_model=ClarityResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def clarity(
    request: ClarityRequest,
    user: User = Depends(require_auth),
    generator: ChecklistGenerator = Depends(get_checklist_generator),
):
    """Turn messy thoughts into 5-7 actionable tasks"""
    tasks = await generator.generate(request.raw_input)
    return ClarityResponse(output=tasks)
