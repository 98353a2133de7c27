# API Routes
from .auth import router as auth_router
from .clarity import router as clarity_router
from .checklists import router as checklists_router
from .views import router as views_router, brain_router

__all__ = [
    "auth_router",
    "clarity_router",
    "checklists_router",
    "views_router",
    "brain_router",
]
