# Pydantic Models
from .user import User, Session, SignupRequest, LoginRequest, AuthResponse
from .checklist import ChecklistItem, Checklist, ChecklistReplace, BrainView
from .clarity import ClarityRequest, ClarityResponse, ErrorResponse

__all__ = [
    # User
    "User", "Session", "SignupRequest", "LoginRequest", "AuthResponse",
    # Checklist
    "ChecklistItem", "Checklist", "ChecklistReplace", "BrainView",
    # Clarity
    "ClarityRequest", "ClarityResponse", "ErrorResponse",
]
