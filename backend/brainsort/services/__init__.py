# Business Logic Services
from .encryption import EncryptionService, init_encryption, get_encryption
from .auth import (
    create_access_token,
    decode_access_token,
    verify_password,
    hash_password,
    validate_email,
)
from .identity import CurrentUserStream, IdentityGateway
from .guard import GuardState, RouteGuard
from .generator import (
    ChecklistGenerator,
    get_checklist_generator,
    build_prompt,
    sanitize_reply,
    parse_checklist,
)
from .store import ChecklistStore
from .checklist import ChecklistService

__all__ = [
    # Encryption
    "EncryptionService",
    "init_encryption",
    "get_encryption",
    # Auth
    "create_access_token",
    "decode_access_token",
    "verify_password",
    "hash_password",
    "validate_email",
    # Identity
    "CurrentUserStream",
    "IdentityGateway",
    "GuardState",
    "RouteGuard",
    # Generator
    "ChecklistGenerator",
    "get_checklist_generator",
    "build_prompt",
    "sanitize_reply",
    "parse_checklist",
    # Store
    "ChecklistStore",
    "ChecklistService",
]
