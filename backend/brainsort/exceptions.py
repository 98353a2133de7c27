"""
Domain Errors
Each error carries an internal message (str(error)) and a user-facing message.
"""
from enum import Enum
from typing import Optional


class BrainSortError(Exception):
    """Base error for the application"""

    status_code = 500
    default_user_message = "Something went wrong. Please try again."

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or self.default_user_message


# ============ AUTH ============

class AuthErrorKind(str, Enum):
    INVALID_CREDENTIAL = "invalid-credential"
    EMAIL_ALREADY_IN_USE = "email-already-in-use"
    OTHER = "other"


_AUTH_USER_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIAL: "Invalid email or password.",
    AuthErrorKind.EMAIL_ALREADY_IN_USE: "Email is already in use. Please try logging in.",
    AuthErrorKind.OTHER: "Authentication error occurred. Please try again.",
}

_AUTH_STATUS = {
    AuthErrorKind.INVALID_CREDENTIAL: 401,
    AuthErrorKind.EMAIL_ALREADY_IN_USE: 400,
    AuthErrorKind.OTHER: 400,
}


class AuthError(BrainSortError):
    """Credential or account conflict reported by the identity provider"""

    def __init__(
        self,
        kind: AuthErrorKind,
        message: Optional[str] = None,
        user_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.kind = kind
        self.status_code = status_code or _AUTH_STATUS[kind]
        super().__init__(message or kind.value, user_message or _AUTH_USER_MESSAGES[kind])


# ============ GENERATION ============

class GenerationErrorKind(str, Enum):
    NETWORK = "network"
    EMPTY = "empty"
    PARSE = "parse"


_GENERATION_USER_MESSAGES = {
    GenerationErrorKind.NETWORK: "Could not reach the AI service. Please try again.",
    GenerationErrorKind.EMPTY: "No checklist returned.",
    GenerationErrorKind.PARSE: "Something went wrong while generating your checklist.",
}


class GenerationError(BrainSortError):
    """The inference call failed or its reply could not be turned into tasks"""

    status_code = 500

    def __init__(self, kind: GenerationErrorKind, message: str, user_message: Optional[str] = None):
        self.kind = kind
        super().__init__(message, user_message or _GENERATION_USER_MESSAGES[kind])


class EmptyInputError(BrainSortError):
    """Raw input is empty or whitespace only"""

    status_code = 400
    default_user_message = "Please enter some thoughts first."


# ============ STORE ============

class StoreErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"


class StoreError(BrainSortError):
    """Transport failure against the document store"""

    status_code = 503
    default_user_message = "Storage is unavailable. Please try again later."

    def __init__(self, message: str, kind: StoreErrorKind = StoreErrorKind.UNAVAILABLE,
                 user_message: Optional[str] = None):
        self.kind = kind
        super().__init__(message, user_message)


class ChecklistNotFoundError(BrainSortError):
    status_code = 404
    default_user_message = "No checklist yet. Generate one first."


class ChecklistItemNotFoundError(BrainSortError):
    status_code = 404
    default_user_message = "Checklist item not found."
