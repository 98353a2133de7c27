"""
Checklist Models
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import time


def now_ms() -> int:
    return int(time.time() * 1000)


class ChecklistItem(BaseModel):
    """Single checklist item"""
    text: str
    done: bool = False

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("checklist item text must not be empty")
        return value


class Checklist(BaseModel):
    """The one checklist document a user owns"""
    user_id: str
    checklist: List[ChecklistItem]
    timestamp: int = Field(default_factory=now_ms)


class ChecklistReplace(BaseModel):
    """Request for overwriting the whole checklist"""
    checklist: List[ChecklistItem]


class BrainView(BaseModel):
    """What the protected checklist view needs on load"""
    user: dict
    checklist: Optional[Checklist] = None
