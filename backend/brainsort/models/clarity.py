"""
Clarity (text-to-checklist) Models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List


class ClarityRequest(BaseModel):
    """Raw user thoughts to be turned into tasks"""
    model_config = ConfigDict(populate_by_name=True)

    raw_input: str = Field(alias="rawInput")


class ClarityResponse(BaseModel):
    output: List[str]


class ErrorResponse(BaseModel):
    error: str
    details: str
