# -*- coding: utf-8 -*-
"""
Shared Pydantic Models - backend envelope and field errors
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """Single field-level problem, from local validation or from the backend"""
    field: str = Field(..., description="Field key, e.g. customer.mobile or services[0].amount")
    message: str = Field(..., description="Human readable message")


class ApiEnvelope(BaseModel):
    """Response envelope used by every backend endpoint"""
    success: bool = Field(False, description="True when the backend accepted the request")
    data: Any = Field(None, description="Payload on success")
    message: Optional[str] = Field(None, description="Single error or info message")
    errors: List[FieldError] = Field(default_factory=list, description="Per-field problems")


def errors_to_map(errors: List[FieldError]) -> Dict[str, str]:
    """Fold a list of field errors into a field -> message map (first message wins)"""
    result: Dict[str, str] = {}
    for error in errors:
        result.setdefault(error.field, error.message)
    return result
