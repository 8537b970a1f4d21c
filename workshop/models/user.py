# -*- coding: utf-8 -*-
"""
Signed-in User Model
"""
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class User(BaseModel):
    """Workshop staff member"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    email: str
    name: str
    mobile: Optional[str] = None
    role: str = Field("staff", description="staff or admin")
    is_block: bool = Field(False, alias="isBlock")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class LoginRequest(BaseModel):
    """Credentials posted to the login screen"""
    email: str
    password: str
