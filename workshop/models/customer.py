# -*- coding: utf-8 -*-
"""
Customer Pydantic Models
"""
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CustomerBase(BaseModel):
    """Base customer model"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: str = Field(..., description="Display name")
    email: Optional[str] = Field(None, description="Email address")
    mobile: str = Field(..., description="Mobile number, loose format")
    address: Optional[str] = Field(None, description="Postal address")


class CustomerCreate(CustomerBase):
    """Model for creating a new customer"""


class CustomerUpdate(BaseModel):
    """Partial update, addressed by unique code"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None


class Customer(CustomerBase):
    """Customer as returned by the backend"""
    id: str = Field(..., validation_alias=AliasChoices("_id", "id"), description="Server id")
    unique_code: str = Field("", alias="uniqueCode", description="Human-facing unique code")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")
