# -*- coding: utf-8 -*-
"""
Vehicle Pydantic Models
"""
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def ref_to_id(value: Any) -> Any:
    """Backend may embed the referenced document instead of its id"""
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value


class VehicleBase(BaseModel):
    """Base vehicle model"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    vehicle_number: str = Field(..., alias="vehicleNumber", description="Registration number")
    make: str = Field(..., description="Brand")
    vehicle_model: str = Field(..., alias="vehicleModel", description="Model name")
    year: Optional[int] = Field(None, description="Year of manufacture")
    color: Optional[str] = Field(None, description="Color")
    engine_number: Optional[str] = Field(None, alias="engineNumber")
    chassis_number: Optional[str] = Field(None, alias="chassisNumber")


class VehicleCreate(VehicleBase):
    """Model for creating a new vehicle"""
    customer_id: Optional[str] = Field(None, alias="customerId", description="Owning customer")


class VehicleUpdate(BaseModel):
    """Partial update, addressed by registration number (never changed)"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    make: Optional[str] = None
    vehicle_model: Optional[str] = Field(None, alias="vehicleModel")
    year: Optional[int] = None
    color: Optional[str] = None
    engine_number: Optional[str] = Field(None, alias="engineNumber")
    chassis_number: Optional[str] = Field(None, alias="chassisNumber")
    customer_id: Optional[str] = Field(None, alias="customerId")


class Vehicle(VehicleBase):
    """Vehicle as returned by the backend"""
    id: str = Field(..., validation_alias=AliasChoices("_id", "id"), description="Server id")
    customer_id: Optional[str] = Field(None, alias="customerId", description="Owning customer")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator("customer_id", mode="before")
    @classmethod
    def normalize_customer_ref(cls, value):
        return ref_to_id(value)
