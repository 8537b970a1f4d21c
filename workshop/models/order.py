# -*- coding: utf-8 -*-
"""
Order Pydantic Models
"""
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator

from .vehicle import ref_to_id


class ServiceItem(BaseModel):
    """Service line embedded in an order"""
    name: str = Field(..., description="Service name")
    description: Optional[str] = Field(None, description="Optional details")
    amount: float = Field(0.0, description="Charged amount")


def sum_amounts(services: List[ServiceItem]) -> float:
    """Order total: sum of service amounts"""
    return sum(s.amount or 0 for s in services)


class OrderCreate(BaseModel):
    """Model for creating a new order"""
    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(..., alias="customerId")
    vehicle_id: str = Field(..., alias="vehicleId")
    services: List[ServiceItem] = Field(default_factory=list)
    notes: Optional[str] = None

    @computed_field(alias="totalAmount")
    @property
    def total_amount(self) -> float:
        return sum_amounts(self.services)


class OrderServicesUpdate(BaseModel):
    """Replacement service list for an existing order"""
    services: List[ServiceItem] = Field(default_factory=list)

    @computed_field(alias="totalAmount")
    @property
    def total_amount(self) -> float:
        return sum_amounts(self.services)


class Order(BaseModel):
    """Order as returned by the backend"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"), description="Server id")
    order_number: str = Field(..., alias="orderNumber", description="Human-readable order number")
    customer_id: str = Field(..., alias="customerId")
    vehicle_id: str = Field(..., alias="vehicleId")
    services: List[ServiceItem] = Field(default_factory=list)
    total_amount: float = Field(0.0, alias="totalAmount")
    notes: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator("customer_id", "vehicle_id", mode="before")
    @classmethod
    def normalize_refs(cls, value):
        return ref_to_id(value)
