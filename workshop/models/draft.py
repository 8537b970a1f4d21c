# -*- coding: utf-8 -*-
"""
Draft Models - uncommitted form state of the order workflow
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CustomerDraft(BaseModel):
    """New customer entered inline"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    name: str = ""
    email: str = ""
    mobile: str = ""
    address: str = ""


class VehicleDraft(BaseModel):
    """New vehicle entered inline"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    vehicle_number: str = Field("", alias="vehicleNumber")
    make: str = ""
    vehicle_model: str = Field("", alias="vehicleModel")
    year: Optional[int] = None
    color: str = ""
    engine_number: str = Field("", alias="engineNumber")
    chassis_number: str = Field("", alias="chassisNumber")


class ServiceDraft(BaseModel):
    """Editable service line"""
    name: str = ""
    description: str = ""
    amount: Optional[float] = 0.0
