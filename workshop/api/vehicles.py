# -*- coding: utf-8 -*-
"""
Vehicles API Router
"""
from typing import Optional, List
from fastapi import APIRouter, Depends, Query

from workshop.models import Order, Vehicle, VehicleCreate, VehicleUpdate
from workshop.services import EntityStore, GatewayError, ValidationFailed, get_store
from workshop.services.validation import collect_errors, validate_vehicle_draft, validate_year
from workshop.api.errors import gateway_http_error, validation_http_error

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("", response_model=List[Vehicle])
async def get_vehicles(
    search: Optional[str] = Query(None, description="Filter by make, model, number, engine or chassis"),
    refresh: bool = Query(False, description="Reload from the backend first"),
    store: EntityStore = Depends(get_store),
):
    """
    Get list of vehicles.

    - **search**: Optional case-insensitive filter
    - **refresh**: Force a reload from the backend
    """
    if refresh or not store.vehicles:
        await store.load_vehicles()
    return store.filter_vehicles(search)


@router.get("/search", response_model=List[Vehicle])
async def search_vehicles(
    q: str = Query(..., min_length=1, description="Search term"),
    store: EntityStore = Depends(get_store),
):
    """Remote search, the store is not touched"""
    try:
        return await store.search_vehicles(q)
    except GatewayError as e:
        raise gateway_http_error(e)


@router.post("", response_model=Vehicle, status_code=201)
async def create_vehicle(data: VehicleCreate, store: EntityStore = Depends(get_store)):
    """Create a new vehicle"""
    try:
        errors = collect_errors(validate_vehicle_draft(data, prefix=""))
        if errors:
            raise ValidationFailed(errors)
        return await store.add_vehicle(data)
    except ValidationFailed as e:
        raise validation_http_error(e)
    except GatewayError as e:
        raise gateway_http_error(e)


@router.put("/{vehicle_number}", response_model=Vehicle)
async def update_vehicle(vehicle_number: str, patch: VehicleUpdate, store: EntityStore = Depends(get_store)):
    """
    Update a vehicle by registration number.

    The registration number itself cannot be changed.
    """
    try:
        errors = collect_errors([validate_year(patch.year)])
        if errors:
            raise ValidationFailed(errors)
        return await store.update_vehicle(vehicle_number, patch)
    except ValidationFailed as e:
        raise validation_http_error(e)
    except GatewayError as e:
        raise gateway_http_error(e)


@router.get("/{vehicle_id}/orders", response_model=List[Order])
async def get_vehicle_orders(vehicle_id: str, store: EntityStore = Depends(get_store)):
    """Service history of a vehicle, fetched from the backend"""
    try:
        return await store.get_orders_by_vehicle(vehicle_id)
    except GatewayError as e:
        raise gateway_http_error(e)
