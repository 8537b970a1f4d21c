# -*- coding: utf-8 -*-
"""
Customers API Router
"""
from typing import Optional, List
from fastapi import APIRouter, Depends, Query

from workshop.models import Customer, CustomerCreate, CustomerUpdate, Order
from workshop.services import EntityStore, GatewayError, ValidationFailed, get_store
from workshop.services.validation import (
    collect_errors, validate_customer_draft, validate_email, validate_mobile, validate_required,
)
from workshop.api.errors import gateway_http_error, validation_http_error

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=List[Customer])
async def get_customers(
    search: Optional[str] = Query(None, description="Filter by name, email, mobile, code or address"),
    refresh: bool = Query(False, description="Reload from the backend first"),
    store: EntityStore = Depends(get_store),
):
    """
    Get list of customers.

    - **search**: Optional case-insensitive filter
    - **refresh**: Force a reload from the backend
    """
    if refresh or not store.customers:
        await store.load_customers()
    return store.filter_customers(search)


@router.get("/search", response_model=List[Customer])
async def search_customers(
    q: str = Query(..., min_length=1, description="Search term"),
    store: EntityStore = Depends(get_store),
):
    """Remote search, the store is not touched"""
    try:
        return await store.search_customers(q)
    except GatewayError as e:
        raise gateway_http_error(e)


@router.post("", response_model=Customer, status_code=201)
async def create_customer(data: CustomerCreate, store: EntityStore = Depends(get_store)):
    """
    Create a new customer.

    - **data**: Customer data; mobile needs at least the configured number of digits
    """
    try:
        errors = collect_errors(validate_customer_draft(data, prefix=""))
        if errors:
            raise ValidationFailed(errors)
        return await store.add_customer(data)
    except ValidationFailed as e:
        raise validation_http_error(e)
    except GatewayError as e:
        raise gateway_http_error(e)


@router.put("/{unique_code}", response_model=Customer)
async def update_customer(unique_code: str, patch: CustomerUpdate, store: EntityStore = Depends(get_store)):
    """
    Update a customer by unique code.

    - **unique_code**: Customer unique code
    """
    try:
        # Only fields present in the patch are checked; a blank email clears it
        errors = collect_errors([
            validate_required(patch.name, "name") if patch.name is not None else None,
            validate_mobile(patch.mobile) if patch.mobile is not None else None,
            validate_email(patch.email) if patch.email and patch.email.strip() else None,
        ])
        if errors:
            raise ValidationFailed(errors)
        return await store.update_customer(unique_code, patch)
    except ValidationFailed as e:
        raise validation_http_error(e)
    except GatewayError as e:
        raise gateway_http_error(e)


@router.get("/{customer_id}/orders", response_model=List[Order])
async def get_customer_orders(customer_id: str, store: EntityStore = Depends(get_store)):
    """Orders placed for a customer, fetched from the backend"""
    try:
        return await store.get_orders_by_customer(customer_id)
    except GatewayError as e:
        raise gateway_http_error(e)
