# -*- coding: utf-8 -*-
"""
Orders API Router
"""
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query

from workshop.models import Order, ServiceDraft
from workshop.services import (
    EntityStore, GatewayError, ValidationFailed, get_store, update_order_services,
)
from workshop.api.errors import gateway_http_error, validation_http_error

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[Order])
async def get_orders(
    search: Optional[str] = Query(None, description="Filter by order number, customer name or vehicle"),
    refresh: bool = Query(False, description="Reload from the backend first"),
    store: EntityStore = Depends(get_store),
):
    """
    Get list of orders.

    Customers and vehicles are loaded too, the search matches on them.
    """
    if refresh or not store.orders:
        await store.refresh_data()
    return store.filter_orders(search)


@router.get("/{order_number}")
async def get_order(order_number: str, store: EntityStore = Depends(get_store)):
    """
    Get order details with its customer and vehicle.

    - **order_number**: Order number
    """
    order = store.find_order(order_number)
    if not order:
        await store.refresh_data()
        order = store.find_order(order_number)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    customer = store.get_customer(order.customer_id)
    vehicle = store.get_vehicle(order.vehicle_id)
    return {
        "order": order.model_dump(by_alias=True),
        "customer": customer.model_dump(by_alias=True) if customer else None,
        "vehicle": vehicle.model_dump(by_alias=True) if vehicle else None,
        "customerName": customer.name if customer else "Unknown Customer",
        "vehicleInfo": store.describe_vehicle(vehicle),
    }


@router.put("/{order_number}/services", response_model=Order)
async def update_services(
    order_number: str,
    services: List[ServiceDraft],
    store: EntityStore = Depends(get_store),
):
    """
    Replace the service lines of an order.

    The total is recomputed from the lines; it cannot be set directly.
    """
    try:
        return await update_order_services(store, order_number, services)
    except ValidationFailed as e:
        raise validation_http_error(e)
    except GatewayError as e:
        raise gateway_http_error(e)
