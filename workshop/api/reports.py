# -*- coding: utf-8 -*-
"""
Reports API Router - dashboard figures derived from the entity store
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query

from workshop.config import get_settings
from workshop.services import EntityStore, get_store
from workshop.services import reports

router = APIRouter(prefix="/reports", tags=["reports"])


async def _ensure_loaded(store: EntityStore, refresh: bool) -> None:
    if refresh or not (store.customers or store.vehicles or store.orders):
        await store.refresh_data()


@router.get("/summary")
async def get_summary(
    refresh: bool = Query(False, description="Reload from the backend first"),
    top: Optional[int] = Query(None, ge=1, le=50, description="Ranking length"),
    store: EntityStore = Depends(get_store),
):
    """Dashboard statistics"""
    await _ensure_loaded(store, refresh)
    return reports.dashboard_summary(
        store.customers, store.vehicles, store.orders, top or get_settings().TOP_N
    )


@router.get("/services")
async def get_service_breakdown(
    refresh: bool = Query(False),
    store: EntityStore = Depends(get_store),
):
    """Count and revenue per service name"""
    await _ensure_loaded(store, refresh)
    return {
        "counts": reports.service_type_counts(store.orders),
        "revenue": reports.revenue_by_service_type(store.orders),
    }


@router.get("/brands")
async def get_brand_breakdown(
    refresh: bool = Query(False),
    store: EntityStore = Depends(get_store),
):
    """Vehicles per make"""
    await _ensure_loaded(store, refresh)
    return reports.brand_counts(store.vehicles)
