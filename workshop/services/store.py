# -*- coding: utf-8 -*-
"""
Entity Store
In-memory customers, vehicles and orders mirrored from the backend
"""
import asyncio
import logging
from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from workshop.models import (
    Customer, CustomerCreate, CustomerUpdate,
    Vehicle, VehicleCreate, VehicleUpdate,
    Order, OrderCreate,
)
from workshop.services.gateway import BackendGateway, get_gateway

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse(model: Type[M], raw: dict) -> M:
    """Normalize a backend document; `_id` becomes the single `id`"""
    return model.model_validate(raw)


def _payload(data: BaseModel) -> dict:
    return data.model_dump(by_alias=True, exclude_none=True)


def _matches(term: str, *values) -> bool:
    return any(value and term in str(value).lower() for value in values)


class EntityStore:
    """Single source of truth for fetched entities"""

    def __init__(self, gateway: BackendGateway = None):
        self.gateway = gateway or get_gateway()
        self.customers: List[Customer] = []
        self.vehicles: List[Vehicle] = []
        self.orders: List[Order] = []
        self.loading: Dict[str, bool] = {"customers": False, "vehicles": False, "orders": False}

    # ==================== Bulk Loads ====================

    async def _load(self, name: str, fetch, model: Type[M]) -> None:
        """Replace a collection wholesale; on failure keep what we had"""
        self.loading[name] = True
        try:
            raw = await fetch()
            items = []
            for doc in raw:
                try:
                    items.append(_parse(model, doc))
                except ValidationError as e:
                    # One bad document must not block the rest
                    logger.warning(f"Skipping malformed {model.__name__}: {e}")
            setattr(self, name, items)
            logger.info(f"Loaded {len(items)} of {len(raw)} {name}")
        except Exception as e:
            logger.error(f"Error loading {name}: {e}")
        finally:
            self.loading[name] = False

    async def load_customers(self) -> None:
        await self._load("customers", self.gateway.get_customers, Customer)

    async def load_vehicles(self) -> None:
        await self._load("vehicles", self.gateway.get_vehicles, Vehicle)

    async def load_orders(self) -> None:
        await self._load("orders", self.gateway.get_orders, Order)

    async def refresh_data(self) -> None:
        """Reload all three collections concurrently"""
        await asyncio.gather(self.load_customers(), self.load_vehicles(), self.load_orders())

    # ==================== Customers ====================

    async def add_customer(self, data: CustomerCreate) -> Customer:
        raw = await self.gateway.create_customer(_payload(data))
        customer = _parse(Customer, raw)
        self.customers.append(customer)
        logger.info(f"Created customer {customer.unique_code or customer.id}")
        return customer

    async def update_customer(self, unique_code: str, patch: CustomerUpdate) -> Customer:
        raw = await self.gateway.update_customer(unique_code, patch.model_dump(by_alias=True, exclude_unset=True))
        updated = _parse(Customer, raw)
        self.customers = [updated if c.unique_code == unique_code else c for c in self.customers]
        return updated

    async def search_customers(self, term: str) -> List[Customer]:
        raw = await self.gateway.search_customers(term)
        return [_parse(Customer, item) for item in raw]

    # ==================== Vehicles ====================

    async def add_vehicle(self, data: VehicleCreate) -> Vehicle:
        raw = await self.gateway.create_vehicle(_payload(data))
        vehicle = _parse(Vehicle, raw)
        self.vehicles.append(vehicle)
        logger.info(f"Created vehicle {vehicle.vehicle_number}")
        return vehicle

    async def update_vehicle(self, vehicle_number: str, patch: VehicleUpdate) -> Vehicle:
        raw = await self.gateway.update_vehicle(vehicle_number, patch.model_dump(by_alias=True, exclude_unset=True))
        updated = _parse(Vehicle, raw)
        self.vehicles = [updated if v.vehicle_number == vehicle_number else v for v in self.vehicles]
        return updated

    async def search_vehicles(self, term: str) -> List[Vehicle]:
        raw = await self.gateway.search_vehicles(term)
        return [_parse(Vehicle, item) for item in raw]

    # ==================== Orders ====================

    async def add_order(self, data: OrderCreate) -> Order:
        raw = await self.gateway.create_order(_payload(data))
        order = _parse(Order, raw)
        self.orders.append(order)
        logger.info(f"Created order {order.order_number}")
        return order

    async def update_order(self, order_number: str, patch: BaseModel) -> Order:
        raw = await self.gateway.update_order(order_number, _payload(patch))
        updated = _parse(Order, raw)
        self.orders = [updated if o.order_number == order_number else o for o in self.orders]
        return updated

    async def get_orders_by_customer(self, customer_id: str) -> List[Order]:
        raw = await self.gateway.get_orders_by_customer(customer_id)
        return [_parse(Order, item) for item in raw]

    async def get_orders_by_vehicle(self, vehicle_id: str) -> List[Order]:
        raw = await self.gateway.get_orders_by_vehicle(vehicle_id)
        return [_parse(Order, item) for item in raw]

    # ==================== Lookups ====================

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        return next((c for c in self.customers if c.id == customer_id), None)

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        return next((v for v in self.vehicles if v.id == vehicle_id), None)

    def find_order(self, order_number: str) -> Optional[Order]:
        return next((o for o in self.orders if o.order_number == order_number), None)

    @staticmethod
    def describe_vehicle(vehicle: Optional[Vehicle]) -> str:
        if not vehicle:
            return "Unknown Vehicle"
        return f"{vehicle.year or ''} {vehicle.make} {vehicle.vehicle_model} ({vehicle.vehicle_number})".strip()

    # ==================== List Filters ====================

    def filter_customers(self, term: str = None) -> List[Customer]:
        if not term:
            return list(self.customers)
        term = term.lower()
        return [
            c for c in self.customers
            if _matches(term, c.name, c.email, c.mobile, c.unique_code, c.address)
        ]

    def filter_vehicles(self, term: str = None) -> List[Vehicle]:
        if not term:
            return list(self.vehicles)
        term = term.lower()
        return [
            v for v in self.vehicles
            if _matches(term, v.make, v.vehicle_model, v.vehicle_number, v.engine_number, v.chassis_number)
        ]

    def filter_orders(self, term: str = None) -> List[Order]:
        if not term:
            return list(self.orders)
        term = term.lower()
        result = []
        for order in self.orders:
            customer = self.get_customer(order.customer_id)
            vehicle = self.get_vehicle(order.vehicle_id)
            if _matches(
                term,
                order.order_number,
                customer.name if customer else None,
                vehicle.make if vehicle else None,
                vehicle.vehicle_model if vehicle else None,
                vehicle.vehicle_number if vehicle else None,
            ):
                result.append(order)
        return result


# Singleton instance
_store: Optional[EntityStore] = None


def get_store() -> EntityStore:
    """Get entity store singleton"""
    global _store
    if _store is None:
        _store = EntityStore()
    return _store
