# -*- coding: utf-8 -*-
"""
Derived Views for dashboards and reports

Plain functions over the store's current collections. Nothing is cached;
every call recomputes from scratch.
"""
from collections import Counter, defaultdict
from typing import Dict, List

from workshop.models import Customer, Order, Vehicle


def _money(value: float) -> float:
    return round(value, 2)


def total_revenue(orders: List[Order]) -> float:
    return _money(sum(o.total_amount or 0 for o in orders))


def average_order_value(orders: List[Order]) -> float:
    if not orders:
        return 0.0
    return _money(total_revenue(orders) / len(orders))


def service_count(orders: List[Order]) -> int:
    """Number of service lines across all orders"""
    return sum(len(o.services) for o in orders)


def service_type_counts(orders: List[Order]) -> Dict[str, int]:
    counts = Counter()
    for order in orders:
        for service in order.services:
            counts[service.name] += 1
    return dict(counts)


def revenue_by_service_type(orders: List[Order]) -> Dict[str, float]:
    revenue = defaultdict(float)
    for order in orders:
        for service in order.services:
            revenue[service.name] += service.amount or 0
    return {name: _money(amount) for name, amount in revenue.items()}


def _top(values: Dict[str, float], n: int, key_name: str, value_name: str) -> List[dict]:
    ranked = sorted(values.items(), key=lambda kv: kv[1], reverse=True)[:n]
    return [{key_name: k, value_name: v} for k, v in ranked]


def top_services_by_count(orders: List[Order], n: int = 5) -> List[dict]:
    return _top(service_type_counts(orders), n, "type", "count")


def top_services_by_revenue(orders: List[Order], n: int = 5) -> List[dict]:
    return _top(revenue_by_service_type(orders), n, "type", "revenue")


def brand_counts(vehicles: List[Vehicle]) -> Dict[str, int]:
    return dict(Counter(v.make for v in vehicles))


def top_brands(vehicles: List[Vehicle], n: int = 5) -> List[dict]:
    return _top(brand_counts(vehicles), n, "brand", "count")


def vehicles_serviced_count(orders: List[Order]) -> int:
    """Distinct vehicles referenced by orders"""
    return len({o.vehicle_id for o in orders})


def orders_for_customer(orders: List[Order], customer_id: str) -> List[Order]:
    return [o for o in orders if o.customer_id == customer_id]


def orders_for_vehicle(orders: List[Order], vehicle_id: str) -> List[Order]:
    return [o for o in orders if o.vehicle_id == vehicle_id]


def dashboard_summary(
    customers: List[Customer],
    vehicles: List[Vehicle],
    orders: List[Order],
    top_n: int = 5,
) -> dict:
    """Everything the dashboard and reports screens show"""
    return {
        "total_customers": len(customers),
        "total_vehicles": len(vehicles),
        "total_orders": len(orders),
        "total_revenue": total_revenue(orders),
        "average_order_value": average_order_value(orders),
        "services_performed": service_count(orders),
        "vehicles_serviced": vehicles_serviced_count(orders),
        "top_services": top_services_by_count(orders, top_n),
        "top_revenue_services": top_services_by_revenue(orders, top_n),
        "top_brands": top_brands(vehicles, top_n),
    }
