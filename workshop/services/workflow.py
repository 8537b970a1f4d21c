# -*- coding: utf-8 -*-
"""
Order Composition Workflow

Draft state for creating an order in one go: a customer section and a
vehicle section (each either picks an existing entity or describes a new
one) plus an editable list of service lines. Submission resolves the
customer, then the vehicle, then creates the order. Nothing created
along the way is rolled back if a later step fails.
"""
import logging
import secrets
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from workshop.config import GENERIC_ERRORS, get_settings
from workshop.models import (
    Customer, CustomerCreate, CustomerDraft,
    Vehicle, VehicleCreate, VehicleDraft,
    Order, OrderCreate, OrderServicesUpdate, ServiceDraft, ServiceItem,
)
from workshop.services.gateway import GatewayError
from workshop.services.store import EntityStore
from workshop.services.validation import (
    ValidationFailed, collect_errors, validate_customer_draft,
    validate_required, validate_services, validate_vehicle_draft,
)

logger = logging.getLogger(__name__)


class SubmissionBlocked(Exception):
    """Submit called while a submission is running or after the draft closed"""


class SectionMode(str, Enum):
    """How a section supplies its entity"""
    EXISTING = "existing"
    NEW = "new"


def _clean(value: Optional[str]) -> Optional[str]:
    """Trimmed string, or None when blank"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _to_service_item(draft: ServiceDraft) -> ServiceItem:
    return ServiceItem(
        name=draft.name.strip(),
        description=_clean(draft.description),
        amount=float(draft.amount),
    )


class OrderWorkflow:
    """Multi-section order form with inline customer/vehicle creation"""

    def __init__(self, store: EntityStore):
        self.store = store
        self.is_open = True
        self.is_submitting = False
        self.notification: Optional[Dict[str, str]] = None
        # Latest issued token per autocomplete field
        self._search_tokens = {"customer": 0, "vehicle": 0}
        self.reset()

    def reset(self) -> None:
        """Back to the initial empty draft"""
        self.customer_mode = SectionMode.NEW
        self.selected_customer_id: Optional[str] = None
        self.customer_draft = CustomerDraft()
        self.vehicle_mode = SectionMode.NEW
        self.selected_vehicle_id: Optional[str] = None
        self.vehicle_draft = VehicleDraft()
        self.services: List[ServiceDraft] = []
        self.notes = ""
        self.field_errors: Dict[str, str] = {}
        self.form_error: Optional[str] = None
        self.customer_suggestions: List[Customer] = []
        self.vehicle_suggestions: List[Vehicle] = []

    def close(self) -> None:
        self.is_open = False

    @property
    def total(self) -> float:
        return sum(s.amount or 0 for s in self.services)

    def _clear_errors(self, *keys: str) -> None:
        for key in keys:
            self.field_errors.pop(key, None)

    def _clear_error_prefix(self, prefix: str) -> None:
        for key in [k for k in self.field_errors if k.startswith(prefix)]:
            del self.field_errors[key]

    # ==================== Customer Section ====================

    def set_customer_mode(self, mode: SectionMode) -> None:
        self.customer_mode = SectionMode(mode)
        self._clear_errors("selectedCustomer")
        self._clear_error_prefix("customer.")

    def select_customer(self, customer_id: Optional[str]) -> None:
        self.customer_mode = SectionMode.EXISTING
        self.selected_customer_id = customer_id
        self._clear_errors("selectedCustomer")

    def update_customer_draft(self, **fields: Any) -> None:
        fields = self._field_names(CustomerDraft, fields)
        self.customer_draft = self._merge(self.customer_draft, fields)
        self._clear_errors(*(f"customer.{self._error_key(CustomerDraft, f)}" for f in fields))

    # ==================== Vehicle Section ====================

    def set_vehicle_mode(self, mode: SectionMode) -> None:
        self.vehicle_mode = SectionMode(mode)
        self._clear_errors("selectedVehicle")
        self._clear_error_prefix("vehicle.")

    def select_vehicle(self, vehicle_id: Optional[str]) -> None:
        self.vehicle_mode = SectionMode.EXISTING
        self.selected_vehicle_id = vehicle_id
        self._clear_errors("selectedVehicle")

    def update_vehicle_draft(self, **fields: Any) -> None:
        fields = self._field_names(VehicleDraft, fields)
        self.vehicle_draft = self._merge(self.vehicle_draft, fields)
        self._clear_errors(*(f"vehicle.{self._error_key(VehicleDraft, f)}" for f in fields))

    @staticmethod
    def _field_names(model, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Accept wire aliases (vehicleNumber) as well as attribute names"""
        aliases = {f.alias: name for name, f in model.model_fields.items() if f.alias}
        return {aliases.get(k, k): v for k, v in fields.items()}

    @staticmethod
    def _merge(draft, fields: Dict[str, Any]):
        model = type(draft)
        unknown = [f for f in fields if f not in model.model_fields]
        if unknown:
            raise ValueError(f"Unknown {model.__name__} fields: {', '.join(unknown)}")
        return model.model_validate({**draft.model_dump(), **fields})

    @staticmethod
    def _error_key(model, field: str) -> str:
        return model.model_fields[field].alias or field

    # ==================== Services Section ====================

    def add_service(self, item: ServiceDraft = None, index: int = None) -> ServiceDraft:
        """Insert a service line (appended when no index is given)"""
        item = item or ServiceDraft()
        if index is None:
            self.services.append(item)
        else:
            self.services.insert(index, item)
        self._clear_errors("services")
        return item

    def update_service(self, index: int, **fields: Any) -> ServiceDraft:
        self.services[index] = self._merge(self.services[index], fields)
        self._clear_errors(*(f"services[{index}].{f}" for f in fields))
        return self.services[index]

    def remove_service(self, index: int) -> ServiceDraft:
        removed = self.services.pop(index)
        # Indexes shift, so per-line errors no longer point at the right lines
        self._clear_error_prefix("services[")
        return removed

    def set_notes(self, notes: str) -> None:
        self.notes = notes or ""

    # ==================== Validation & Submission ====================

    def validate(self) -> Dict[str, str]:
        """Collect every violation in one pass; empty map means valid"""
        if self.customer_mode == SectionMode.NEW:
            customer_errors = validate_customer_draft(self.customer_draft)
        else:
            customer_errors = [
                validate_required(self.selected_customer_id, "selectedCustomer", "Customer selection")
            ]
        if self.vehicle_mode == SectionMode.NEW:
            vehicle_errors = validate_vehicle_draft(self.vehicle_draft)
        else:
            vehicle_errors = [
                validate_required(self.selected_vehicle_id, "selectedVehicle", "Vehicle selection")
            ]
        self.field_errors = collect_errors(customer_errors, vehicle_errors, validate_services(self.services))
        return self.field_errors

    async def _resolve_customer(self) -> str:
        if self.customer_mode == SectionMode.EXISTING:
            return self.selected_customer_id
        draft = self.customer_draft
        customer = await self.store.add_customer(CustomerCreate(
            name=draft.name.strip(),
            email=_clean(draft.email),
            mobile=draft.mobile.strip(),
            address=_clean(draft.address),
        ))
        return customer.id

    async def _resolve_vehicle(self, customer_id: str) -> str:
        if self.vehicle_mode == SectionMode.EXISTING:
            return self.selected_vehicle_id
        draft = self.vehicle_draft
        vehicle = await self.store.add_vehicle(VehicleCreate(
            vehicle_number=draft.vehicle_number.strip(),
            make=draft.make.strip(),
            vehicle_model=draft.vehicle_model.strip(),
            year=draft.year,
            color=_clean(draft.color),
            engine_number=_clean(draft.engine_number),
            chassis_number=_clean(draft.chassis_number),
            customer_id=customer_id,
        ))
        return vehicle.id

    async def submit(self) -> Optional[Order]:
        """Validate, then create customer/vehicle as needed and the order.

        Returns the created order, or None when validation or any remote
        step failed; in that case the draft is left untouched. Raises
        SubmissionBlocked if a submission is already running or the draft
        is closed.
        """
        # No await between this check and setting is_submitting below
        if self.is_submitting:
            raise SubmissionBlocked("Order is already being submitted")
        if not self.is_open:
            raise SubmissionBlocked("Draft is closed")

        self.form_error = None
        self.notification = None
        if self.validate():
            return None

        self.is_submitting = True
        try:
            customer_id = await self._resolve_customer()
            vehicle_id = await self._resolve_vehicle(customer_id)
            order = await self.store.add_order(OrderCreate(
                customer_id=customer_id,
                vehicle_id=vehicle_id,
                services=[_to_service_item(s) for s in self.services],
                notes=_clean(self.notes),
            ))
        except GatewayError as e:
            logger.error(f"Error creating order: {e.message}")
            self.field_errors.update(e.field_errors())
            self._fail(e.message)
            return None
        except Exception:
            logger.exception("Unexpected error creating order")
            self._fail(None)
            return None
        finally:
            self.is_submitting = False

        self.reset()
        self.close()
        await self.store.refresh_data()
        self.notification = {"type": "success", "message": "Order created successfully!"}
        logger.info(f"Order {order.order_number} submitted")
        return order

    def _fail(self, message: Optional[str]) -> None:
        self.form_error = message or GENERIC_ERRORS["order_create"]
        self.notification = {"type": "error", "message": f"Failed to create order: {self.form_error}"}

    # ==================== Autocomplete ====================

    async def _search(self, kind: str, query: str, fetch: Callable, key: Callable) -> Optional[list]:
        self._search_tokens[kind] += 1
        token = self._search_tokens[kind]
        term = (query or "").strip()
        if not term:
            setattr(self, f"{kind}_suggestions", [])
            return []

        try:
            results = await fetch(term)
        except GatewayError as e:
            logger.warning(f"{kind} search failed: {e.message}")
            raise

        if token != self._search_tokens[kind] or not self.is_open:
            logger.debug(f"Discarding stale {kind} search for '{term}'")
            return None

        term = term.lower()
        suggestions = [r for r in results if term in (key(r) or "").lower()]
        setattr(self, f"{kind}_suggestions", suggestions)
        return suggestions

    async def search_customers(self, query: str) -> Optional[List[Customer]]:
        """Suggestions whose unique code contains the query; None if superseded.

        GatewayError propagates; suggestions already shown are kept.
        """
        return await self._search("customer", query, self.store.search_customers, lambda c: c.unique_code)

    async def search_vehicles(self, query: str) -> Optional[List[Vehicle]]:
        """Suggestions whose registration number contains the query; None if superseded"""
        return await self._search("vehicle", query, self.store.search_vehicles, lambda v: v.vehicle_number)

    def to_dict(self) -> dict:
        return {
            "isOpen": self.is_open,
            "isSubmitting": self.is_submitting,
            "customer": {
                "mode": self.customer_mode.value,
                "selectedId": self.selected_customer_id,
                "draft": self.customer_draft.model_dump(by_alias=True),
                "suggestions": [c.model_dump(by_alias=True) for c in self.customer_suggestions],
            },
            "vehicle": {
                "mode": self.vehicle_mode.value,
                "selectedId": self.selected_vehicle_id,
                "draft": self.vehicle_draft.model_dump(by_alias=True),
                "suggestions": [v.model_dump(by_alias=True) for v in self.vehicle_suggestions],
            },
            "services": [s.model_dump() for s in self.services],
            "totalAmount": self.total,
            "notes": self.notes,
            "errors": dict(self.field_errors),
            "formError": self.form_error,
            "notification": self.notification,
        }


async def update_order_services(store: EntityStore, order_number: str, items: List[ServiceDraft]) -> Order:
    """Replace the service list of an existing order; total is recomputed"""
    errors = collect_errors(validate_services(items))
    if errors:
        raise ValidationFailed(errors)
    patch = OrderServicesUpdate(services=[_to_service_item(s) for s in items])
    return await store.update_order(order_number, patch)


class DraftRegistry:
    """Open order workflows addressed by draft id.

    A draft expires after DRAFT_TTL seconds without being touched.
    """

    def __init__(self, store: EntityStore, ttl: int = None):
        self.store = store
        self.ttl = ttl if ttl is not None else get_settings().DRAFT_TTL
        self._drafts: Dict[str, OrderWorkflow] = {}
        self._expires: Dict[str, datetime] = {}

    def _generate_id(self) -> str:
        return f"DRAFT-{datetime.now().strftime('%Y%m%d')}-{secrets.token_hex(4).upper()}"

    def _touch(self, draft_id: str) -> None:
        self._expires[draft_id] = datetime.now() + timedelta(seconds=self.ttl)

    def purge_expired(self) -> int:
        """Drop drafts that were not touched within the TTL"""
        now = datetime.now()
        expired = [
            d for d, expires_at in self._expires.items()
            if now >= expires_at and not self._drafts[d].is_submitting
        ]
        for draft_id in expired:
            self.discard(draft_id)
        if expired:
            logger.info(f"Expired {len(expired)} order draft(s)")
        return len(expired)

    def create(self) -> tuple:
        self.purge_expired()
        draft_id = self._generate_id()
        self._drafts[draft_id] = OrderWorkflow(self.store)
        self._touch(draft_id)
        logger.info(f"Opened order draft {draft_id}")
        return draft_id, self._drafts[draft_id]

    def get(self, draft_id: str) -> Optional[OrderWorkflow]:
        self.purge_expired()
        workflow = self._drafts.get(draft_id)
        if workflow:
            self._touch(draft_id)
        return workflow

    def discard(self, draft_id: str) -> None:
        self._expires.pop(draft_id, None)
        workflow = self._drafts.pop(draft_id, None)
        if workflow:
            workflow.close()

    def __len__(self) -> int:
        return len(self._drafts)


# Singleton instance
_draft_registry: Optional[DraftRegistry] = None


def get_draft_registry() -> DraftRegistry:
    """Get draft registry singleton"""
    global _draft_registry
    if _draft_registry is None:
        from workshop.services.store import get_store
        _draft_registry = DraftRegistry(get_store())
    return _draft_registry
