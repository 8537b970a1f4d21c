# Workshop CRM Services
from .gateway import BackendGateway, GatewayError, get_gateway
from .session import SessionService, get_session_service
from .store import EntityStore, get_store
from .validation import ValidationFailed
from .workflow import (
    DraftRegistry, OrderWorkflow, SectionMode, SubmissionBlocked,
    get_draft_registry, update_order_services,
)

__all__ = [
    "BackendGateway",
    "GatewayError",
    "get_gateway",
    "SessionService",
    "get_session_service",
    "EntityStore",
    "get_store",
    "ValidationFailed",
    "DraftRegistry",
    "OrderWorkflow",
    "SectionMode",
    "SubmissionBlocked",
    "get_draft_registry",
    "update_order_services",
]
