# Workshop CRM Pydantic Models
from .common import ApiEnvelope, FieldError, errors_to_map
from .customer import Customer, CustomerCreate, CustomerUpdate
from .vehicle import Vehicle, VehicleCreate, VehicleUpdate
from .order import Order, OrderCreate, OrderServicesUpdate, ServiceItem, sum_amounts
from .draft import CustomerDraft, VehicleDraft, ServiceDraft
from .user import User, LoginRequest

__all__ = [
    # Envelope
    "ApiEnvelope",
    "FieldError",
    "errors_to_map",
    # Customer
    "Customer",
    "CustomerCreate",
    "CustomerUpdate",
    # Vehicle
    "Vehicle",
    "VehicleCreate",
    "VehicleUpdate",
    # Order
    "Order",
    "OrderCreate",
    "OrderServicesUpdate",
    "ServiceItem",
    "sum_amounts",
    # Order workflow drafts
    "CustomerDraft",
    "VehicleDraft",
    "ServiceDraft",
    # Auth
    "User",
    "LoginRequest",
]
