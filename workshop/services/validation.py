# -*- coding: utf-8 -*-
"""
Field Validation Rules

Each rule checks a single value and returns a FieldError or None.
Composite validators return lists so callers can collect every
problem in one pass.
"""
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from workshop.config import get_settings
from workshop.models import FieldError, errors_to_map

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationFailed(Exception):
    """Raised when local validation rejects a form before any network call"""
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(f"Validation failed: {', '.join(sorted(errors))}")


def _label(field: str) -> str:
    name = field.rsplit(".", 1)[-1]
    return name[:1].upper() + name[1:]


def _field(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def validate_required(value: Any, field: str, label: str = None) -> Optional[FieldError]:
    if value is None or not str(value).strip():
        return FieldError(field=field, message=f"{label or _label(field)} is required")
    return None


def validate_email(email: str, field: str = "email") -> Optional[FieldError]:
    if not email or not email.strip():
        return FieldError(field=field, message="Email is required")
    if not EMAIL_RE.match(email.strip()):
        return FieldError(field=field, message="Please enter a valid email address")
    return None


def validate_mobile(mobile: str, field: str = "mobile", min_digits: int = None) -> Optional[FieldError]:
    """Mobile is free-form; only the count of digits in it is checked"""
    if min_digits is None:
        min_digits = get_settings().MOBILE_MIN_DIGITS
    if not mobile or not mobile.strip():
        return FieldError(field=field, message="Mobile number is required")
    digits = re.sub(r"\D", "", mobile)
    if len(digits) < min_digits:
        return FieldError(field=field, message=f"Mobile number must be at least {min_digits} digits")
    return None


def validate_year(year: Optional[int], field: str = "year") -> Optional[FieldError]:
    if year is None:
        return None
    max_year = datetime.now().year + 1
    if year < 1900:
        return FieldError(field=field, message="Year must be 1900 or later")
    if year > max_year:
        return FieldError(field=field, message=f"Year cannot be more than {max_year}")
    return None


def validate_amount(amount: Any, field: str = "amount") -> Optional[FieldError]:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount != amount:
        return FieldError(field=field, message="Amount must be a number")
    if amount <= 0:
        return FieldError(field=field, message="Amount must be greater than 0")
    return None


def validate_service(item, index: int, prefix: str = "services") -> List[FieldError]:
    """Checks one service line; item needs .name and .amount"""
    errors = []
    name_error = validate_required(item.name, f"{prefix}[{index}].name", "Service name")
    if name_error:
        errors.append(name_error)
    amount_error = validate_amount(item.amount, f"{prefix}[{index}].amount")
    if amount_error:
        errors.append(amount_error)
    return errors


def validate_services(items: List, prefix: str = "services") -> List[FieldError]:
    if not items:
        return [FieldError(field=prefix, message="At least one service is required")]
    errors = []
    for index, item in enumerate(items):
        errors.extend(validate_service(item, index, prefix))
    return errors


def validate_customer_draft(draft, prefix: str = "customer", min_digits: int = None) -> List[FieldError]:
    """Checks a new customer (inline draft or standalone form)"""
    errors = [
        validate_required(draft.name, _field(prefix, "name")),
        validate_mobile(draft.mobile, _field(prefix, "mobile"), min_digits),
    ]
    if draft.email and draft.email.strip():
        errors.append(validate_email(draft.email, _field(prefix, "email")))
    return [e for e in errors if e]


def validate_vehicle_draft(draft, prefix: str = "vehicle") -> List[FieldError]:
    errors = [
        validate_required(draft.vehicle_number, _field(prefix, "vehicleNumber"), "Vehicle number"),
        validate_required(draft.make, _field(prefix, "make")),
        validate_required(draft.vehicle_model, _field(prefix, "vehicleModel"), "Model"),
        validate_year(draft.year, _field(prefix, "year")),
    ]
    return [e for e in errors if e]


def collect_errors(*groups: Iterable[Optional[FieldError]]) -> Dict[str, str]:
    """Fold any number of error lists into a single field -> message map"""
    flat = [error for group in groups for error in group if error]
    return errors_to_map(flat)
