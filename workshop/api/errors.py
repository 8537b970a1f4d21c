# -*- coding: utf-8 -*-
"""
Translate service-layer errors into HTTP errors
"""
from fastapi import HTTPException

from workshop.config import GENERIC_ERRORS
from workshop.services import GatewayError, ValidationFailed


def gateway_http_error(e: GatewayError) -> HTTPException:
    """Backend status when there is one, 502 when the backend was unreachable"""
    return HTTPException(
        status_code=e.status_code or 502,
        detail={
            "message": e.message or GENERIC_ERRORS["request"],
            "errors": e.field_errors(),
        },
    )


def validation_http_error(e: ValidationFailed) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": "Validation failed", "errors": e.errors})
