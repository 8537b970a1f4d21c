# -*- coding: utf-8 -*-
"""
Auth API Router
"""
from fastapi import APIRouter, Depends, HTTPException

from workshop.models import LoginRequest, User
from workshop.services import (
    BackendGateway, GatewayError, SessionService, get_gateway, get_session_service,
)
from workshop.api.errors import gateway_http_error

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=User)
async def login(
    data: LoginRequest,
    gateway: BackendGateway = Depends(get_gateway),
    session: SessionService = Depends(get_session_service),
):
    """
    Sign in against the backend.

    Field problems reported by the backend come back under `errors`.
    """
    try:
        return await session.login(gateway, data.email, data.password)
    except GatewayError as e:
        raise gateway_http_error(e)


@router.post("/logout")
async def logout(
    gateway: BackendGateway = Depends(get_gateway),
    session: SessionService = Depends(get_session_service),
):
    """Sign out; the local session is dropped even if the backend call fails"""
    await session.logout(gateway)
    return {"success": True}


@router.get("/me", response_model=User)
async def me(session: SessionService = Depends(get_session_service)):
    """Currently signed-in user"""
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Not signed in")
    return session.user
