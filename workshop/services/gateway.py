# -*- coding: utf-8 -*-
"""
Backend Gateway - thin HTTP client for the workshop REST API
"""
import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import httpx

from workshop.config import GENERIC_ERRORS, get_settings, Settings
from workshop.models import ApiEnvelope, FieldError, errors_to_map

logger = logging.getLogger(__name__)


def _key(value: str) -> str:
    """Escape a key used as a single path segment"""
    return quote(str(value), safe="")


class GatewayError(Exception):
    """Backend API Error"""
    def __init__(self, message: str, status_code: int = None, errors: List[FieldError] = None):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)

    def field_errors(self) -> Dict[str, str]:
        """Backend field errors as a field -> message map"""
        return errors_to_map(self.errors)


class BackendGateway:
    """Service for REST API interactions with the workshop backend"""

    def __init__(
        self,
        settings: Settings = None,
        transport: httpx.AsyncBaseTransport = None,
        on_session_expired: Callable[[], None] = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._on_session_expired = on_session_expired
        # Backend authenticates with HTTP-only cookies
        self._cookies = httpx.Cookies()

    def _get_headers(self) -> dict:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        endpoint: str,
        data: dict = None,
        params: dict = None,
    ) -> Any:
        """Make HTTP request and unwrap the response envelope"""
        url = f"{self.settings.API_URL.rstrip('/')}{endpoint}"
        logger.info(f"[API] {method} {endpoint}")

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.API_TIMEOUT,
                transport=self._transport,
                cookies=self._cookies,
            ) as client:
                response = await client.request(
                    method, url, headers=self._get_headers(), json=data, params=params
                )
                self._cookies.update(response.cookies)
        except httpx.TimeoutException:
            logger.warning(f"[API] Timeout: {method} {endpoint}")
            raise GatewayError("Request timeout")
        except httpx.HTTPError as e:
            logger.error(f"[API] Transport error: {method} {endpoint}: {e}")
            raise GatewayError(GENERIC_ERRORS["transport"])

        return self._unwrap(response)

    def _unwrap(self, response: httpx.Response) -> Any:
        """Return envelope data or raise GatewayError"""
        if response.status_code == 406:
            logger.warning("[API] Session expired")
            if self._on_session_expired:
                self._on_session_expired()

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and "success" in body:
            envelope = ApiEnvelope.model_validate(body)
        elif response.is_success:
            # Not enveloped, take the body as the payload
            return body
        else:
            envelope = ApiEnvelope(success=False)

        if not response.is_success or not envelope.success:
            message = envelope.message or f"HTTP error: {response.status_code}"
            logger.error(f"[API] Response error {response.status_code}: {message}")
            raise GatewayError(message, response.status_code, envelope.errors)

        logger.debug(f"[API] Response {response.status_code}")
        return envelope.data

    async def get(self, endpoint: str, params: dict = None) -> Any:
        return await self._request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: dict = None) -> Any:
        return await self._request("POST", endpoint, data)

    async def put(self, endpoint: str, data: dict) -> Any:
        return await self._request("PUT", endpoint, data)

    # ==================== Auth ====================

    async def login(self, email: str, password: str) -> dict:
        return await self.post("/api/auth/login", {"email": email, "password": password})

    async def logout(self) -> None:
        await self.post("/api/auth/logout")
        self._cookies.clear()

    async def me(self) -> dict:
        return await self.get("/api/auth/me")

    # ==================== Customers ====================

    async def get_customers(self) -> List[dict]:
        return await self.get("/api/customers") or []

    async def create_customer(self, data: dict) -> dict:
        return await self.post("/api/customers", data)

    async def update_customer(self, unique_code: str, data: dict) -> dict:
        return await self.put(f"/api/customers/{_key(unique_code)}", data)

    async def search_customers(self, term: str) -> List[dict]:
        return await self.get("/api/customers/search", params={"q": term}) or []

    # ==================== Vehicles ====================

    async def get_vehicles(self) -> List[dict]:
        return await self.get("/api/vehicles") or []

    async def create_vehicle(self, data: dict) -> dict:
        return await self.post("/api/vehicles", data)

    async def update_vehicle(self, vehicle_number: str, data: dict) -> dict:
        return await self.put(f"/api/vehicles/{_key(vehicle_number)}", data)

    async def search_vehicles(self, term: str) -> List[dict]:
        return await self.get("/api/vehicles/search", params={"q": term}) or []

    # ==================== Orders ====================

    async def get_orders(self) -> List[dict]:
        return await self.get("/api/orders") or []

    async def create_order(self, data: dict) -> dict:
        return await self.post("/api/orders", data)

    async def update_order(self, order_number: str, data: dict) -> dict:
        return await self.put(f"/api/orders/{_key(order_number)}", data)

    async def get_orders_by_customer(self, customer_id: str) -> List[dict]:
        return await self.get(f"/api/orders/customer/{_key(customer_id)}") or []

    async def get_orders_by_vehicle(self, vehicle_id: str) -> List[dict]:
        return await self.get(f"/api/orders/vehicle/{_key(vehicle_id)}") or []


# Singleton instance
_gateway: Optional[BackendGateway] = None


def get_gateway() -> BackendGateway:
    """Get backend gateway singleton"""
    global _gateway
    if _gateway is None:
        from workshop.services.session import get_session_service
        _gateway = BackendGateway(on_session_expired=get_session_service().clear)
    return _gateway
