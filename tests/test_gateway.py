import json
import pytest
import httpx

from workshop.services.gateway import BackendGateway, GatewayError


def make_gateway(settings, handler, **kwargs):
    return BackendGateway(settings=settings, transport=httpx.MockTransport(handler), **kwargs)


class TestBackendGateway:
    """Unit tests for envelope handling and request shapes"""

    @pytest.mark.asyncio
    async def test_success_envelope_returns_data(self, settings):
        def handler(request):
            assert request.url.path == "/api/customers"
            return httpx.Response(200, json={"success": True, "data": [{"_id": "c1"}]})

        gateway = make_gateway(settings, handler)
        assert await gateway.get_customers() == [{"_id": "c1"}]

    @pytest.mark.asyncio
    async def test_field_errors(self, settings):
        def handler(request):
            return httpx.Response(400, json={
                "success": False,
                "message": "Validation failed",
                "errors": [{"field": "mobile", "message": "Mobile already registered"}],
            })

        gateway = make_gateway(settings, handler)
        with pytest.raises(GatewayError) as exc_info:
            await gateway.create_customer({"name": "Asha"})

        error = exc_info.value
        assert error.status_code == 400
        assert error.message == "Validation failed"
        assert error.field_errors() == {"mobile": "Mobile already registered"}

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_with_200(self, settings):
        def handler(request):
            return httpx.Response(200, json={"success": False, "message": "Order number taken"})

        gateway = make_gateway(settings, handler)
        with pytest.raises(GatewayError, match="Order number taken"):
            await gateway.create_order({})

    @pytest.mark.asyncio
    async def test_non_json_error(self, settings):
        def handler(request):
            return httpx.Response(500, text="Internal Server Error")

        gateway = make_gateway(settings, handler)
        with pytest.raises(GatewayError) as exc_info:
            await gateway.get_orders()
        assert exc_info.value.message == "HTTP error: 500"
        assert exc_info.value.errors == []

    @pytest.mark.asyncio
    async def test_plain_body_passes_through(self, settings):
        def handler(request):
            return httpx.Response(200, json=[{"_id": "v1"}])

        gateway = make_gateway(settings, handler)
        assert await gateway.get_vehicles() == [{"_id": "v1"}]

    @pytest.mark.asyncio
    async def test_transport_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = make_gateway(settings, handler)
        with pytest.raises(GatewayError) as exc_info:
            await gateway.get_customers()
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_session_expired_callback(self, settings):
        expired = []

        def handler(request):
            return httpx.Response(406, json={"success": False, "message": "Token expired"})

        gateway = make_gateway(settings, handler, on_session_expired=lambda: expired.append(True))
        with pytest.raises(GatewayError):
            await gateway.me()
        assert expired == [True]

    @pytest.mark.asyncio
    async def test_update_addressed_by_natural_key(self, settings):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "data": {"_id": "v1"}})

        gateway = make_gateway(settings, handler)
        await gateway.update_vehicle("KA01AB1234", {"color": "Red"})
        assert seen == {"method": "PUT", "path": "/api/vehicles/KA01AB1234", "body": {"color": "Red"}}

    @pytest.mark.asyncio
    async def test_search_sends_query(self, settings):
        def handler(request):
            assert request.url.path == "/api/customers/search"
            assert request.url.params["q"] == "CUS"
            return httpx.Response(200, json={"success": True, "data": []})

        gateway = make_gateway(settings, handler)
        assert await gateway.search_customers("CUS") == []

    @pytest.mark.asyncio
    async def test_orders_by_customer_path(self, settings):
        def handler(request):
            assert request.url.path == "/api/orders/customer/c1"
            return httpx.Response(200, json={"success": True, "data": None})

        gateway = make_gateway(settings, handler)
        assert await gateway.get_orders_by_customer("c1") == []

    @pytest.mark.asyncio
    async def test_natural_key_escaped(self, settings):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(200, json={"success": True, "data": {"_id": "v1"}})

        gateway = make_gateway(settings, handler)
        await gateway.update_vehicle("KA/01?AB#1", {"color": "Red"})
        await gateway.update_order("ORD 1", {"services": []})

        assert seen == [b"/api/vehicles/KA%2F01%3FAB%231", b"/api/orders/ORD%201"]
