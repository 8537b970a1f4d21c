import pytest
from fastapi.testclient import TestClient

from workshop.main import app
from workshop.services import get_draft_registry, get_gateway, get_session_service, get_store
from workshop.services.gateway import GatewayError
from workshop.services.session import SessionService
from workshop.services.workflow import DraftRegistry
from tests.factories import customer_doc, order_doc, vehicle_doc


@pytest.fixture
def client(store, gateway, tmp_path):
    """Test client with the entity store and drafts wired to the gateway mock"""
    registry = DraftRegistry(store)
    session = SessionService(tmp_path / "session.json")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_draft_registry] = lambda: registry
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_session_service] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestCustomersAPI:
    """Tests for /api/customers"""

    def test_list_loads_and_filters(self, client, gateway):
        gateway.get_customers.return_value = [
            customer_doc(),
            customer_doc(_id="c2", code="CUS002", name="Ravi Kumar"),
        ]
        response = client.get("/api/customers", params={"search": "ravi"})

        assert response.status_code == 200
        data = response.json()
        assert [c["id"] for c in data] == ["c2"]
        assert data[0]["uniqueCode"] == "CUS002"

    def test_create_rejects_short_mobile(self, client, gateway):
        response = client.post("/api/customers", json={"name": "Ravi", "mobile": "12345"})

        assert response.status_code == 422
        assert "mobile" in response.json()["detail"]["errors"]
        gateway.create_customer.assert_not_called()

    def test_create(self, client, gateway):
        gateway.create_customer.return_value = customer_doc(_id="c9", code="CUS009", name="Ravi")
        response = client.post("/api/customers", json={"name": "Ravi", "mobile": "9000000000"})

        assert response.status_code == 201
        assert response.json()["id"] == "c9"

    def test_backend_error_passed_through(self, client, gateway):
        gateway.create_customer.side_effect = GatewayError(
            "Mobile already registered", 409,
        )
        response = client.post("/api/customers", json={"name": "Ravi", "mobile": "9000000000"})

        assert response.status_code == 409
        assert response.json()["detail"]["message"] == "Mobile already registered"

    def test_unreachable_backend_is_502(self, client, gateway):
        gateway.search_customers.side_effect = GatewayError("Request timeout")
        response = client.get("/api/customers/search", params={"q": "CUS"})
        assert response.status_code == 502

    def test_update_rejects_blank_name(self, client, gateway):
        response = client.put("/api/customers/CUS001", json={"name": "  "})

        assert response.status_code == 422
        assert "name" in response.json()["detail"]["errors"]
        gateway.update_customer.assert_not_called()

    def test_update_rejects_bad_email(self, client, gateway):
        response = client.put("/api/customers/CUS001", json={"email": "not-an-email"})

        assert response.status_code == 422
        assert "email" in response.json()["detail"]["errors"]
        gateway.update_customer.assert_not_called()

    def test_update_partial(self, client, gateway):
        gateway.update_customer.return_value = customer_doc(address="12 MG Road")
        response = client.put("/api/customers/CUS001", json={"address": "12 MG Road"})

        assert response.status_code == 200
        gateway.update_customer.assert_awaited_once_with("CUS001", {"address": "12 MG Road"})


class TestVehiclesAPI:
    def test_update_rejects_bad_year(self, client, gateway):
        response = client.put("/api/vehicles/KA01AB1234", json={"year": 1850})
        assert response.status_code == 422
        gateway.update_vehicle.assert_not_called()


class TestOrdersAPI:
    """Tests for /api/orders"""

    def test_detail(self, client, gateway):
        gateway.get_customers.return_value = [customer_doc()]
        gateway.get_vehicles.return_value = [vehicle_doc(year=2019)]
        gateway.get_orders.return_value = [order_doc()]

        response = client.get("/api/orders/ORD-0001")

        assert response.status_code == 200
        data = response.json()
        assert data["customerName"] == "Asha Rao"
        assert data["vehicleInfo"] == "2019 Honda City (KA01AB1234)"
        assert data["order"]["totalAmount"] == 40.0

    def test_detail_not_found(self, client):
        response = client.get("/api/orders/ORD-404")
        assert response.status_code == 404

    def test_update_services(self, client, gateway):
        gateway.update_order.return_value = order_doc(services=[{"name": "Wash", "amount": 15.0}])
        response = client.put("/api/orders/ORD-0001/services", json=[{"name": "Wash", "amount": 15}])

        assert response.status_code == 200
        assert response.json()["totalAmount"] == 15.0

    def test_update_services_rejects_empty(self, client, gateway):
        response = client.put("/api/orders/ORD-0001/services", json=[])
        assert response.status_code == 422
        gateway.update_order.assert_not_called()


class TestDraftsAPI:
    """Tests for the order draft flow"""

    def test_full_flow_with_existing_entities(self, client, gateway):
        gateway.create_order.return_value = order_doc()

        draft = client.post("/api/drafts").json()
        draft_id = draft["id"]
        client.put(f"/api/drafts/{draft_id}/customer", json={"selectedId": "c1"})
        client.put(f"/api/drafts/{draft_id}/vehicle", json={"selectedId": "v1"})
        state = client.post(f"/api/drafts/{draft_id}/services", json={"name": "Oil change", "amount": 40}).json()
        assert state["totalAmount"] == 40.0

        response = client.post(f"/api/drafts/{draft_id}/submit")

        assert response.status_code == 200
        assert response.json()["order"]["orderNumber"] == "ORD-0001"
        assert client.get(f"/api/drafts/{draft_id}").status_code == 404

    def test_submit_invalid_draft(self, client, gateway):
        draft_id = client.post("/api/drafts").json()["id"]

        response = client.post(f"/api/drafts/{draft_id}/submit")

        assert response.status_code == 422
        errors = response.json()["detail"]["errors"]
        assert errors["services"] == "At least one service is required"
        gateway.create_order.assert_not_called()

    def test_submit_backend_failure(self, client, gateway):
        gateway.create_order.side_effect = GatewayError("Order service unavailable", 503)
        draft_id = client.post("/api/drafts").json()["id"]
        client.put(f"/api/drafts/{draft_id}/customer", json={"selectedId": "c1"})
        client.put(f"/api/drafts/{draft_id}/vehicle", json={"selectedId": "v1"})
        client.post(f"/api/drafts/{draft_id}/services", json={"name": "Oil change", "amount": 40})

        response = client.post(f"/api/drafts/{draft_id}/submit")

        assert response.status_code == 400
        assert response.json()["detail"]["formError"] == "Order service unavailable"
        assert client.get(f"/api/drafts/{draft_id}").json()["isOpen"] is True

    def test_unknown_draft_field(self, client):
        draft_id = client.post("/api/drafts").json()["id"]
        response = client.put(f"/api/drafts/{draft_id}/customer", json={"draft": {"nickname": "A"}})
        assert response.status_code == 422

    def test_service_line_out_of_range(self, client):
        draft_id = client.post("/api/drafts").json()["id"]
        assert client.delete(f"/api/drafts/{draft_id}/services/3").status_code == 404

    def test_suggestions(self, client, gateway):
        gateway.search_vehicles.return_value = [vehicle_doc(), vehicle_doc(_id="v2", number="MH12XY0001")]
        draft_id = client.post("/api/drafts").json()["id"]

        data = client.get(f"/api/drafts/{draft_id}/vehicle-suggestions", params={"q": "ka01"}).json()

        assert data["stale"] is False
        assert [v["id"] for v in data["suggestions"]] == ["v1"]

    def test_suggestions_backend_failure(self, client, gateway):
        gateway.search_customers.side_effect = GatewayError("Request timeout")
        draft_id = client.post("/api/drafts").json()["id"]

        response = client.get(f"/api/drafts/{draft_id}/customer-suggestions", params={"q": "CUS"})

        assert response.status_code == 502
        assert response.json()["detail"]["message"] == "Request timeout"


class TestReportsAndAuth:
    def test_summary(self, client, gateway):
        gateway.get_orders.return_value = [order_doc()]
        response = client.get("/api/reports/summary")

        assert response.status_code == 200
        assert response.json()["total_revenue"] == 40.0

    def test_login_and_me(self, client, gateway):
        gateway.login.return_value = {"_id": "u1", "email": "staff@workshop.test", "name": "Staff"}
        assert client.get("/api/auth/me").status_code == 401

        response = client.post("/api/auth/login", json={"email": "staff@workshop.test", "password": "x"})
        assert response.status_code == 200

        me = client.get("/api/auth/me").json()
        assert me["email"] == "staff@workshop.test"

    def test_login_failure(self, client, gateway):
        gateway.login.side_effect = GatewayError("Invalid credentials", 401)
        response = client.post("/api/auth/login", json={"email": "a@b.co", "password": "x"})
        assert response.status_code == 401
