import json
import pytest

from workshop.services.gateway import GatewayError
from workshop.services.session import SessionService

USER = {"_id": "u1", "email": "staff@workshop.test", "name": "Staff", "role": "admin"}


class TestSessionService:
    """Unit tests for the persisted session"""

    @pytest.mark.asyncio
    async def test_login_persists_user(self, tmp_path, gateway):
        gateway.login.return_value = USER
        session = SessionService(tmp_path / "session.json")

        user = await session.login(gateway, "staff@workshop.test", "secret")

        assert user.id == "u1"
        assert session.is_authenticated
        restored = SessionService(tmp_path / "session.json")
        assert restored.user.email == "staff@workshop.test"

    @pytest.mark.asyncio
    async def test_failed_login_keeps_signed_out(self, tmp_path, gateway):
        gateway.login.side_effect = GatewayError("Invalid credentials", 401)
        session = SessionService(tmp_path / "session.json")

        with pytest.raises(GatewayError):
            await session.login(gateway, "staff@workshop.test", "wrong")
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_logout_clears_even_if_backend_fails(self, tmp_path, gateway):
        path = tmp_path / "session.json"
        gateway.login.return_value = USER
        gateway.logout.side_effect = GatewayError("Request timeout")
        session = SessionService(path)
        await session.login(gateway, "staff@workshop.test", "secret")

        await session.logout(gateway)

        assert session.user is None
        assert not path.exists()

    def test_corrupt_file_discarded(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")

        session = SessionService(path)

        assert session.user is None
        assert not path.exists()

    def test_saved_with_wire_keys(self, tmp_path):
        from workshop.models import User
        path = tmp_path / "session.json"
        SessionService(path).save(User.model_validate(USER))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["isBlock"] is False
        assert data["id"] == "u1"
