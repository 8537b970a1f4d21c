# -*- coding: utf-8 -*-
"""
Session Service
Persists the signed-in user across restarts (entity data is never persisted)
"""
import json
import logging
from pathlib import Path
from typing import Optional

from workshop.config import get_settings
from workshop.models import User

logger = logging.getLogger(__name__)


class SessionService:
    """Signed-in user storage"""

    def __init__(self, path: Path = None):
        self._path = path or get_settings().DATA_DIR / "session.json"
        self._user: Optional[User] = None
        self._loaded = False

    @property
    def user(self) -> Optional[User]:
        self._restore()
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _restore(self):
        """Load the stored user once; a corrupt file is discarded"""
        if self._loaded:
            return
        self._loaded = True
        if not self._path.exists():
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                self._user = User.model_validate(json.load(f))
            logger.info(f"Restored session for {self._user.email}")
        except ValueError as e:
            logger.error(f"Error restoring session: {e}")
            self._path.unlink(missing_ok=True)

    def save(self, user: User) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(user.model_dump(by_alias=True), f, ensure_ascii=False, indent=2)
        self._user = user
        self._loaded = True

    def clear(self) -> None:
        self._user = None
        self._loaded = True
        self._path.unlink(missing_ok=True)

    async def login(self, gateway, email: str, password: str) -> User:
        """Authenticate against the backend and remember the user"""
        data = await gateway.login(email, password)
        user = User.model_validate(data)
        self.save(user)
        logger.info(f"[Auth] Login successful: {user.email}")
        return user

    async def logout(self, gateway) -> None:
        """Best-effort remote logout; the local session is always dropped"""
        try:
            await gateway.logout()
        except Exception as e:
            logger.warning(f"[Auth] Logout request failed: {e}")
        self.clear()


# Singleton instance
_session_service: Optional[SessionService] = None


def get_session_service() -> SessionService:
    """Get session service singleton"""
    global _session_service
    if _session_service is None:
        _session_service = SessionService()
    return _session_service
