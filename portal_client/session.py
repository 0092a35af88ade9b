"""
Client-side session.

The token and user live in an explicit ``Session`` object created once at
startup with ``Session.load(store)`` and handed to whatever needs it. It
starts empty when nothing (or nothing readable) is stored and is wiped by
``clear()`` on logout or when the server reports the token expired.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger("portal.client")

OFFLINE_DEMO_PREFIX = "mock_jwt_token_"


class SessionStore(ABC):
    @abstractmethod
    def load(self) -> Optional[dict]:
        ...

    @abstractmethod
    def save(self, data: dict) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemorySessionStore(SessionStore):
    def __init__(self, data: Optional[dict] = None):
        self._data = dict(data) if data else None

    def load(self) -> Optional[dict]:
        return dict(self._data) if self._data else None

    def save(self, data: dict) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None


class FileSessionStore(SessionStore):
    """Session persisted as a small JSON file"""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[dict]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def save(self, data: dict) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, default=str)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


class Session:
    def __init__(self, store: SessionStore, token: Optional[str] = None, user: Optional[dict] = None):
        self.store = store
        self.token = token
        self.user = user

    @classmethod
    def load(cls, store: SessionStore) -> "Session":
        data = store.load() or {}
        token = data.get("token")
        if not isinstance(token, str) or not token:
            return cls(store)
        return cls(store, token, data.get("user") or None)

    def start(self, token: str, user: Optional[dict]) -> None:
        self.token = token
        self.user = user
        self.store.save({"token": token, "user": user})

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.store.clear()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_offline_demo(self) -> bool:
        return bool(self.token) and self.token.startswith(OFFLINE_DEMO_PREFIX)

    @property
    def role(self) -> Optional[str]:
        if not self.user:
            return None
        return str(self.user.get("role") or "").strip().lower() or None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
