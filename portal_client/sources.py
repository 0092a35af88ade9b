"""
Data sources for the portal UI.

``RemoteSource`` talks to the API; ``FixtureSource`` serves the bundled
placeholder data so the UI can run without a backend. ``select_source``
probes the API once at startup and picks one.
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from portal_client import fixtures
from portal_client.errors import ApiError, ReadOnlySource, SessionExpired, SourceUnavailable
from portal_client.session import OFFLINE_DEMO_PREFIX, MemorySessionStore, Session

logger = logging.getLogger("portal.client")


class DataSource(ABC):
    session: Session

    # ----- auth -----
    @abstractmethod
    def login(self, phone: str, password: str) -> dict:
        ...

    def logout(self) -> None:
        self.session.clear()

    # ----- public reads -----
    @abstractmethod
    def list_events(self, status: Optional[str] = None) -> List[dict]:
        ...

    @abstractmethod
    def upcoming_events(self) -> List[dict]:
        ...

    @abstractmethod
    def get_event(self, slug: str) -> dict:
        ...

    @abstractmethod
    def committee(self) -> List[dict]:
        ...

    @abstractmethod
    def gallery(self) -> List[dict]:
        ...

    @abstractmethod
    def site_content(self, section: str) -> dict:
        ...

    # ----- member / admin reads -----
    @abstractmethod
    def my_donations(self) -> List[dict]:
        ...

    @abstractmethod
    def my_fees(self) -> List[dict]:
        ...

    @abstractmethod
    def notifications(self) -> List[dict]:
        ...

    @abstractmethod
    def donations(self, **filters: Any) -> List[dict]:
        ...

    @abstractmethod
    def finance_summary(self) -> dict:
        ...

    # ----- writes -----
    @abstractmethod
    def create_donation(self, payload: dict) -> dict:
        ...

    @abstractmethod
    def mark_notification_read(self, notification_id: str) -> dict:
        ...


class RemoteSource(DataSource):
    def __init__(self, base_url: str, session: Session, timeout: float = 10.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self.session = session
        self.client = httpx.Client(
            base_url=base_url.rstrip("/") + "/api",
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, path: str, authenticated: bool = True, **kwargs) -> Any:
        headers: Dict[str, str] = {}
        token = self.session.token
        # Offline-demo tokens are never sent to the server
        if authenticated and token and not self.session.is_offline_demo:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.client.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"No response from API for {method} {path}: {e}")
            raise SourceUnavailable(str(e)) from e

        if response.status_code == 401 and authenticated and not self.session.is_offline_demo:
            self.session.clear()
            raise SessionExpired("Session expired, please log in again")
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message)
        return response.json()

    def login(self, phone: str, password: str) -> dict:
        data = self._request("POST", "/auth/login", authenticated=False,
                             json={"phone": phone, "password": password})
        self.session.start(data["access_token"], data.get("user"))
        return data

    def list_events(self, status: Optional[str] = None) -> List[dict]:
        params = {"status": status} if status else None
        return self._request("GET", "/events", params=params)

    def upcoming_events(self) -> List[dict]:
        return self._request("GET", "/events/upcoming")

    def get_event(self, slug: str) -> dict:
        return self._request("GET", f"/events/{slug}")

    def committee(self) -> List[dict]:
        return self._request("GET", "/content/committee")

    def gallery(self) -> List[dict]:
        return self._request("GET", "/content/gallery")

    def site_content(self, section: str) -> dict:
        return self._request("GET", f"/content/site/{section}")

    def my_donations(self) -> List[dict]:
        return self._request("GET", "/donations/my")

    def my_fees(self) -> List[dict]:
        return self._request("GET", "/fees/my")

    def notifications(self) -> List[dict]:
        return self._request("GET", "/notifications")

    def donations(self, **filters: Any) -> List[dict]:
        params = {k: v for k, v in filters.items() if v is not None}
        return self._request("GET", "/donations", params=params)

    def finance_summary(self) -> dict:
        return self._request("GET", "/finance/summary")

    def create_donation(self, payload: dict) -> dict:
        return self._request("POST", "/donations", json=payload)

    def mark_notification_read(self, notification_id: str) -> dict:
        return self._request("PUT", f"/notifications/{notification_id}/read")


class FixtureSource(DataSource):
    """Read-only source backed by the bundled placeholder data"""

    def __init__(self, session: Optional[Session] = None):
        self.session = session or Session(MemorySessionStore())

    def _read_only(self, action: str):
        raise ReadOnlySource(f"Cannot {action} while offline")

    def login(self, phone: str, password: str) -> dict:
        user = next((u for u in fixtures.USERS if u["phone"] == phone.strip()), None)
        if user is None or password != fixtures.DEMO_PASSWORD:
            raise ApiError(401, "Invalid mobile number or password")
        token = f"{OFFLINE_DEMO_PREFIX}{user['id']}"
        self.session.start(token, copy.deepcopy(user))
        return {"access_token": token, "token_type": "bearer", "user": copy.deepcopy(user)}

    def list_events(self, status: Optional[str] = None) -> List[dict]:
        events = [e for e in fixtures.EVENTS if e.get("is_public", True)]
        if status:
            events = [e for e in events if e["status"] == status]
        return copy.deepcopy(events)

    def upcoming_events(self) -> List[dict]:
        return copy.deepcopy([e for e in fixtures.EVENTS if e["status"] in ("upcoming", "ongoing")])

    def get_event(self, slug: str) -> dict:
        for event in fixtures.EVENTS:
            if slug in (event["slug"], event["id"]):
                return copy.deepcopy(event)
        raise ApiError(404, "Event not found")

    def committee(self) -> List[dict]:
        return copy.deepcopy(sorted(fixtures.COMMITTEE, key=lambda m: m["order"]))

    def gallery(self) -> List[dict]:
        return copy.deepcopy(fixtures.GALLERY)

    def site_content(self, section: str) -> dict:
        return copy.deepcopy(fixtures.SITE_CONTENT.get(section, {}))

    def _current_user_id(self) -> Optional[str]:
        return (self.session.user or {}).get("id")

    def my_donations(self) -> List[dict]:
        user_id = self._current_user_id()
        return copy.deepcopy([d for d in fixtures.DONATIONS if user_id and d.get("user_id") == user_id])

    def my_fees(self) -> List[dict]:
        user_id = self._current_user_id()
        return copy.deepcopy([f for f in fixtures.FEES if user_id and f.get("user_id") == user_id])

    def notifications(self) -> List[dict]:
        return []

    def donations(self, **filters: Any) -> List[dict]:
        donations = fixtures.DONATIONS
        status = filters.get("status")
        if status and status != "all":
            donations = [d for d in donations if d["status"] == status]
        return copy.deepcopy(donations)

    def finance_summary(self) -> dict:
        return copy.deepcopy(fixtures.FINANCE_SUMMARY)

    def create_donation(self, payload: dict) -> dict:
        self._read_only("submit a donation")

    def mark_notification_read(self, notification_id: str) -> dict:
        self._read_only("update notifications")


def select_source(base_url: str, session: Session, probe_timeout: float = 3.0,
                  transport: Optional[httpx.BaseTransport] = None) -> DataSource:
    """Probe the API health endpoint; use it if it answers, fixtures otherwise"""
    try:
        with httpx.Client(timeout=probe_timeout, transport=transport) as probe:
            response = probe.get(base_url.rstrip("/") + "/api/health")
        if response.status_code == 200:
            return RemoteSource(base_url, session, transport=transport)
        logger.warning(f"API health check returned {response.status_code}; using offline data")
    except httpx.HTTPError as e:
        logger.warning(f"API not reachable at {base_url} ({e}); using offline data")
    return FixtureSource(session)
