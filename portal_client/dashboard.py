import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from portal_client.errors import SourceUnavailable
from portal_client.sources import DataSource, FixtureSource

logger = logging.getLogger("portal.client")

RECENT_DONATIONS = 5


@dataclass
class AdminDashboard:
    finance: dict
    recent_donations: List[dict]
    upcoming_events: List[dict]
    degraded: List[str] = field(default_factory=list)


def _widget(name: str, load: Callable[[], Any], fallback: Callable[[], Any], degraded: List[str]) -> Any:
    # Only network failures fall back; ApiError and SessionExpired reach the caller
    try:
        return load()
    except SourceUnavailable as e:
        logger.warning(f"Dashboard widget '{name}' using placeholder data: {e}")
        degraded.append(name)
        return fallback()


def load_admin_dashboard(source: DataSource, fallback: Optional[DataSource] = None) -> AdminDashboard:
    """
    Load each admin dashboard widget independently.

    A widget whose request cannot reach the API gets the fixture value instead and is listed
    in ``degraded``; the others still show live data.
    """
    fallback = fallback or FixtureSource()
    degraded: List[str] = []

    finance = _widget("finance", source.finance_summary, fallback.finance_summary, degraded)
    donations = _widget("donations", source.donations, fallback.donations, degraded)
    events = _widget("events", source.upcoming_events, fallback.upcoming_events, degraded)

    return AdminDashboard(
        finance=finance,
        recent_donations=donations[:RECENT_DONATIONS],
        upcoming_events=events,
        degraded=degraded,
    )
