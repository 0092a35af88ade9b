from portal_client.errors import ApiError, ClientError, ReadOnlySource, SessionExpired, SourceUnavailable
from portal_client.session import FileSessionStore, MemorySessionStore, Session, SessionStore
from portal_client.sources import DataSource, FixtureSource, RemoteSource, select_source
from portal_client.dashboard import AdminDashboard, load_admin_dashboard

__all__ = [
    "AdminDashboard",
    "ApiError",
    "ClientError",
    "DataSource",
    "FileSessionStore",
    "FixtureSource",
    "MemorySessionStore",
    "ReadOnlySource",
    "RemoteSource",
    "Session",
    "SessionExpired",
    "SessionStore",
    "SourceUnavailable",
    "load_admin_dashboard",
    "select_source",
]
