"""
Dependency injection for shared clients and resources
"""
import requests

from habitsync.core.config import settings
from habitsync.services.gateway import HabitGateway
from habitsync.services.reconciliation import ReconciliationController
from habitsync.services.session import SessionStore, TokenStorage


def get_http_session() -> requests.Session:
    """Get a requests session for the habit service"""
    http = requests.Session()
    http.headers.update({"Accept": "application/json"})
    return http


def get_session_store() -> SessionStore:
    """Get a session store backed by the configured token file"""
    return SessionStore(TokenStorage(settings.TOKEN_FILE))


def get_gateway(session_store: SessionStore) -> HabitGateway:
    """Get a gateway bound to the given session"""
    return HabitGateway(
        settings.api_base,
        session_store,
        http=get_http_session(),
        timeout=settings.REQUEST_TIMEOUT
    )


def get_controller() -> ReconciliationController:
    """Wire session, gateway and controller from settings"""
    session_store = get_session_store()
    return ReconciliationController(
        get_gateway(session_store),
        session_store,
        dedupe_badges=settings.DEDUPE_BADGES
    )
