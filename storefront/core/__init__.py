# Core modules

from .config import settings, get_settings
from .identity import Identity, RequestContext, optional_identity, require_identity
from .session import ChatSession, SessionManager, TurnState, session_manager

__all__ = [
    "settings",
    "get_settings",
    "Identity",
    "RequestContext",
    "optional_identity",
    "require_identity",
    "ChatSession",
    "SessionManager",
    "TurnState",
    "session_manager",
]
