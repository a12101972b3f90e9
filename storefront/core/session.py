"""Session management for assistant conversations"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from ..models.chat import ChatMessage, ParsedProductSummary
from .config import settings

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TurnState(str, Enum):
    """Where the current assistant turn is"""
    AWAITING_USER_INPUT = "awaiting_user_input"
    MODEL_INVOKED = "model_invoked"
    DIRECT_ANSWER = "direct_answer"
    TOOL_REQUESTED = "tool_requested"
    TOOL_EXECUTED = "tool_executed"
    MODEL_INVOKED_WITH_TOOL_RESULT = "model_invoked_with_tool_result"
    IDLE = "idle"


@dataclass(frozen=True)
class UserMessage:
    text: str


@dataclass(frozen=True)
class AssistantMessage:
    text: str
    parsed_products: tuple[ParsedProductSummary, ...] = ()


@dataclass(frozen=True)
class ToolResultMessage:
    tool_name: str
    text: str


ConversationMessage = Union[UserMessage, AssistantMessage, ToolResultMessage]


def to_wire(message: ConversationMessage) -> ChatMessage:
    """Conversation message -> chat wire format"""
    if isinstance(message, UserMessage):
        return ChatMessage(role="user", content=message.text)
    if isinstance(message, AssistantMessage):
        return ChatMessage(role="assistant", content=message.text)
    return ChatMessage(role="tool", content=message.text, tool_name=message.tool_name)


def from_wire(message: ChatMessage) -> ConversationMessage:
    """Chat wire format -> conversation message"""
    if message.role == "user":
        return UserMessage(text=message.content)
    if message.role == "assistant":
        return AssistantMessage(text=message.content)
    return ToolResultMessage(tool_name=message.tool_name or "unknown", text=message.content)


@dataclass
class ChatSession:
    """One open chat widget: append-only history, one turn at a time"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    state: TurnState = TurnState.IDLE
    history: list = field(default_factory=list)
    turn_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def add_message(self, message: ConversationMessage) -> None:
        """Append a message to the conversation history"""
        self.history.append(message)
        self.updated_at = _utcnow()

    def get_recent_messages(self, limit: int = 20) -> list:
        return self.history[-limit:]

    def update_state(self, new_state: TurnState) -> None:
        self.state = new_state
        self.updated_at = _utcnow()

    @property
    def turn_in_flight(self) -> bool:
        return self.turn_lock.locked()


class SessionManager:
    """Manages chat sessions"""

    def __init__(self, max_age_hours: Optional[int] = None):
        self.sessions: dict[str, ChatSession] = {}
        self.max_age_hours = settings.session_max_age_hours if max_age_hours is None else max_age_hours

    def create_session(self) -> ChatSession:
        """Create a new session, dropping sessions idle past max_age_hours"""
        self.cleanup_old_sessions(self.max_age_hours)
        now = _utcnow()
        session = ChatSession(
            session_id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        self.sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session"""
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False

    def cleanup_old_sessions(self, max_age_hours: Optional[int] = None) -> int:
        """Remove idle sessions with no turn in flight"""
        max_age_hours = self.max_age_hours if max_age_hours is None else max_age_hours
        now = _utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if not session.turn_in_flight
            and (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        if old_sessions:
            logger.info(f"Removed {len(old_sessions)} idle chat session(s)")
        return len(old_sessions)


# Singleton instance
session_manager = SessionManager()
