"""Chat wire models for the shopping assistant"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ParsedProductSummary(BaseModel):
    """Product mentioned in assistant text; for rendering only, never for pricing"""
    id: str
    title: str
    price: float = 0.0
    original_price: Optional[float] = None
    discount_percent: Optional[float] = None
    brand: Optional[str] = None
    description: Optional[str] = None


class ChatMessage(BaseModel):
    """One message of the client-held conversation"""
    model_config = ConfigDict(populate_by_name=True)

    role: Literal["user", "assistant", "tool"]
    content: str
    tool_name: Optional[str] = Field(default=None, alias="toolName")


class ChatRequest(BaseModel):
    """Stateless chat request carrying the full conversation"""
    messages: list[ChatMessage] = []


class ChatResponse(BaseModel):
    """Assistant answer plus the products parsed out of it"""
    answer: str
    products: list[ParsedProductSummary] = []


class SessionMessageRequest(BaseModel):
    """Request to send one message within a server-held session"""
    message: str = Field(min_length=1)


class SessionMessageResponse(BaseModel):
    """Response from a session turn"""
    session_id: str
    answer: str
    products: list[ParsedProductSummary] = []
    tool_name: Optional[str] = None
