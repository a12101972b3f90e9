"""
Language model client

Thin wrapper around the Anthropic Messages API that reduces each reply to
its text and its tool calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import anthropic
import httpx

from ..core.config import settings
from ..core.errors import AssistantUnavailable

logger = logging.getLogger(__name__)


@dataclass
class ToolCall:
    """A tool invocation requested by the model"""
    id: str
    name: str
    arguments: dict = field(default_factory=dict)


@dataclass
class ModelReply:
    """Text and tool calls of one model response, in response order"""
    text: Optional[str] = None
    tool_calls: list[ToolCall] = field(default_factory=list)

    @property
    def requests_tool(self) -> bool:
        return bool(self.tool_calls)

    @classmethod
    def from_content(cls, content: list[Any]) -> "ModelReply":
        """Build from Anthropic content blocks (text / tool_use)"""
        text = None
        tool_calls = []
        for block in content or []:
            block_type = getattr(block, "type", None)
            if block_type == "text" and text is None and getattr(block, "text", ""):
                text = block.text
            elif block_type == "tool_use":
                tool_calls.append(
                    ToolCall(id=block.id, name=block.name, arguments=dict(block.input or {}))
                )
        return cls(text=text, tool_calls=tool_calls)


class ChatModel(Protocol):
    async def generate(
        self,
        system: str,
        messages: list[dict],
        tools: list[dict],
    ) -> ModelReply: ...


class AnthropicChatModel:
    """ChatModel backed by anthropic.AsyncAnthropic"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model or settings.llm_model
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.llm_max_tokens
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout or settings.llm_timeout_seconds)
        # Single attempt per call, failures surface to the caller
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key or settings.anthropic_api_key,
            http_client=self._http_client,
            max_retries=0,
        )
        logger.info(f"Anthropic chat model initialized: {self.model}")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._client.close()

    async def generate(
        self,
        system: str,
        messages: list[dict],
        tools: list[dict],
    ) -> ModelReply:
        try:
            response = await self._client.messages.create(
                model=self.model,
                system=system,
                messages=messages,
                tools=tools,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except anthropic.APIError as e:
            logger.error(f"Model call failed: {e}", exc_info=True)
            raise AssistantUnavailable(f"Language model request failed: {e}") from e

        return ModelReply.from_content(response.content)
