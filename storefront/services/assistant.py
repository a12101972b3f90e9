"""
Shopping Assistant

Tool-calling assistant loop:
1. Rebuilds the model transcript from the conversation history
2. Asks the model for a direct answer or a single tool call
3. Runs the tool and asks the model again with its result
4. Extracts product summaries from the final answer
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..core.errors import TurnInProgress
from ..core.session import (
    AssistantMessage,
    ChatSession,
    ConversationMessage,
    ToolResultMessage,
    TurnState,
    UserMessage,
)
from ..models.chat import ParsedProductSummary
from .llm import ChatModel, ToolCall
from .product_tools import ProductCompareTool, ProductSearchTool
from .response_parser import parse_products

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an AI shopping assistant.
- Respond normally to greetings (hi, hello).
- If the user asks about products like details, filters, recommendations, call the "getData" tool.
- If the user asks to compare two products, call the "compareProducts" tool with the product names or descriptions (e.g. "headphones" and "sony", NOT IDs).
- NEVER answer product questions directly. ALWAYS use tools.
- After receiving tool results, provide a clear final answer. Keep each product's "**Title** (ID: id)" heading and its Brand, Price and Description lines as the tool wrote them."""

TOOL_DEFINITIONS = [
    {
        "name": "getData",
        "description": "Search the product catalog by title, description, category or brand",
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search text, e.g. a product name, brand or category",
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": "compareProducts",
        "description": "Compare two products side by side by name or description",
        "input_schema": {
            "type": "object",
            "properties": {
                "product1": {"type": "string", "description": "Name or description of the first product"},
                "product2": {"type": "string", "description": "Name or description of the second product"},
            },
            "required": ["product1", "product2"],
        },
    },
]

UNKNOWN_TOOL_RESULT = "Unknown tool requested"
EMPTY_REPLY_ANSWER = "No response from AI"


@dataclass
class AssistantReply:
    """Outcome of one assistant turn"""
    answer: str
    products: list[ParsedProductSummary] = field(default_factory=list)
    tool_name: Optional[str] = None
    tool_result: Optional[str] = None


def build_transcript(history: list[ConversationMessage]) -> list[dict]:
    """Conversation history -> Anthropic messages (system prompt excluded)"""
    messages = []
    for message in history:
        if isinstance(message, UserMessage):
            messages.append({"role": "user", "content": message.text})
        elif isinstance(message, AssistantMessage):
            messages.append({"role": "assistant", "content": message.text})
        elif isinstance(message, ToolResultMessage):
            messages.append({
                "role": "user",
                "content": f"[Tool result from {message.tool_name}]: {message.text}",
            })
    return messages


class AssistantOrchestrator:
    """
    Runs one user turn at most two model calls long.

    Only the first tool call of a reply is executed; a reply carrying both
    text and a tool call is treated as a tool call.
    """

    def __init__(
        self,
        model: ChatModel,
        search_tool: ProductSearchTool,
        compare_tool: ProductCompareTool,
    ):
        self.model = model
        self.search_tool = search_tool
        self.compare_tool = compare_tool

    def run_tool(self, call: ToolCall) -> str:
        """Dispatch a tool call; always returns text"""
        args = call.arguments or {}
        if call.name == self.search_tool.name:
            logger.info(f"Running {call.name} query={args.get('query')!r}")
            return self.search_tool.run(str(args.get("query") or ""))
        if call.name == self.compare_tool.name:
            logger.info(
                f"Running {call.name} product1={args.get('product1')!r} product2={args.get('product2')!r}"
            )
            return self.compare_tool.run(
                str(args.get("product1") or ""),
                str(args.get("product2") or ""),
            )

        logger.warning(f"Model requested unknown tool: {call.name}")
        return UNKNOWN_TOOL_RESULT

    async def respond(
        self,
        history: list[ConversationMessage],
        session: Optional[ChatSession] = None,
    ) -> AssistantReply:
        """
        Produce the answer to the last message of history.

        When a session is given its state follows the turn. Model failures
        propagate as AssistantUnavailable.
        """
        transcript = build_transcript(history)

        _advance(session, TurnState.MODEL_INVOKED)
        reply = await self.model.generate(SYSTEM_PROMPT, transcript, TOOL_DEFINITIONS)

        if not reply.requests_tool:
            _advance(session, TurnState.DIRECT_ANSWER)
            answer = reply.text or EMPTY_REPLY_ANSWER
            return AssistantReply(answer=answer, products=parse_products(answer))

        if len(reply.tool_calls) > 1:
            logger.info(f"Model requested {len(reply.tool_calls)} tools, running only the first")

        call = reply.tool_calls[0]
        _advance(session, TurnState.TOOL_REQUESTED)
        tool_result = self.run_tool(call)
        _advance(session, TurnState.TOOL_EXECUTED)

        follow_up = transcript + [
            {
                "role": "assistant",
                "content": [
                    {"type": "tool_use", "id": call.id, "name": call.name, "input": call.arguments},
                ],
            },
            {
                "role": "user",
                "content": [
                    {"type": "tool_result", "tool_use_id": call.id, "content": tool_result},
                ],
            },
        ]

        _advance(session, TurnState.MODEL_INVOKED_WITH_TOOL_RESULT)
        final = await self.model.generate(SYSTEM_PROMPT, follow_up, TOOL_DEFINITIONS)
        _advance(session, TurnState.DIRECT_ANSWER)

        answer = final.text or tool_result
        return AssistantReply(
            answer=answer,
            products=parse_products(answer),
            tool_name=call.name,
            tool_result=tool_result,
        )

    async def run_turn(self, session: ChatSession, text: str) -> AssistantReply:
        """
        Run one turn of a server-held session.

        Raises TurnInProgress if the session already has a turn in flight.
        """
        if session.turn_in_flight:
            raise TurnInProgress(session.session_id)

        async with session.turn_lock:
            session.update_state(TurnState.AWAITING_USER_INPUT)
            session.add_message(UserMessage(text=text))
            try:
                reply = await self.respond(list(session.history), session=session)
            finally:
                session.update_state(TurnState.IDLE)

            if reply.tool_name:
                session.add_message(ToolResultMessage(tool_name=reply.tool_name, text=reply.tool_result))
            session.add_message(AssistantMessage(text=reply.answer, parsed_products=tuple(reply.products)))

        logger.info(f"Session {session.session_id} turn complete (tool={reply.tool_name})")
        return reply


def _advance(session: Optional[ChatSession], state: TurnState) -> None:
    if session is not None:
        session.update_state(state)
