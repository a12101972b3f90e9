"""Chat API routes for the shopping assistant"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import AssistantUnavailable, TurnInProgress
from ..core.session import from_wire, session_manager, to_wire
from ..database.products import product_db
from ..models.chat import (
    ChatRequest,
    ChatResponse,
    SessionMessageRequest,
    SessionMessageResponse,
)
from ..services.assistant import AssistantOrchestrator
from ..services.llm import AnthropicChatModel
from ..services.product_tools import ProductCompareTool, ProductSearchTool

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["Chat"])

chat_model: Optional[AnthropicChatModel] = None
assistant: Optional[AssistantOrchestrator] = None


def get_chat_model() -> AnthropicChatModel:
    """Get or create the language model client"""
    global chat_model
    if chat_model is None:
        try:
            chat_model = AnthropicChatModel()
        except Exception as e:
            logger.error(f"Could not create language model client: {e}", exc_info=True)
            raise AssistantUnavailable(f"Language model client unavailable: {e}") from e
    return chat_model


def get_assistant() -> AssistantOrchestrator:
    """Get or create the shopping assistant"""
    global assistant
    if assistant is None:
        assistant = AssistantOrchestrator(
            model=get_chat_model(),
            search_tool=ProductSearchTool(product_db),
            compare_tool=ProductCompareTool(product_db),
        )
    return assistant


def error_response(error: Exception) -> JSONResponse:
    """Assistant failure -> {"error": ...}"""
    if isinstance(error, AssistantUnavailable):
        return JSONResponse(status_code=502, content={"error": str(error)})
    logger.error(f"Chat API error: {error}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": str(error)})


async def assistant_unavailable_handler(request: Request, exc: AssistantUnavailable) -> JSONResponse:
    return JSONResponse(status_code=502, content={"error": str(exc)})


async def chat_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed chat requests answer {"error": ...}; other routes keep the default body"""
    if not request.url.path.startswith(router.prefix):
        return await request_validation_exception_handler(request, exc)

    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=422, content={"error": f"Invalid request: {problems}"})


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    agent: AssistantOrchestrator = Depends(get_assistant),
):
    """
    Answer the last message of a client-held conversation.

    The full history is sent with every request.
    """
    if not request.messages:
        return JSONResponse(status_code=400, content={"error": "No messages provided"})

    history = [from_wire(message) for message in request.messages]
    try:
        reply = await agent.respond(history)
    except Exception as e:
        return error_response(e)

    return ChatResponse(answer=reply.answer, products=reply.products)


# ==================== Sessions ====================

@router.post("/sessions")
async def create_session():
    """Open a server-held conversation"""
    session = session_manager.create_session()
    return {
        "session_id": session.session_id,
        "state": session.state.value,
        "created_at": session.created_at.isoformat(),
    }


@router.post("/sessions/{session_id}/messages", response_model=SessionMessageResponse)
async def send_message(
    session_id: str,
    request: SessionMessageRequest,
    agent: AssistantOrchestrator = Depends(get_assistant),
):
    """Run one assistant turn; only one turn per session may be in flight"""
    session = session_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    try:
        reply = await agent.run_turn(session, request.message)
    except TurnInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        return error_response(e)

    return SessionMessageResponse(
        session_id=session.session_id,
        answer=reply.answer,
        products=reply.products,
        tool_name=reply.tool_name,
    )


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    """Get session details"""
    session = session_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    return {
        "session_id": session.session_id,
        "state": session.state.value,
        "turn_in_flight": session.turn_in_flight,
        "message_count": len(session.history),
        "created_at": session.created_at.isoformat(),
        "updated_at": session.updated_at.isoformat(),
    }


@router.get("/sessions/{session_id}/history")
async def get_session_history(session_id: str, limit: int = 20):
    """Get conversation history for a session"""
    session = session_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    return {
        "session_id": session.session_id,
        "messages": [
            to_wire(message).model_dump(by_alias=True, exclude_none=True)
            for message in session.get_recent_messages(limit)
        ],
    }


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    """Delete a session"""
    if session_manager.delete_session(session_id):
        return {"message": "Session deleted"}
    raise HTTPException(status_code=404, detail="Session not found")
