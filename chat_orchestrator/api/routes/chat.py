"""
Chat endpoints.

POST /api/chat runs one orchestration per request; the client sends the
full history every time. GET /api/tools lists the registered tools.
"""

import logging
import uuid
from functools import lru_cache

from fastapi import APIRouter, HTTPException

from ...config import config
from ...orchestration import CompletionGateway
from ...orchestrator import ChatOrchestrator
from ...tools import CapabilityRegistry, build_registry
from ...tracing import TracingContext, get_tracing_client
from ..schemas import ChatRequest, ChatResponse, ToolInfo, ToolListResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_gateway() -> CompletionGateway:
    return CompletionGateway(config.gemini)


@lru_cache(maxsize=1)
def get_registry() -> CapabilityRegistry:
    """Process-wide registry, built on first use and never mutated."""
    return build_registry(config.tools, get_gateway().generate_text)


@router.get(
    "/api/tools",
    response_model=ToolListResponse,
    summary="List tools",
    description="List the tools the model may call, in declaration order.",
)
def list_tools() -> ToolListResponse:
    return ToolListResponse(
        tools=[
            ToolInfo(name=d.name, description=d.description, parameters=d.parameters)
            for d in get_registry().describe_all()
        ]
    )


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    summary="Chat",
    description=(
        "Answer a message, calling tools as the model requests them. "
        "Tool-budget and model-service failures are reported in `reply`."
    ),
)
def chat(request: ChatRequest) -> ChatResponse:
    execution_id = f"exec-{uuid.uuid4().hex[:8]}"
    logger.info(f"[{execution_id}] Processing chat request: {request.message[:100]}")

    tracing_context = TracingContext(execution_id=execution_id)
    tracing_context.start_trace(
        name="chat",
        query=request.message,
        metadata={"history_length": len(request.history)},
    )

    try:
        orchestrator = ChatOrchestrator(
            app_config=config,
            gateway=get_gateway(),
            registry=get_registry(),
            tracing_context=tracing_context,
            execution_id=execution_id,
        )
        result = orchestrator.handle_chat(
            request.message,
            [item.to_history_message() for item in request.history],
        )
    except Exception as e:
        logger.exception(f"[{execution_id}] Chat request failed: {e}")
        tracing_context.end_trace(output=str(e), status="error")
        _flush_tracing()
        raise HTTPException(status_code=500, detail=str(e))

    tracing_context.end_trace(output=result.reply, status="success")
    _flush_tracing()
    return ChatResponse(reply=result.reply, tools_used=result.tools_used)


def _flush_tracing() -> None:
    """Flush tracing client if available."""
    client = get_tracing_client()
    if client:
        client.flush()
