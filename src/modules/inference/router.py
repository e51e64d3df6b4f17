import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from src.modules.inference.models import DEFAULT_MODEL, FREE_MODELS
from src.modules.inference.schemas import ChatRequest, ChatResponse, ModelResponse
from src.modules.relay.service import RelayService, get_relay_service

logger = logging.getLogger(__name__)

router = APIRouter()

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}

TEST_STREAM_CHUNKS = (
    "Hello, ", "this ", "is ", "a ", "streaming ", "response! ",
    "It ", "shows ", "how ", "data ", "can ", "be ", "sent ",
    "incrementally ", "to ", "the ", "client.\n\n",
    "Here's some code:\n",
    "```html\n",
    "<!DOCTYPE html>\n",
    "<html>\n",
    "<head>\n",
    "  <title>Test Page</title>\n",
    "</head>\n",
    "<body>\n",
    "  <h1>Hello World!</h1>\n",
    "  <p>This is a test.</p>\n",
    "</body>\n",
    "</html>\n",
    "```\n\n",
    "Streaming ", "is ", "great ", "for ", "AI ", "responses ",
    "that ", "take ", "time ", "to ", "generate.",
)
TEST_STREAM_DELAY = 0.05


@router.get("/models")
async def list_models() -> dict:
    models = [ModelResponse(id=m.id, name=m.name) for m in FREE_MODELS]
    return {"models": models, "default": DEFAULT_MODEL}


@router.post("/chat", response_model=None)
async def chat(
    request: ChatRequest, relay: RelayService = Depends(get_relay_service)
) -> dict | StreamingResponse:
    logger.info(
        "Chat request: %d messages, model=%s, stream=%s",
        len(request.messages), request.model, request.stream,
    )

    if request.stream:
        result = await relay.relay_stream(request.messages, request.model)
        return StreamingResponse(
            result.payload,
            media_type="text/plain; charset=utf-8",
            headers={
                **STREAM_HEADERS,
                "X-Model-Used": result.model.name,
                "X-Fallback-Occurred": "true" if result.fallback_occurred else "false",
            },
        )

    result = await relay.relay(request.messages, request.model)
    return ChatResponse(
        content=result.payload,
        model=result.model.name,
        fallback_occurred=result.fallback_occurred,
    ).model_dump(by_alias=True)


@router.get("/test-stream")
async def test_stream() -> StreamingResponse:
    async def canned_stream():
        for chunk in TEST_STREAM_CHUNKS:
            await asyncio.sleep(TEST_STREAM_DELAY)
            yield chunk

    return StreamingResponse(
        canned_stream(),
        media_type="text/plain; charset=utf-8",
        headers={
            **STREAM_HEADERS,
            "X-Model-Used": "Test Model",
            "X-Fallback-Occurred": "false",
        },
    )
