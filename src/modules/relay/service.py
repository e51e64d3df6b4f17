import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from src.config.settings import settings
from src.modules.inference.models import (
    FREE_MODELS,
    ModelDescriptor,
    find_model,
    is_model_allowed,
)
from src.modules.inference.schemas import ChatMessage
from src.modules.inference.service import InferenceService, inference_service
from src.modules.relay.errors import ConfigurationError, upstream_error

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert HTML/CSS/JavaScript developer. Generate clean, modern, responsive HTML code.
Key rules:
1. Use semantic HTML5
2. Responsive with CSS Flexbox/Grid
3. Self-contained single HTML file
4. Wrap code in ```html ``` blocks
5. Keep it simple and focused"""

Attempt = Callable[[ModelDescriptor], Awaitable[Any]]


@dataclass
class RelayResult:
    success: bool
    payload: str | AsyncIterator[str]
    model: ModelDescriptor
    fallback_occurred: bool


class RelayService:
    """Runs a chat request against the model registry with ordered fallback.

    Model selection is shared by both delivery modes: each mode supplies an
    ``attempt`` coroutine that either produces its payload for a model or
    raises. The first model whose attempt succeeds wins.
    """

    def __init__(
        self,
        inference: InferenceService,
        registry: tuple[ModelDescriptor, ...] = FREE_MODELS,
        backoff_seconds: float = settings.relay_backoff_seconds,
        attempt_timeout: float = settings.relay_attempt_timeout_seconds,
        budget_seconds: float = settings.relay_budget_seconds,
        last_resort_retry: bool = settings.relay_last_resort_retry,
    ) -> None:
        if not registry:
            raise ValueError("Model registry must not be empty")
        self._inference = inference
        self._registry = registry
        self._backoff_seconds = backoff_seconds
        self._attempt_timeout = attempt_timeout
        self._budget_seconds = budget_seconds
        self._last_resort_retry = last_resort_retry

    @staticmethod
    def build_messages(messages: Sequence[ChatMessage]) -> list[dict]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            *({"role": msg.role, "content": msg.content} for msg in messages),
        ]

    # ── Delivery modes ──────────────────────────────────────────

    async def relay(
        self, messages: Sequence[ChatMessage], preferred_model_id: str | None = None
    ) -> RelayResult:
        full_messages = self.build_messages(messages)

        async def attempt(model: ModelDescriptor) -> str:
            return await self._inference.complete(
                full_messages, model.id, timeout=self._attempt_timeout
            )

        model, text, fallback_occurred = await self._select(preferred_model_id, attempt)
        logger.info("Model %s returned %d characters", model.id, len(text))
        return RelayResult(
            success=True, payload=text, model=model, fallback_occurred=fallback_occurred
        )

    async def relay_stream(
        self, messages: Sequence[ChatMessage], preferred_model_id: str | None = None
    ) -> RelayResult:
        full_messages = self.build_messages(messages)

        async def attempt(model: ModelDescriptor) -> AsyncIterator[str]:
            stream = self._inference.stream_chat(full_messages, model.id)
            try:
                first = await asyncio.wait_for(
                    _first_chunk(stream), timeout=self._attempt_timeout
                )
            except asyncio.TimeoutError as exc:
                await stream.aclose()
                raise TimeoutError(
                    f"Stream timeout after {self._attempt_timeout:g}s waiting for {model.id}"
                ) from exc
            except BaseException:
                # Includes cancellation by the selection budget.
                await stream.aclose()
                raise
            return self._forward(model, first, stream)

        model, stream, fallback_occurred = await self._select(preferred_model_id, attempt)
        logger.info("Streaming from model %s", model.id)
        return RelayResult(
            success=True, payload=stream, model=model, fallback_occurred=fallback_occurred
        )

    @staticmethod
    async def _forward(
        model: ModelDescriptor, first: str | None, stream: AsyncIterator[str]
    ) -> AsyncIterator[str]:
        try:
            if first is not None:
                yield first
            async for chunk in stream:
                yield chunk
        except Exception:
            # Selection is final once streaming starts; the body just ends.
            logger.exception("Stream from model %s failed mid-response", model.id)
        finally:
            await stream.aclose()

    # ── Model selection ─────────────────────────────────────────

    async def _select(
        self, preferred_model_id: str | None, attempt: Attempt
    ) -> tuple[ModelDescriptor, Any, bool]:
        if not self._inference.has_credentials:
            logger.error("OPENROUTER_API_KEY is not set")
            raise ConfigurationError("OPENROUTER_API_KEY is not set")
        try:
            return await asyncio.wait_for(
                self._run_fallback(preferred_model_id, attempt),
                timeout=self._budget_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error("Relay budget of %gs exhausted", self._budget_seconds)
            raise upstream_error(
                TimeoutError(f"Relay budget timeout after {self._budget_seconds:g}s")
            ) from exc

    async def _run_fallback(
        self, preferred_model_id: str | None, attempt: Attempt
    ) -> tuple[ModelDescriptor, Any, bool]:
        preferred = None
        if is_model_allowed(preferred_model_id, self._registry):
            preferred = find_model(preferred_model_id, self._registry)
        elif preferred_model_id:
            logger.info("Unknown model %s requested, using fallback order", preferred_model_id)

        def fell_back(model: ModelDescriptor) -> bool:
            return bool(preferred_model_id) and model.id != preferred_model_id

        last_error: Exception | None = None
        if preferred is not None:
            ok, outcome = await self._try(preferred, attempt)
            if ok:
                return preferred, outcome, False
            last_error = outcome

        for model in self._registry:
            if model == preferred:
                continue
            ok, outcome = await self._try(model, attempt)
            if ok:
                if fell_back(model):
                    logger.info("Fell back from %s to %s", preferred_model_id, model.id)
                return model, outcome, fell_back(model)
            last_error = outcome
            await asyncio.sleep(self._backoff_seconds)

        if self._last_resort_retry:
            first = self._registry[0]
            logger.warning(
                "All %d models failed, retrying %s as a last resort",
                len(self._registry), first.id,
            )
            ok, outcome = await self._try(first, attempt)
            if ok:
                return first, outcome, fell_back(first)
            last_error = outcome

        logger.error("No model could serve the request: %s", last_error)
        raise upstream_error(last_error)

    @staticmethod
    async def _try(model: ModelDescriptor, attempt: Attempt) -> tuple[bool, Any]:
        logger.info("Trying model %s", model.id)
        try:
            return True, await attempt(model)
        except Exception as exc:
            logger.warning("Model %s failed: %s", model.id, exc)
            return False, exc


async def _first_chunk(stream: AsyncIterator[str]) -> str | None:
    async for chunk in stream:
        return chunk
    return None


relay_service = RelayService(inference_service)


def get_relay_service() -> RelayService:
    return relay_service
