import asyncio
from collections.abc import AsyncIterator

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from src.config.settings import settings

ROLE_TO_MESSAGE = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "system": SystemMessage,
}


class InferenceService:
    """Upstream text generation through the OpenRouter gateway."""

    def __init__(self) -> None:
        self._api_key = settings.openrouter_api_key
        self._base_url = settings.openrouter_base_url

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    def _build_chat_model(
        self, model: str, temperature: float, max_tokens: int
    ) -> ChatOpenAI:
        # Fallback happens one level up; the client itself must not retry.
        return ChatOpenAI(
            model=model,
            api_key=self._api_key,
            base_url=self._base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            max_retries=0,
        )

    @staticmethod
    def _to_langchain(messages: list[dict]) -> list[BaseMessage]:
        return [
            ROLE_TO_MESSAGE[msg["role"]](content=msg["content"])
            for msg in messages
        ]

    async def complete(
        self,
        messages: list[dict],
        model: str,
        timeout: float,
        temperature: float = settings.relay_temperature,
        max_tokens: int = settings.relay_max_tokens,
    ) -> str:
        chat_model = self._build_chat_model(model, temperature, max_tokens)
        try:
            response = await asyncio.wait_for(
                chat_model.ainvoke(self._to_langchain(messages)), timeout=timeout
            )
        except asyncio.TimeoutError as exc:
            raise TimeoutError(
                f"Request timeout after {timeout:g}s waiting for {model}"
            ) from exc
        return response.content if isinstance(response.content, str) else ""

    async def stream_chat(
        self,
        messages: list[dict],
        model: str,
        temperature: float = settings.relay_temperature,
        max_tokens: int = settings.relay_max_tokens,
    ) -> AsyncIterator[str]:
        chat_model = self._build_chat_model(model, temperature, max_tokens)
        async for chunk in chat_model.astream(self._to_langchain(messages)):
            if chunk.content:
                yield chunk.content


inference_service = InferenceService()
