"""Scripted stand-in for the upstream gateway."""

import asyncio

from src.modules.inference.models import ModelDescriptor
from src.modules.relay.service import RelayService

MODEL_A = ModelDescriptor("vendor/model-a:free", "Model A")
MODEL_B = ModelDescriptor("vendor/model-b:free", "Model B")
MODEL_C = ModelDescriptor("vendor/model-c:free", "Model C")
REGISTRY = (MODEL_A, MODEL_B, MODEL_C)

HANG = object()


class FakeInference:
    """Replays a fixed outcome per model id.

    An outcome is an exception (the attempt fails), ``HANG`` (the attempt
    never resolves) or a tuple of chunks. A chunk that is itself an
    exception is raised mid-stream. A list of outcomes is played one per
    call, repeating the last entry.
    """

    def __init__(self, outcomes=None, has_credentials=True):
        self.outcomes = outcomes or {}
        self.has_credentials = has_credentials
        self.calls: list[str] = []
        self.messages: list[list[dict]] = []
        self.closed: list[str] = []

    def _outcome(self, messages, model):
        self.calls.append(model)
        self.messages.append(messages)
        outcome = self.outcomes.get(model, RuntimeError(f"{model} is unavailable"))
        if isinstance(outcome, list):
            return outcome.pop(0) if len(outcome) > 1 else outcome[0]
        return outcome

    async def complete(self, messages, model, timeout):
        outcome = self._outcome(messages, model)
        if outcome is HANG:
            await asyncio.Event().wait()
        if isinstance(outcome, Exception):
            raise outcome
        return "".join(outcome)

    async def stream_chat(self, messages, model):
        outcome = self._outcome(messages, model)
        try:
            if outcome is HANG:
                await asyncio.Event().wait()
            if isinstance(outcome, Exception):
                raise outcome
            for chunk in outcome:
                if isinstance(chunk, Exception):
                    raise chunk
                yield chunk
        finally:
            self.closed.append(model)


def make_relay(inference, registry=REGISTRY, **kwargs) -> RelayService:
    kwargs.setdefault("backoff_seconds", 0)
    return RelayService(inference, registry=registry, **kwargs)
