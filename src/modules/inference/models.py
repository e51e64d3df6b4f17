from dataclasses import dataclass


@dataclass(frozen=True)
class ModelDescriptor:
    id: str
    name: str


# Fallback order: most reliable free-tier models first.
FREE_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor("z-ai/glm-4.5-air:free", "GLM-4.5 Air"),
    ModelDescriptor("moonshotai/kimi-k2:free", "Kimi K2"),
    ModelDescriptor("deepseek/deepseek-chat-v3.1:free", "DeepSeek V3.1"),
    ModelDescriptor("google/gemini-2.5-flash-image-preview:free", "Gemini 2.5 Flash"),
    ModelDescriptor("meta-llama/llama-3.3-70b-instruct:free", "Llama 3.3 70B"),
    ModelDescriptor("mistralai/mistral-nemo:free", "Mistral Nemo"),
    ModelDescriptor("qwen/qwen-2.5-72b-instruct:free", "Qwen 2.5 72B"),
    ModelDescriptor("mistralai/mistral-7b-instruct:free", "Mistral 7B"),
    ModelDescriptor("meta-llama/llama-3.2-3b-instruct:free", "Llama 3.2 3B"),
    ModelDescriptor("google/gemma-2-9b-it:free", "Gemma 2 9B"),
    ModelDescriptor("qwen/qwen3-coder:free", "Qwen3 Coder"),
    ModelDescriptor("deepseek/deepseek-r1:free", "DeepSeek R1"),
    ModelDescriptor("mistralai/mistral-small-24b-instruct-2501:free", "Mistral Small 3"),
    ModelDescriptor("openai/gpt-oss-20b:free", "GPT OSS 20B"),
)

DEFAULT_MODEL = FREE_MODELS[0].id


def find_model(
    model_id: str | None, registry: tuple[ModelDescriptor, ...] = FREE_MODELS
) -> ModelDescriptor | None:
    if not model_id:
        return None
    for model in registry:
        if model.id == model_id:
            return model
    return None


def is_model_allowed(
    model_id: str | None, registry: tuple[ModelDescriptor, ...] = FREE_MODELS
) -> bool:
    return find_model(model_id, registry) is not None
