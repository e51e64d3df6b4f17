from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str = Field(..., pattern="^(system|user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)
    model: str | None = None
    stream: bool = False


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    model: str
    fallback_occurred: bool = Field(..., alias="fallbackOccurred")


class ModelResponse(BaseModel):
    id: str
    name: str
