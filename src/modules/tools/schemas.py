from pydantic import BaseModel, Field


class CreateTool(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    html: str | None = None
    css: str | None = None
    js: str | None = None


class UpdateTool(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    html: str | None = None
    css: str | None = None
    js: str | None = None


class CreateToolResponse(BaseModel):
    id: str
