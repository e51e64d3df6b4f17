from abc import ABC, abstractmethod

from src.modules.persistence.schemas import ToolRecord


class ToolContract(ABC):
    """Storage capability behind publishing, the gallery and the dashboard."""

    @abstractmethod
    async def create_tool(
        self, tool_id: str, title: str, html: str, css: str, js: str, owner_id: str
    ) -> ToolRecord: ...

    @abstractmethod
    async def list_tools(self) -> list[ToolRecord]:
        """All tools, newest first."""

    @abstractmethod
    async def list_tools_by_owner(self, owner_id: str) -> list[ToolRecord]: ...

    @abstractmethod
    async def get_tool(self, tool_id: str) -> ToolRecord | None: ...

    @abstractmethod
    async def update_tool(self, tool_id: str, changes: dict) -> ToolRecord | None: ...

    @abstractmethod
    async def delete_tool(self, tool_id: str) -> ToolRecord | None: ...
