from datetime import datetime, timezone

from src.modules.persistence.contracts import ToolContract
from src.modules.persistence.schemas import ToolRecord


class InMemoryToolStore(ToolContract):
    """Volatile dict-backed store; contents are lost on restart.

    Not synchronised: concurrent writers race the way any shared dict does.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolRecord] = {}

    async def create_tool(
        self, tool_id: str, title: str, html: str, css: str, js: str, owner_id: str
    ) -> ToolRecord:
        now = datetime.now(timezone.utc)
        tool = ToolRecord(
            id=tool_id,
            title=title,
            html=html,
            css=css,
            js=js,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        self._tools[tool_id] = tool
        return tool

    async def list_tools(self) -> list[ToolRecord]:
        # dicts keep insertion order, so reversed() is newest first
        return list(reversed(self._tools.values()))

    async def list_tools_by_owner(self, owner_id: str) -> list[ToolRecord]:
        return [tool for tool in await self.list_tools() if tool.owner_id == owner_id]

    async def get_tool(self, tool_id: str) -> ToolRecord | None:
        return self._tools.get(tool_id)

    async def update_tool(self, tool_id: str, changes: dict) -> ToolRecord | None:
        tool = self._tools.get(tool_id)
        if tool is None:
            return None
        updated = tool.model_copy(
            update={**changes, "updated_at": datetime.now(timezone.utc)}
        )
        self._tools[tool_id] = updated
        return updated

    async def delete_tool(self, tool_id: str) -> ToolRecord | None:
        return self._tools.pop(tool_id, None)
