import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config.database import async_session
from src.config.settings import settings
from src.modules.persistence.contracts import ToolContract
from src.modules.persistence.memory import InMemoryToolStore
from src.modules.persistence.models import Tool
from src.modules.persistence.schemas import ToolRecord

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "html", "css", "js")


class SqlToolStore(ToolContract):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_tool(
        self, tool_id: str, title: str, html: str, css: str, js: str, owner_id: str
    ) -> ToolRecord:
        async with self._session_factory() as session:
            tool = Tool(id=tool_id, title=title, html=html, css=css, js=js, owner_id=owner_id)
            session.add(tool)
            await session.commit()
            await session.refresh(tool)
            return ToolRecord.model_validate(tool)

    async def list_tools(self) -> list[ToolRecord]:
        async with self._session_factory() as session:
            result = await session.execute(select(Tool).order_by(Tool.seq.desc()))
            return [ToolRecord.model_validate(tool) for tool in result.scalars().all()]

    async def list_tools_by_owner(self, owner_id: str) -> list[ToolRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Tool).where(Tool.owner_id == owner_id).order_by(Tool.seq.desc())
            )
            return [ToolRecord.model_validate(tool) for tool in result.scalars().all()]

    async def get_tool(self, tool_id: str) -> ToolRecord | None:
        async with self._session_factory() as session:
            tool = await self._find(session, tool_id)
            return ToolRecord.model_validate(tool) if tool else None

    async def update_tool(self, tool_id: str, changes: dict) -> ToolRecord | None:
        async with self._session_factory() as session:
            tool = await self._find(session, tool_id)
            if not tool:
                return None
            for field, value in changes.items():
                if field in EDITABLE_FIELDS:
                    setattr(tool, field, value)
            tool.updated_at = datetime.now(timezone.utc)
            await session.commit()
            await session.refresh(tool)
            return ToolRecord.model_validate(tool)

    async def delete_tool(self, tool_id: str) -> ToolRecord | None:
        async with self._session_factory() as session:
            tool = await self._find(session, tool_id)
            if not tool:
                return None
            record = ToolRecord.model_validate(tool)
            await session.delete(tool)
            await session.commit()
            return record

    @staticmethod
    async def _find(session: AsyncSession, tool_id: str) -> Tool | None:
        result = await session.execute(select(Tool).where(Tool.id == tool_id))
        return result.scalar_one_or_none()


def build_tool_store(backend: str = settings.tool_store_backend) -> ToolContract:
    if backend == "sql":
        logger.info("Using SQL tool store at %s", settings.database_url)
        return SqlToolStore(async_session)
    if backend != "memory":
        logger.warning("Unknown tool store backend '%s', falling back to memory", backend)
    return InMemoryToolStore()


tool_store = build_tool_store()


def get_tool_store() -> ToolContract:
    return tool_store
