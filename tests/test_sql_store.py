"""SqlToolStore against a throwaway SQLite database."""

import asyncio

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.config.database import Base
from src.modules.persistence.service import SqlToolStore


def run_with_store(tmp_path, scenario):
    async def runner():
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tools.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        try:
            return await scenario(SqlToolStore(async_sessionmaker(engine, expire_on_commit=False)))
        finally:
            await engine.dispose()

    return asyncio.run(runner())


async def _create(store, tool_id, owner="user_1"):
    return await store.create_tool(
        tool_id=tool_id, title=f"Tool {tool_id}", html="<p></p>", css="", js="", owner_id=owner
    )


def test_create_and_get(tmp_path):
    async def scenario(store):
        created = await _create(store, "t1")
        return created, await store.get_tool("t1"), await store.get_tool("nope")

    created, fetched, missing = run_with_store(tmp_path, scenario)

    assert fetched == created
    assert fetched.owner_id == "user_1"
    assert missing is None
    assert fetched.model_dump(by_alias=True)["createdAt"].endswith("Z")


def test_listing_is_newest_first_and_filters_by_owner(tmp_path):
    async def scenario(store):
        await _create(store, "t1", owner="alice")
        await _create(store, "t2", owner="bob")
        await _create(store, "t3", owner="alice")
        return await store.list_tools(), await store.list_tools_by_owner("alice")

    everything, alice = run_with_store(tmp_path, scenario)

    assert [tool.id for tool in everything] == ["t3", "t2", "t1"]
    assert [tool.id for tool in alice] == ["t3", "t1"]


def test_update_changes_fields_and_timestamp(tmp_path):
    async def scenario(store):
        created = await _create(store, "t1")
        updated = await store.update_tool("t1", {"title": "New", "css": "p{}"})
        return created, updated, await store.update_tool("nope", {"title": "x"})

    created, updated, missing = run_with_store(tmp_path, scenario)

    assert updated.title == "New"
    assert updated.css == "p{}"
    assert updated.html == created.html
    assert updated.updated_at >= created.updated_at
    assert missing is None


def test_delete_returns_removed_tool(tmp_path):
    async def scenario(store):
        await _create(store, "t1")
        deleted = await store.delete_tool("t1")
        return deleted, await store.get_tool("t1"), await store.delete_tool("t1")

    deleted, after, again = run_with_store(tmp_path, scenario)

    assert deleted.id == "t1"
    assert after is None
    assert again is None
