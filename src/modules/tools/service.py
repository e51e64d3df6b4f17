import html as html_lib
import logging
import uuid

from src.modules.persistence.contracts import ToolContract
from src.modules.persistence.schemas import ToolRecord
from src.modules.tools.schemas import CreateTool, UpdateTool

logger = logging.getLogger(__name__)

DOCUMENT_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>{css}</style>
  </head>
  <body>
    {html}
    <script>{js}</script>
  </body>
</html>
"""


class ToolAccessError(Exception):
    pass


def has_code(body: CreateTool) -> bool:
    return bool(body.html or body.css or body.js)


async def publish_tool(store: ToolContract, body: CreateTool, owner_id: str) -> ToolRecord:
    tool_id = str(uuid.uuid4())
    tool = await store.create_tool(
        tool_id=tool_id,
        title=body.title or f"Tool {tool_id[:8]}",
        html=body.html or "",
        css=body.css or "",
        js=body.js or "",
        owner_id=owner_id,
    )
    logger.info("Published tool %s (owner=%s)", tool.id, owner_id)
    return tool


async def update_tool(
    store: ToolContract, tool_id: str, body: UpdateTool, caller_id: str
) -> ToolRecord | None:
    tool = await store.get_tool(tool_id)
    if not tool:
        return None
    _ensure_owner(tool, caller_id)
    return await store.update_tool(tool_id, body.model_dump(exclude_none=True))


async def delete_tool(store: ToolContract, tool_id: str, caller_id: str) -> ToolRecord | None:
    tool = await store.get_tool(tool_id)
    if not tool:
        return None
    _ensure_owner(tool, caller_id)
    deleted = await store.delete_tool(tool_id)
    logger.info("Deleted tool %s (owner=%s)", tool_id, caller_id)
    return deleted


def _ensure_owner(tool: ToolRecord, caller_id: str) -> None:
    if tool.owner_id != caller_id:
        logger.warning("Caller %s denied access to tool %s", caller_id, tool.id)
        raise ToolAccessError("You can only modify your own tools")


def render_document(tool: ToolRecord) -> str:
    """Combine a tool's parts into one standalone page."""
    return DOCUMENT_TEMPLATE.format(
        title=html_lib.escape(tool.title),
        css=tool.css,
        html=tool.html,
        js=tool.js,
    )
