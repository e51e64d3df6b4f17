from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from src.modules.identity.service import get_current_user_id
from src.modules.persistence.contracts import ToolContract
from src.modules.persistence.schemas import ANONYMOUS
from src.modules.persistence.service import get_tool_store
from src.modules.tools import service
from src.modules.tools.schemas import CreateTool, CreateToolResponse, UpdateTool

router = APIRouter()
share_router = APIRouter()

# Published tools run their own scripts; keep them off this origin.
SHARE_PAGE_HEADERS = {"Content-Security-Policy": "sandbox allow-scripts"}


def _dump(tool) -> dict:
    return tool.model_dump(by_alias=True)


@router.post("", response_model=CreateToolResponse)
async def create_tool(
    body: CreateTool,
    store: ToolContract = Depends(get_tool_store),
    user_id: str = Depends(get_current_user_id),
):
    if not service.has_code(body):
        raise HTTPException(
            status_code=400,
            detail="At least one of HTML, CSS, or JavaScript is required",
        )
    tool = await service.publish_tool(store, body, owner_id=user_id)
    return CreateToolResponse(id=tool.id)


@router.get("")
async def list_tools(store: ToolContract = Depends(get_tool_store)) -> dict:
    return {"tools": [_dump(tool) for tool in await store.list_tools()]}


@router.get("/mine")
async def list_my_tools(
    store: ToolContract = Depends(get_tool_store),
    user_id: str = Depends(get_current_user_id),
) -> dict:
    if user_id == ANONYMOUS:
        raise HTTPException(status_code=401, detail="Sign in to see your tools")
    return {"tools": [_dump(tool) for tool in await store.list_tools_by_owner(user_id)]}


@router.get("/{tool_id}")
async def get_tool(tool_id: str, store: ToolContract = Depends(get_tool_store)) -> dict:
    tool = await store.get_tool(tool_id)
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return {"tool": _dump(tool)}


@router.put("/{tool_id}")
async def update_tool(
    tool_id: str,
    body: UpdateTool,
    store: ToolContract = Depends(get_tool_store),
    user_id: str = Depends(get_current_user_id),
) -> dict:
    try:
        tool = await service.update_tool(store, tool_id, body, caller_id=user_id)
    except service.ToolAccessError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return {"tool": _dump(tool)}


@router.delete("/{tool_id}")
async def delete_tool(
    tool_id: str,
    store: ToolContract = Depends(get_tool_store),
    user_id: str = Depends(get_current_user_id),
) -> dict:
    try:
        tool = await service.delete_tool(store, tool_id, caller_id=user_id)
    except service.ToolAccessError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return {"tool": _dump(tool)}


@share_router.get("/t/{tool_id}", response_class=HTMLResponse)
async def share_page(tool_id: str, store: ToolContract = Depends(get_tool_store)):
    tool = await store.get_tool(tool_id)
    if not tool:
        raise HTTPException(status_code=404, detail="Tool not found")
    return HTMLResponse(service.render_document(tool), headers=SHARE_PAGE_HEADERS)
