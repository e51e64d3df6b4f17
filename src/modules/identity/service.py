from fastapi import Header

from src.modules.persistence.schemas import ANONYMOUS

USER_ID_HEADER = "X-User-Id"


async def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> str:
    """Caller id forwarded by the auth provider, or the anonymous sentinel."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return ANONYMOUS
