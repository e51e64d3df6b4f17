import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config.database import Base, engine
from src.config.settings import settings
from src.modules.inference.router import router as inference_router
from src.modules.relay.errors import RelayError
from src.modules.tools.router import router as tools_router
from src.modules.tools.router import share_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.tool_store_backend == "sql":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables synced")
    logger.info("HTML Hub started (tool store: %s)", settings.tool_store_backend)
    yield
    await engine.dispose()


app = FastAPI(title="HTML Hub", lifespan=lifespan)

# API routes
app.include_router(inference_router, prefix="/api/ai", tags=["ai"])
app.include_router(tools_router, prefix="/api/tools", tags=["tools"])
app.include_router(share_router, tags=["share"])


# Error handling


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    logger.error("AI chat error (%s): %s", type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


def run() -> None:
    uvicorn.run(app, host=settings.app_host, port=settings.app_port)
