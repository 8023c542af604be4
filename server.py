"""Music Relay - CORS-friendly relay for a music search API and audio hosts."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
import upstream
from routers import relay

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    yield
    # Shutdown: release pooled upstream connections
    await upstream.close_client()


app = FastAPI(
    title="Music Relay",
    description="Relay for the music search API and allow-listed audio hosts",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(relay.router)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Answer methods no route accepts with the relay's own 405 body."""
    if exc.status_code == 405:
        logger.warning(f"[Dispatch] Method not allowed: {request.method}")
        return relay.MethodNotAllowed().to_response()
    return await http_exception_handler(request, exc)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("server:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)
