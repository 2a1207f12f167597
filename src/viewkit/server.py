"""
View Service
HTTP surface for the view resource, render sessions and view generation.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from injector import Injector
from pydantic import BaseModel, Field

from . import __version__
from .core import configure_logging, create_container, get_logger, get_settings
from .core.validate import ActionRequest, ValidationError
from .generation.errors import GenerationError
from .handlers.views import ViewHandler
from .host.client import HostClient
from .host.protocol import Host
from .monitoring.metrics import MetricsCollector
from .resources.templates import TemplateNotFoundError
from .resources.view import PRIMARY_URI, ResourceNotFoundError, ViewResource
from .session import SessionNotFoundError, SessionRegistry

logger = get_logger(__name__)


# Request Models
class GenerateViewBody(BaseModel):
    prompt: str
    dataSource: str | None = None


class TemplateBody(BaseModel):
    payload: dict[str, Any] = Field(default_factory=dict)


class SessionBody(BaseModel):
    capabilities: dict[str, Any] | None = None


def create_app(container: Injector | None = None) -> FastAPI:
    """Build the application from a DI container."""
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize services on startup, cleanup on shutdown"""
        logger.info("starting", version=__version__)
        yield
        container.get(SessionRegistry).close_all()
        host = container.get(Host)
        if isinstance(host, HostClient):
            host.close()
        logger.info("stopped")

    app = FastAPI(
        title="viewkit",
        description="Declarative UI tree rendering with resilient action execution",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    # Enable CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @app.exception_handler(GenerationError)
    async def generation_error(request: Request, exc: GenerationError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"error": exc.category, "detail": exc.message})

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": "invalid_request", "detail": str(exc)})

    @app.exception_handler(TemplateNotFoundError)
    @app.exception_handler(ResourceNotFoundError)
    @app.exception_handler(SessionNotFoundError)
    async def not_found(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "not_found", "detail": str(exc)})

    # ------------------------------------------------------------------
    # Service
    # ------------------------------------------------------------------

    @app.get("/health")
    async def health():
        """Health check"""
        host = container.get(Host)
        host_reachable = await asyncio.to_thread(host.health_check) if isinstance(host, HostClient) else None
        return {
            "status": "healthy",
            "version": __version__,
            "host_reachable": host_reachable,
            "sessions": len(container.get(SessionRegistry)),
            "timestamp": time.time(),
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics"""
        return Response(content=container.get(MetricsCollector).get_metrics(), media_type="text/plain")

    # ------------------------------------------------------------------
    # View resource
    # ------------------------------------------------------------------

    @app.get("/resources")
    async def read_resource(uri: str = PRIMARY_URI):
        contents = container.get(ViewResource).read(uri)
        headers = {"ETag": contents.etag} if contents.etag else {}
        return HTMLResponse(content=contents.text, media_type=contents.mime_type, headers=headers)

    @app.get("/resources/list")
    async def list_resources():
        return {"resources": container.get(ViewResource).list_resources()}

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @app.post("/views/generate")
    async def generate_view(body: GenerateViewBody):
        return await container.get(ViewHandler).generate_view(body.prompt, body.dataSource)

    @app.post("/views/templates/{name}")
    async def show_template(name: str, body: TemplateBody):
        return container.get(ViewHandler).show_template(name, body.payload)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @app.post("/sessions")
    async def open_session(body: SessionBody):
        session = await container.get(SessionRegistry).open(body.capabilities)
        return {"sessionId": session.id, "capabilities": session.capabilities.to_dict()}

    @app.post("/sessions/{session_id}/actions")
    async def execute_action(session_id: str, action: ActionRequest):
        session = container.get(SessionRegistry).get(session_id)
        result = await session.execute_action(action)
        return result.to_dict()

    @app.get("/sessions/{session_id}/changes")
    async def get_changes(session_id: str):
        return container.get(SessionRegistry).get(session_id).changes()

    @app.delete("/sessions/{session_id}/changes")
    async def confirm_changes(session_id: str):
        session = container.get(SessionRegistry).get(session_id)
        session.confirm_changes()
        return session.changes()

    @app.delete("/sessions/{session_id}")
    async def close_session(session_id: str):
        container.get(SessionRegistry).close(session_id)
        return {"closed": session_id}

    return app


def main() -> None:
    """Entry point - run the HTTP server."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    app = create_app(create_container(settings))

    logger.info("listening", host=settings.http_host, port=settings.http_port)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
