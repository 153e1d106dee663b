"""
Folio Preview Service - HTTP/WebSocket entry point
Serves the component palette, one-shot previews, publish renders and a
live-preview stream for editor widgets.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import orjson
import uvicorn
from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST

from .compiler import MDXCompiler
from .components import PALETTE, ComponentRegistry, build_snippet, get_spec
from .core import (
    LogContext,
    PreviewRequest,
    Settings,
    SnippetRequest,
    ValidationError,
    configure_logging,
    create_container,
    get_logger,
    get_settings,
    safe_json_dumps,
    validate_source,
)
from .core.id import new_request_id, new_session_id
from .monitoring import metrics_collector
from .preview import Outbox, PreviewController, ViewState, render_view, state_for
from .publish import PublishRenderer, RenderError

logger = get_logger(__name__)

SERVICE_NAME = "folio-preview"


def view_payload(state: ViewState) -> dict[str, Any]:
    """Wire form of a view state."""
    return {
        "state": state.state,
        "html": str(render_view(state)),
        "message": getattr(state, "message", None),
    }


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Wire dependencies on startup."""
        configure_logging(settings.log_level, settings.json_logs)
        container = create_container(settings)

        app.state.settings = settings
        app.state.container = container
        app.state.registry = container.get(ComponentRegistry)
        app.state.compiler = container.get(MDXCompiler)
        app.state.publisher = container.get(PublishRenderer)

        logger.info(
            "service_started",
            components=len(app.state.registry),
            cache=settings.enable_cache,
            policy=settings.unknown_component_policy.value,
        )
        yield
        logger.info("service_stopped")

    app = FastAPI(
        title="Folio Preview Service",
        description="MDX live preview and publish rendering",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health(request: Request):
        """Health check"""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "components": list(request.app.state.registry.tags),
        }

    @app.get("/components")
    async def components():
        """Palette entries for the editor's insert-component form."""
        return [spec.model_dump(mode="json") for spec in PALETTE]

    @app.post("/components/{name}/snippet")
    async def snippet(name: str, body: SnippetRequest):
        """Build an MDX tag from prop values."""
        spec = get_spec(name)
        if spec is None:
            raise HTTPException(status_code=404, detail=f"Unknown component: {name}")

        try:
            return {"snippet": build_snippet(spec, body.values, body.children)}
        except ValidationError as e:
            metrics_collector.record_error("ValidationError", "palette")
            raise HTTPException(status_code=422, detail=str(e))

    @app.post("/preview")
    async def preview(request: Request, body: PreviewRequest):
        """Compile once and return the preview region."""
        with LogContext(request_id=new_request_id()):
            result = await request.app.state.compiler.compile(body.source)
            state = state_for(result, 0)
            logger.info("preview_compiled", state=state.state, length=len(body.source))
            return view_payload(state)

    @app.post("/render")
    def render(request: Request, body: PreviewRequest):
        """Render content for a public page (sync: FastAPI runs it in the threadpool)."""
        with LogContext(request_id=new_request_id()):
            try:
                html = request.app.state.publisher.render(body.source)
            except RenderError as e:
                raise HTTPException(status_code=422, detail=e.message)
            return {"html": str(html)}

    @app.get("/metrics")
    async def metrics():
        """Prometheus exposition"""
        return Response(content=metrics_collector.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    @app.websocket("/preview/stream")
    async def preview_stream(websocket: WebSocket):
        """
        Live preview over WebSocket.

        Client sends:
            - {"type": "source", "source": "..."}
            - {"type": "ping"}
        Server sends:
            - {"type": "connected", "session_id": "..."}
            - {"type": "view", "state": ..., "html": ..., "generation": ...}
            - {"type": "pong"}
            - {"type": "error", "message": "..."}
        """
        await websocket.accept()
        session_id = new_session_id()
        outbox = Outbox()

        def on_view(state: ViewState) -> None:
            outbox.put({"type": "view", "generation": state.generation, **view_payload(state)})

        async def sender() -> None:
            while True:
                message = await outbox.get()
                await websocket.send_text(safe_json_dumps(message))
                metrics_collector.record_stream_message(message["type"])

        controller = PreviewController(websocket.app.state.compiler, session_id)
        unsubscribe = controller.subscribe(on_view)
        metrics_collector.session_opened()

        with LogContext(session_id=session_id):
            logger.info("preview_session_opened")
            await websocket.send_text(safe_json_dumps({"type": "connected", "session_id": session_id}))
            sender_task = asyncio.create_task(sender())

            try:
                while True:
                    raw = await websocket.receive_text()
                    try:
                        data = orjson.loads(raw)
                    except orjson.JSONDecodeError:
                        outbox.put({"type": "error", "message": "Message is not valid JSON"})
                        continue

                    kind = data.get("type") if isinstance(data, dict) else None
                    if kind == "source":
                        try:
                            source = validate_source(data.get("source", ""))
                        except ValidationError as e:
                            outbox.put({"type": "error", "message": str(e)})
                            continue
                        controller.update(source)
                    elif kind == "ping":
                        outbox.put({"type": "pong"})
                    else:
                        outbox.put({"type": "error", "message": f"Unknown message type: {kind!r}"})

            except WebSocketDisconnect:
                logger.info("preview_session_closed")
            finally:
                unsubscribe()
                await controller.close()
                sender_task.cancel()
                await asyncio.gather(sender_task, return_exceptions=True)
                metrics_collector.session_closed()

    return app


app = create_app()


def main() -> None:
    """Run the service with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    logger.info("starting_server", host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
