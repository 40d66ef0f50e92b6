from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import logging
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from minutes.config import Settings
from minutes.errors import AppError
from minutes.middleware import JsonBodyLimitMiddleware
from minutes.models.base import create_db_engine, init_db
from minutes.api.summaries import router as summaries_router
from minutes.api.transcripts import router as transcripts_router
from minutes.services.completion_client import CompletionClient
from minutes.services.mail_client import MailClient

logger = logging.getLogger("minutes")


def configure_logging(settings: Settings) -> None:
    # Minimal structured logging to local file
    try:
        log_file = settings.logs_dir / "backend.log"
        handler = RotatingFileHandler(str(log_file), maxBytes=5_000_000, backupCount=2)
        formatter = logging.Formatter(
            fmt='%(asctime)s %(levelname)s %(name)s %(message)s'
        )
        handler.setFormatter(formatter)
        root = logging.getLogger()
        if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
            root.addHandler(handler)
        root.setLevel(logging.INFO)
    except OSError as exc:
        logger.warning("File logging disabled: %s", exc)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    settings: Optional[Settings] = None,
    completion_client: Optional[CompletionClient] = None,
    mail_client: Optional[MailClient] = None,
) -> FastAPI:
    settings = settings or Settings()
    settings.ensure_dirs()
    engine = create_db_engine(settings.database_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings)
        init_db(engine)
        logger.info("Database ready at %s", settings.database_path)
        yield
        engine.dispose()

    app = FastAPI(title="Meeting Minutes Backend", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.completion_client = completion_client or CompletionClient(settings)
    app.state.mail_client = mail_client or MailClient(settings)

    # Added first so CORS wraps it and 413 responses carry CORS headers
    app.add_middleware(JsonBodyLimitMiddleware, max_bytes=settings.max_json_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    app.include_router(transcripts_router)
    app.include_router(summaries_router)

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):  # type: ignore[override]
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException):  # type: ignore[override]
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return _error(400, problems or "Invalid request")

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):  # type: ignore[override]
        logging.getLogger("minutes.api").exception("Unhandled exception")
        return _error(500, str(exc))

    if settings.static_dir and settings.static_dir.is_dir():
        # Browser client; API routes above take precedence
        app.mount("/", StaticFiles(directory=str(settings.static_dir), html=True), name="static")

    return app


if __name__ == "__main__":
    import argparse
    import uvicorn

    _settings = Settings()
    parser = argparse.ArgumentParser(description="Meeting Minutes Backend Server")
    parser.add_argument("--host", default=_settings.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=_settings.port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (dev only)")

    args = parser.parse_args()

    uvicorn.run(
        "minutes.main:create_app" if args.reload else create_app(_settings),
        host=args.host,
        port=args.port,
        reload=args.reload,
        factory=args.reload,
    )
