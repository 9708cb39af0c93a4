"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.user_registry.api.http.app_data import ApplicationDependencies
from src.user_registry.api.http.routers.health import router as health_router
from src.user_registry.api.http.routers.users import router as users_router
from src.user_registry.api.utils.app_startup import configure_logging
from src.user_registry.core.services import DbManageService, DbSessionService
from src.user_registry.runtime.config.config_data import ConfigData
from src.user_registry.runtime.context import get_config


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, environment: str):
        super().__init__(app)
        self._environment = environment

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if self._environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Composition root: construct every process-wide collaborator."""
    database_service = DbSessionService(config)
    if config.database.create_tables_on_startup:
        DbManageService(database_service.engine).create_all()
    return ApplicationDependencies(database_service=database_service)


def create_app(
    dependencies: ApplicationDependencies | None = None,
    config: ConfigData | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        dependencies: Prebuilt collaborators. When omitted they are built from
            ``config`` on startup and disposed on shutdown.
        config: Configuration to use instead of the current context's.
    """
    app_config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_dependencies = dependencies is None
        if owns_dependencies:
            app.state.app_dependencies = build_dependencies(app_config)
        else:
            app.state.app_dependencies = dependencies
        logger.info("Starting up application in {} environment", app_config.app.environment)
        try:
            yield
        finally:
            logger.info("Shutting down application")
            if owns_dependencies:
                app.state.app_dependencies.database_service.dispose()

    production = app_config.app.environment == "production"
    app = FastAPI(
        title="User Registry",
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )

    # Available before startup so that a TestClient without lifespan still works
    if dependencies is not None:
        app.state.app_dependencies = dependencies

    if production and "*" in app_config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(SecurityHeadersMiddleware, environment=app_config.app.environment)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.app.cors.origins,
        allow_credentials=app_config.app.cors.allow_credentials,
        allow_methods=app_config.app.cors.allow_methods,
        allow_headers=app_config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.include_router(health_router)
    app.include_router(users_router)

    return app


def get_application() -> FastAPI:
    """Entry point for ASGI servers: configure logging, then build the app."""
    configure_logging()
    return create_app()


if __name__ == "__main__":
    import uvicorn

    main_config = get_config()
    uvicorn.run(
        get_application(),
        host=main_config.app.host,
        port=main_config.app.port,
        access_log=False,  # Access logging happens in middleware
    )
