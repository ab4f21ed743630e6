"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from catalog_admin.api.http.app_data import ApplicationDependencies
from catalog_admin.api.http.routers.products import router as products_router
from catalog_admin.api.http.templating import templates
from catalog_admin.api.utils.app_startup import configure_logging
from catalog_admin.core.exceptions import NotFoundError
from catalog_admin.core.services import DbSessionService, LocalBlobStorage
from catalog_admin.runtime.config.config_data import ConfigData
from catalog_admin.runtime.context import get_config


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, production: bool = False):
        super().__init__(app)
        self._production = production

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if self._production:
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config: ConfigData = app.state.config
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService(config)
    database_service.create_all()

    storage_root = Path(config.storage.root)
    storage_root.mkdir(parents=True, exist_ok=True)
    blob_storage = LocalBlobStorage(storage_root, public_url=config.storage.public_url)

    app.state.app_dependencies = ApplicationDependencies(
        config=config,
        database_service=database_service,
        blob_storage=blob_storage,
    )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


def _render_error(request: Request, template: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        template,
        {"app_name": request.app.state.config.app.name},
        status_code=status_code,
    )


def create_app(config: ConfigData | None = None) -> FastAPI:
    """Build the dashboard application for ``config`` (the active context by default)."""
    config = config or get_config()
    configure_logging(config)
    production = config.app.environment == "production"

    app = FastAPI(
        title=config.app.name,
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
    )
    app.state.config = config

    app.add_middleware(SecurityHeadersMiddleware, production=production)
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.app.session_signing_secret,
        session_cookie=config.app.session_cookie,
        max_age=config.app.session_max_age,
        same_site="lax",
        https_only=production,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
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
                response = _render_error(request, "errors/500.html", 500)
                response.headers["X-Request-ID"] = request_id
                return response

    # --- Error pages ---
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        logger.bind(resource=exc.resource, identifier=exc.identifier).info("request.not_found")
        return _render_error(request, "errors/404.html", 404)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        if exc.status_code == 404:
            return _render_error(request, "errors/404.html", 404)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Malformed path parameters, e.g. /products/abc
        if any(error.get("loc", ())[:1] == ("path",) for error in exc.errors()):
            return _render_error(request, "errors/404.html", 404)
        return JSONResponse(status_code=422, content={"detail": exc.errors()})

    # --- Router registration ---
    app.include_router(products_router)

    app.mount(
        config.storage.public_url,
        StaticFiles(directory=config.storage.root, check_dir=False),
        name="storage",
    )

    # --- Route handlers ---
    @app.get("/", include_in_schema=False)
    async def root(request: Request):
        return RedirectResponse(str(request.url_for("products.index")), status_code=302)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request):
        """Readiness check: the database answers a trivial query."""
        deps: ApplicationDependencies = request.app.state.app_dependencies
        if deps.database_service.health_check():
            return {"status": "ready"}
        return JSONResponse(status_code=503, content={"status": "unavailable"})

    return app


# expose startup for tests
__all__ = ["app", "create_app", "startup", "shutdown"]

app = create_app()
