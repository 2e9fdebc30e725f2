import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rpm_life.routes import routes_calendar, routes_roles, routes_rpmblocks
from rpm_life.routes.routes_records import make_record_router
from rpm_life.store.errors import InvalidRecord, MalformedStore, NotFound, StoreLockTimeout
from rpm_life.store.registry import build_repositories
from rpm_life.store.repository import Repository
from rpm_life.utils.config import CONFIG
from rpm_life.utils.debug import setup_logging

logger = logging.getLogger(__name__)

RESOURCES = ("categories", "calendar-events", "rpmblocks")


# -----------------------
# ERROR HANDLERS
# -----------------------
def _resource_for(request: Request) -> str:
    # /api/<resource>/... -> "<resource>", used for the 500 message
    config = getattr(request.app.state, "config", CONFIG)
    parts = request.url.path.strip("/").split("/")
    if len(parts) >= 2 and parts[1] in config["resources"]:
        return parts[1]
    return "records"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(InvalidRecord)
    async def invalid_record(request: Request, exc: InvalidRecord):
        return JSONResponse(status_code=422, content={"error": str(exc), "details": jsonable_encoder(exc.errors)})

    @app.exception_handler(RequestValidationError)
    async def malformed_request(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "Malformed request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(MalformedStore)
    async def malformed_store(request: Request, exc: MalformedStore):
        logger.error("Store unreadable: %s", exc)
        return JSONResponse(status_code=500, content={"error": f"Failed to load {_resource_for(request)}"})

    @app.exception_handler(StoreLockTimeout)
    async def store_busy(request: Request, exc: StoreLockTimeout):
        logger.warning("%s", exc)
        return JSONResponse(status_code=503, content={"error": "Store busy"})

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# -----------------------
# APP
# -----------------------
def create_app(config: Optional[Dict] = None, repositories: Optional[Dict[str, Repository]] = None) -> FastAPI:
    config = config or CONFIG
    setup_logging(config.get("debug_mode"))

    app = FastAPI(title="RPM Life API")
    app.state.config = config
    app.state.repositories = repositories if repositories is not None else build_repositories(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config["server"]["cors_origins"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %d", request.method, request.url.path, response.status_code)
        return response

    register_error_handlers(app)

    @app.get("/")
    def index():
        return {"message": "Welcome to the RPM Life API"}

    @app.get("/health")
    def health():
        return {"status": "ok", "resources": sorted(app.state.repositories)}

    # Specific sub-routes first, then the generic CRUD routers
    app.include_router(routes_calendar.router)
    app.include_router(routes_rpmblocks.router)
    app.include_router(routes_roles.router)
    for name in RESOURCES:
        if name in app.state.repositories:
            app.include_router(make_record_router(name))

    logger.debug("App ready with resources: %s", ", ".join(app.state.repositories))
    return app
