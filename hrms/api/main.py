import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hrms.api.middleware.audit import AuditMiddleware, AuditSink
from hrms.api.routers import access, health
from hrms.api.schemas import ErrorResponse
from hrms.common.logger import configure_logging
from hrms.core.config import Settings, get_settings
from hrms.core.identity import IdentityStore, InMemoryIdentityStore
from hrms.core.rbac import AccessChecker, AccessError, InternalCheckError, RoleCatalog, load_role_catalog

logger = logging.getLogger(__name__)


async def access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
    """Render a denial as ``{"success": false, "message": ...}``."""
    if isinstance(exc, InternalCheckError):
        logger.error(
            "Access check failed: %s %s user=%s cause=%r",
            request.method, request.url.path,
            getattr(getattr(request.state, "principal", None), "user_id", None),
            exc.cause,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


def create_app(
    settings: Optional[Settings] = None,
    identity_store: Optional[IdentityStore] = None,
    audit_sink: Optional[AuditSink] = None,
    catalog: Optional[RoleCatalog] = None,
) -> FastAPI:
    """Build the API application.

    The role catalogue is loaded here once and never changes afterwards.
    """
    settings = settings or get_settings()

    configure_logging(settings)

    if catalog is None:
        catalog = load_role_catalog(settings.roles_file)

    app = FastAPI(
        title=settings.app_name,
        description="HR and payroll administration API",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.identity_store = identity_store or InMemoryIdentityStore()
    app.state.access_checker = AccessChecker(catalog)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Records create/update/delete requests
    app.add_middleware(AuditMiddleware, sink=audit_sink)

    app.add_exception_handler(AccessError, access_error_handler)

    app.include_router(health.router)
    app.include_router(access.router, prefix="/api")

    logger.info("%s started with %d roles", settings.app_name, len(catalog))
    return app
