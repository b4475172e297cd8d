# backend/tagclaim/main.py
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask
from starlette.exceptions import HTTPException as StarletteHTTPException

from tagclaim.config import Settings, get_settings
from tagclaim.api.deps import AdminGate
from tagclaim.api.admin_tags import router as admin_tags_router
from tagclaim.api.tags import router as tags_router
from tagclaim.services.error_log import ErrorLogWriter
from tagclaim.services.errors import TagServiceError

logger = logging.getLogger(__name__)


def request_info(request: Request) -> dict:
    client_ip = request.client.host if request.client else None
    return {
        "method": request.method,
        "path": request.url.path,
        "user_agent": request.headers.get("user-agent"),
        "ip": client_ip or request.headers.get("x-forwarded-for"),
    }


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    exc: Optional[BaseException] = None,
    details: Any = None,
) -> JSONResponse:
    """Log a failure with its request context and render the standard error envelope.

    When the error log is enabled the failure is also stored, after the response
    has been sent.
    """
    user_id = getattr(request.state, "user_id", None)
    context = {
        "status_code": status_code,
        "method": request.method,
        "path": request.url.path,
        "user_id": str(user_id) if user_id else None,
    }
    if status_code >= 500:
        logger.error(f"[{code}] {message} {context}", exc_info=exc)
    else:
        logger.warning(f"[{code}] {message} {context}")

    error: dict = {"code": code, "message": message}
    settings: Settings = request.app.state.settings
    if details is not None:
        error["details"] = details
    elif settings.debug and exc is not None:
        error["details"] = str(exc)

    background = None
    writer: Optional[ErrorLogWriter] = request.app.state.error_log
    if writer is not None:
        background = BackgroundTask(
            writer.record, code, message, status_code,
            exc=exc, context=details, user_id=user_id, **request_info(request),
        )

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "success": False,
            "error": error,
            "data": None,
            "timestamp": datetime.now(timezone.utc),
        }),
        background=background,
    )


async def tag_service_error_handler(request: Request, exc: TagServiceError):
    return error_response(request, exc.status_code, exc.code, exc.message, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(
        request, 400, "VALIDATION_ERROR", "Invalid request", details=jsonable_encoder(exc.errors())
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    return error_response(request, 500, "INTERNAL_ERROR", "Internal server error", exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="NFC tag registry and ownership service",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.admin_gate = AdminGate(settings.admin_pass)
    app.state.error_log = ErrorLogWriter() if settings.error_log_enabled else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TagServiceError, tag_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers; admin routes first so /nfc/admin/* never reads as a tag id
    app.include_router(admin_tags_router, prefix="/api/v1")
    app.include_router(tags_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "app": settings.app_name}

    return app


app = create_app()
