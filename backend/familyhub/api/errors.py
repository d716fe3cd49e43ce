"""Global error handlers ensuring request_id is included in JSON responses."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from familyhub.api.request_id import get_request_id
from familyhub.domain.exceptions import FamilyHubError
from familyhub.obs.logging import get_logger
from familyhub.settings import settings

_log = get_logger("familyhub.errors")


def _error_list(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        payload = {"detail": exc.detail, "request_id": get_request_id(request)}
        return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        payload = {
            "detail": "validation_error",
            "errors": _error_list(list(exc.errors())),
            "request_id": get_request_id(request),
        }
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)

    @app.exception_handler(PydanticValidationError)
    async def model_validation_exc_handler(request: Request, exc: PydanticValidationError):  # type: ignore[override]
        payload = {
            "detail": "validation_error",
            "errors": _error_list(exc.errors()),
            "request_id": get_request_id(request),
        }
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)

    @app.exception_handler(FamilyHubError)
    async def domain_exc_handler(request: Request, exc: FamilyHubError):  # type: ignore[override]
        if exc.status_code >= 500:
            _log.error("storage_fault", exc_info=exc, extra={"detail": exc.detail, "path": request.url.path})
        payload: Dict[str, Any] = {"detail": exc.detail, "request_id": get_request_id(request)}
        if exc.status_code >= 500 and settings.show_error_details() and exc.__cause__ is not None:
            payload["error"] = str(exc.__cause__)
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):  # type: ignore[override]
        _log.error("unhandled_error", exc_info=exc, extra={"method": request.method, "path": request.url.path})
        payload: Dict[str, Any] = {"detail": "internal_error", "request_id": get_request_id(request)}
        if settings.show_error_details():
            payload["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)
