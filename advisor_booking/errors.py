"""
Exception handlers rendering the error envelope

    {"success": false, "error": <message>, "code": <CODE>, "details": {...}?}
"""

import logging
from typing import Any, Dict, NoReturn, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)

_DEFAULT_CODES = {
    400: "INVALID_INPUT",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "UNPROCESSABLE",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def _envelope(message: str, code: str, details: Optional[Any] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = jsonable_encoder(details)
    return body


def _parse_detail(status_code: int, detail: Any) -> tuple[str, str, Optional[Any]]:
    default_code = _DEFAULT_CODES.get(status_code, "ERROR")
    if isinstance(detail, dict):
        message = detail.get("message") or detail.get("detail") or "Request failed"
        code = detail.get("code") if isinstance(detail.get("code"), str) else default_code
        return str(message), code, detail.get("details")
    if isinstance(detail, str) and detail:
        return detail, default_code, None
    return "Request failed", default_code, None


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message, code, details = _parse_detail(exc.status_code, exc.detail)
        return JSONResponse(
            _envelope(message, code, details),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(
            _envelope(exc.message, exc.code, exc.details), status_code=exc.status_code
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
                "message": err.get("msg"),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            _envelope("Invalid request", "INVALID_INPUT", {"errors": errors}),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            _envelope("Internal server error", "INTERNAL_ERROR"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
