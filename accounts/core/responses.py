from __future__ import annotations

import logging
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts.core.errors import DomainError, to_http

log = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorInfo(BaseModel):
    message: str
    details: Optional[Any] = None


class Envelope(BaseModel, Generic[T]):
    status: Literal["success", "error"] = "success"
    data: Optional[T] = None
    error: Optional[ErrorInfo] = None


def ok(data: Any = None) -> Dict[str, Any]:
    return {"status": "success", "data": data, "error": None}


def error_body(message: str, details: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"message": message}
    if details is not None:
        error["details"] = details
    return {"status": "error", "data": None, "error": error}


def error_response(status_code: int, message: str, details: Any = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_body(message, details)),
        headers=headers,
    )


def validation_issues(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Strip the offending input from pydantic issues so passwords never echo back."""
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in errors
    ]


# ──────────────────────────────────────────────────────────────────────────────
# 예외 → 응답 봉투
# ──────────────────────────────────────────────────────────────────────────────
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    issues = validation_issues(list(exc.errors()))
    log.warning("Validation failed on %s %s: %s", request.method, request.url.path,
                [i["loc"] for i in issues])
    return error_response(400, "Validation failed", issues)


async def _pydantic_validation_handler(request: Request, exc: ValidationError):
    issues = validation_issues(exc.errors())
    log.warning("Validation failed on %s %s: %s", request.method, request.url.path,
                [i["loc"] for i in issues])
    return error_response(400, "Validation failed", issues)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def _domain_error_handler(request: Request, exc: DomainError):
    status_code, message = to_http(exc)
    return error_response(status_code, message)


async def _unhandled_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal Server Error")


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ValidationError, _pydantic_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
