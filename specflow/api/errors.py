# specflow/api/errors.py
"""
Route-boundary error handling.

Every error that reaches a route is logged and rendered as

    {"success": false, "error": "<message>"}

Success responses use {"success": true, "data": ...} (see ok()).
"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from specflow.core.exceptions import SpecflowError
from specflow.core.logging import log, log_error


def ok(data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"success": True, "data": jsonable_encoder(data)}, status_code=status_code)


def error_response(status_code: int, message: str, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": message}
    if details:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(body, status_code=status_code)


def _field_message(error: Dict[str, Any]) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    if error.get("type") == "missing":
        message = "is required" if loc else "Request body is required"
    return f"{'.'.join(loc)}: {message}" if loc else message


async def specflow_error_handler(request: Request, exc: SpecflowError) -> JSONResponse:
    if exc.status_code >= 500:
        log_error("API", f"{request.method} {request.url.path} failed", exc)
    else:
        log("API", f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.details or None)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [_field_message(error) for error in exc.errors()]
    message = "; ".join(messages) or "Invalid input"
    log("API", f"{request.method} {request.url.path} -> 400: {message}")
    return error_response(400, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    log("API", f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error("API", f"{request.method} {request.url.path} crashed", exc)
    return error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SpecflowError, specflow_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
