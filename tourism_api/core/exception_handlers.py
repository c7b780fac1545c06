from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tourism_api.core.exceptions import APIError, InternalError
from tourism_api.core.logging_config import get_logger

logger = get_logger()


def error_body(message: str, **extra) -> dict:
    return {"isOk": False, "message": message, **extra}


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__}: {request.method} {request.url.path} -> {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, **exc.extra),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"][1:])  # drop 'body' / 'query'
        errors.append(f"{field}: {error['msg']}" if field else error["msg"])

    logger.warning(f"ValidationError: {request.method} {request.url.path} -> {errors}")

    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", errors=errors),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"IntegrityError: {request.method} {request.url.path} -> {exc.orig}")

    return JSONResponse(
        status_code=409,
        content=error_body("Operation conflicts with existing records"),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(
            status_code=400,
            content={"status": False, "message": "route not found"},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled error: {request.method} {request.url.path}")

    error = InternalError()
    return JSONResponse(
        status_code=error.status_code,
        content=error_body(error.message),
    )


def register_exception_handlers(app):
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
