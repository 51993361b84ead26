"""Error handling and request logging for the API

Every error leaves the API in one envelope:
    {"error": {"code": ..., "message": ..., "details": {...}}}
Internal detail is logged, never returned.
"""
import time

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from storyboard.core.exceptions import APIException, ServiceException
from storyboard.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Server error"


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": jsonable_encoder(details or {}),
            }
        },
    )


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        logger.warning(
            f"API Exception | path={request.url.path} | "
            f"code={exc.error_code} | message={exc.message}"
        )
        return error_response(exc.status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(ServiceException)
    async def service_exception_handler(request: Request, exc: ServiceException):
        logger.error(
            f"Service Exception | path={request.url.path} | "
            f"service={exc.service_name} | detail={exc.to_dict()}"
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", GENERIC_ERROR_MESSAGE
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded | path={request.url.path} | limit={exc.detail}")
        return error_response(
            status.HTTP_429_TOO_MANY_REQUESTS, "RATE_LIMIT_EXCEEDED", str(exc.detail)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Request validation error | path={request.url.path} | errors={exc.errors()}")
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": exc.errors()},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            f"HTTP Exception | path={request.url.path} | "
            f"status={exc.status_code} | detail={exc.detail}"
        )
        return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(
            f"Unexpected error | path={request.url.path} | error={type(exc).__name__}"
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", GENERIC_ERROR_MESSAGE
        )


class LoggingMiddleware:
    """Pure ASGI middleware logging one line per request."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        method = scope["method"]
        path = scope["path"]
        client_ip = scope["client"][0] if scope.get("client") else "unknown"
        status_holder = {"code": 500}

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                status_holder["code"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{method} {path} | status={status_holder['code']} | "
                f"client_ip={client_ip} | duration={duration_ms:.1f}ms"
            )
