from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from farmdesk.core.exceptions import (
    NetworkError,
    NotFoundError,
    PartialBatchFailure,
    ValidationError,
)
from farmdesk.core.logger import logger


class ExceptionLoggingMiddleware:
    """
    ASGI middleware that logs exceptions with full stack trace.
    Re-raises exception so FastAPI/Starlette can produce a response.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        try:
            await self.app(scope, receive, send)
        except Exception:
            logger.exception(
                "Unhandled exception in request",
                extra={
                    "request_id": scope.get("request_id"),
                    "method": scope.get("method"),
                    "path": scope.get("path"),
                },
            )
            raise


# ---------------------------------------------------
# Domain error -> HTTP response
# ---------------------------------------------------

async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "errors": exc.errors},
    )


async def network_handler(request: Request, exc: NetworkError):
    return JSONResponse(status_code=502, content={"detail": exc.message})


async def partial_batch_handler(request: Request, exc: PartialBatchFailure):
    return JSONResponse(
        status_code=207,
        content={
            "detail": exc.message,
            "succeeded": [
                item.model_dump(mode="json", by_alias=True) if hasattr(item, "model_dump") else item
                for item in exc.succeeded
            ],
            "failed": [
                {"id": f.record_id, "message": f.message, "errors": f.field_errors}
                for f in exc.failed
            ],
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(NetworkError, network_handler)
    app.add_exception_handler(PartialBatchFailure, partial_batch_handler)
