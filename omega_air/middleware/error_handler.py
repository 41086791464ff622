import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..exceptions import AllProvidersExhausted, NoProvidersAvailable

logger = logging.getLogger(__name__)


async def no_providers_handler(request: Request, exc: NoProvidersAvailable):
    logger.error(f"No providers available for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=503,
        content={"error": "No AI providers available", "message": str(exc)},
    )


async def providers_exhausted_handler(request: Request, exc: AllProvidersExhausted):
    logger.error(f"AI generation failed for {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "error": "AI generation failed",
            "message": str(exc),
            "provider": exc.provider,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception: {str(exc)}\n"
        f"Path: {request.url.path}\n"
        f"Method: {request.method}\n"
        f"Traceback: {traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred",
            "detail": str(exc) if request.app.debug else None,
        },
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(NoProvidersAvailable, no_providers_handler)
    app.add_exception_handler(AllProvidersExhausted, providers_exhausted_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
