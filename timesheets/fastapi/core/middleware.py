import logging
import time

from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from timesheets.fastapi.core.init_settings import global_settings

logger = logging.getLogger(__name__)

def setup_cors(app):
    origins = global_settings.CORS_ORIGINS
    logger.info("CORS allowed origins: %s", origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Accept-Language"
        ],
    )

async def request_logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method, request.url.path, response.status_code, elapsed_ms
    )
    return response

def add_request_logging(app):
    app.middleware("http")(request_logging_middleware)
