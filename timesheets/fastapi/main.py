"""
FastAPI application entry point.

Run with ``uvicorn timesheets.fastapi.main:app`` or ``python run_server.py``.
"""

from fastapi import FastAPI

from timesheets.fastapi.core.exceptions import setup_exception_handlers
from timesheets.fastapi.core.init_settings import global_settings
from timesheets.fastapi.core.lifespan import lifespan
from timesheets.fastapi.core.middleware import setup_cors, add_request_logging
from timesheets.fastapi.core.routers import setup_routers


def create_app() -> FastAPI:
    app = FastAPI(
        title=global_settings.APP_NAME,
        version=global_settings.APP_VERSION,
        lifespan=lifespan
    )

    add_request_logging(app)
    setup_cors(app)
    setup_exception_handlers(app)
    setup_routers(app)

    @app.get("/health", tags=["main"])
    async def health():
        return {"status": "ok", "version": global_settings.APP_VERSION}

    return app


app = create_app()
