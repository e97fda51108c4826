# contactbook/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

# local imports
from contactbook.config import Settings, settings as default_settings
from contactbook.errors import ContactBookError, StorageFault
from contactbook.log import setup_logging
from contactbook.routes_contacts import router as contacts_router
from contactbook.store import ContactStore, StoreConfig
from contactbook.views import register_routes

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Error mapping
# -----------------------------------------------------------------------------
def _validation_message(exc: RequestValidationError) -> tuple[str, Dict[str, str]]:
    """
    Turn FastAPI's parameter errors into the API's own messages. Only body
    errors carry a per-field map.
    """
    details: Dict[str, str] = {}
    message = "Validation failed"
    for err in exc.errors():
        loc = err.get("loc") or ()
        where = loc[0] if loc else "body"
        if where == "query":
            return "Invalid pagination parameters", {}
        if where == "path":
            return "Invalid contact ID", {}
        if len(loc) > 1:
            details.setdefault(str(loc[1]), err.get("msg", "Invalid value"))
    return message, details


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ContactBookError)
    async def contactbook_error(request: Request, exc: ContactBookError):
        if isinstance(exc, StorageFault):
            logger.error(
                "Storage fault on %s %s: %r", request.method, request.url.path, exc.cause,
                exc_info=exc.cause,
            )
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        message, details = _validation_message(exc)
        body: Dict = {"error": message}
        if message == "Validation failed":
            body["details"] = details
        return JSONResponse(body, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse({"error": "Route not found"}, status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------
def create_app(settings: Optional[Settings] = None, store: Optional[ContactStore] = None) -> FastAPI:
    settings = settings or default_settings
    store = store or ContactStore(StoreConfig.from_settings(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.initialize()
        logger.info("Database initialized successfully")
        yield
        store.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    # --- CORS ----------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    # --- Routes ---------------------------------------------------------------
    register_error_handlers(app)
    register_routes(app)         # browser client page + static assets
    app.include_router(contacts_router, tags=["contacts"])

    @app.get("/")
    async def root():
        return {"message": "Welcome to Contact Book API"}

    @app.get("/health")
    async def health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


setup_logging(default_settings.LOG_LEVEL)

# Uvicorn entrypoint expects "app"
app = create_app()
