# app/main.py
# Role: Application factory.
#       Builds the FastAPI app, wires the Database object into app.state,
#       installs the error-envelope handlers, CORS and request logging, and
#       registers every route module.

"""
create_app() builds a fully wired FastAPI application.

Here we:
- configure logging
- construct the Database once and create tables
- translate every error into the {success: false, error: {...}} envelope
- include route modules
"""

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import AppError, ErrorCodes
from app.logging_utils import configure_root_logger, get_logger
from app.responses import make_error
from app.routes_accounts import router as accounts_router
from app.routes_auth import router as auth_router
from app.routes_categories import router as categories_router
from app.routes_reports import router as reports_router
from app.routes_root import router as root_router
from app.routes_transactions import router as transactions_router
from app.routes_users import router as users_router
from config import Settings, get_settings
from db import Database

API_TITLE = "Family Finance API"
API_VERSION = "1.1.0"

logger = get_logger(__name__)

HTTP_STATUS_CODES = {
    400: ErrorCodes.VALIDATION,
    401: ErrorCodes.UNAUTHORIZED,
    403: ErrorCodes.FORBIDDEN,
    404: ErrorCodes.NOT_FOUND,
    409: ErrorCodes.CONFLICT,
}


# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=make_error(exc.code, exc.message, exc.context),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    context = [
        {
            # Drop the "body"/"query" prefix: clients care about the field
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or None,
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=make_error(ErrorCodes.VALIDATION, "Invalid data", context),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        message = "Endpoint not found"
    else:
        message = str(exc.detail)
    code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCodes.INTERNAL)
    return JSONResponse(
        status_code=exc.status_code,
        content=make_error(code, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=make_error(ErrorCodes.INTERNAL, "Internal server error"),
    )


# -------------------------------------------------------------------
# App factory
# -------------------------------------------------------------------

def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_root_logger(settings.log_level)

    database = database or Database(settings.database_url)
    database.create_all()

    app = FastAPI(title=API_TITLE, version=API_VERSION)
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Root / health
    app.include_router(root_router)

    # Resources
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(accounts_router)
    app.include_router(categories_router)
    app.include_router(transactions_router)
    app.include_router(reports_router)

    logger.info("%s %s ready (database: %s)", API_TITLE, API_VERSION, database.engine.url.render_as_string(hide_password=True))
    return app
