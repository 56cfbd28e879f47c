import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sitedesk.config import settings
from sitedesk.db.base import engine
from sitedesk.errors import ApiError, BadRequest
from sitedesk.routers import applications, campaigns

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, headers: dict | None = None) -> ORJSONResponse:
    return ORJSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def create_app() -> FastAPI:
    app = FastAPI(title="Sitedesk API", default_response_class=ORJSONResponse)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(set(settings.BACKEND_CORS_ORIGINS)),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def api_error_handler(_request: Request, exc: ApiError) -> ORJSONResponse:
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_request: Request, exc: RequestValidationError) -> ORJSONResponse:
        logger.info("Rejected malformed request", extra={"errors": exc.errors()})
        return _error_response(BadRequest.status_code, "Bad request. Parameters are not valid.")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
        return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(_request: Request, exc: SQLAlchemyError) -> ORJSONResponse:
        logger.exception("Database error", exc_info=exc)
        return _error_response(500, "Database query failed.")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled server exception", exc_info=exc)
        return _error_response(500, "Internal server error.")

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/health/db")
    def health_db() -> dict[str, str]:
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return {"db": "ok"}
        except Exception as exc:  # pragma: no cover - simple runtime check
            return {"db": f"error: {exc}"}

    app.include_router(applications.router)
    app.include_router(campaigns.router)

    return app


app = create_app()
