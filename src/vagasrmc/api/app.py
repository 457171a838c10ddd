from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vagasrmc.api.admin_routes import router as admin_router
from vagasrmc.api.candidate_routes import router as candidate_router
from vagasrmc.api.company_routes import router as company_router
from vagasrmc.api.guard import RoleGuardMiddleware
from vagasrmc.api.routes import router as api_router
from vagasrmc.config import Settings, get_settings
from vagasrmc.db.init import init_database
from vagasrmc.db.session import Database
from vagasrmc.errors import VagasError
from vagasrmc.logging_config import configure_logging
from vagasrmc.web.routes import router as web_router

logger = logging.getLogger(__name__)

_PYDANTIC_PREFIXES = ("Value error, ", "Assertion failed, ")


def _error_body(message: str, code: str, details: dict | None = None) -> dict:
    body = {"success": False, "error": message, "error_code": code}
    if details:
        body["details"] = details
    return body


def first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Dados inválidos"
    error = errors[0]
    if error.get("type") == "missing":
        field = ".".join(str(part) for part in error.get("loc", ())[1:]) or "body"
        return f"Campo obrigatório: {field}"
    message = str(error.get("msg", "Dados inválidos"))
    for prefix in _PYDANTIC_PREFIXES:
        if message.startswith(prefix):
            return message[len(prefix):]
    return message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(VagasError)
    async def _domain_error(request: Request, exc: VagasError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_error_body(first_validation_message(exc), "VALIDATION_ERROR"),
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error path=%s", request.url.path)
        return JSONResponse(status_code=500, content=_error_body("Erro interno do servidor", "INTERNAL_ERROR"))


def create_app(settings: Settings | None = None, *, database: Database | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    database = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_database(database, seed=settings.seed_on_startup)
        yield
        database.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(RoleGuardMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(api_router)
    app.include_router(candidate_router)
    app.include_router(company_router)
    app.include_router(admin_router)
    if settings.web_ui_enabled:
        app.include_router(web_router)
    return app
