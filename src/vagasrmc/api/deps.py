from __future__ import annotations

from collections.abc import Callable, Generator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from vagasrmc.config import Settings
from vagasrmc.core.accounts import AccountService
from vagasrmc.core.security import decode_access_token
from vagasrmc.db.session import Database
from vagasrmc.errors import Forbidden, Unauthenticated
from vagasrmc.types import Principal, Role

bearer = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    yield from database.get_db_session()


def client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def session_token(request: Request, credentials: HTTPAuthorizationCredentials | None, settings: Settings) -> str | None:
    """Bearer header wins over the session cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name) or None


def principal_from_token(token: str | None, db: Session, settings: Settings) -> Principal | None:
    if not token:
        return None
    payload = decode_access_token(token, settings)
    if payload is None:
        return None
    return AccountService(db, settings=settings).load_principal(int(payload["sub"]))


def get_optional_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Principal | None:
    return principal_from_token(session_token(request, credentials, settings), db, settings)


def get_current_principal(principal: Principal | None = Depends(get_optional_principal)) -> Principal:
    if principal is None:
        raise Unauthenticated("Não autorizado")
    return principal


def require_role(*roles: Role) -> Callable[..., Principal]:
    """Dependency factory: 401 without a session, 403 when the role is not allowed."""

    def _guard(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise Forbidden("Acesso negado")
        return principal

    return _guard


require_candidate = require_role("CANDIDATE")
require_company = require_role("COMPANY")
require_admin = require_role("ADMIN")
