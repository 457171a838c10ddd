"""
Role-prefixed page guard.

``/candidato*`` needs a CANDIDATE session, ``/empresa*`` a COMPANY session and
``/admin*`` an ADMIN session. Anything else passes through untouched. The
check is token-only; API routes do their own principal lookup.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from vagasrmc.core.security import decode_access_token

logger = logging.getLogger(__name__)

GUARDED_PREFIXES: tuple[tuple[str, str], ...] = (
    ("/candidato", "CANDIDATE"),
    ("/empresa", "COMPANY"),
    ("/admin", "ADMIN"),
)
LOGIN_PATH = "/login"


def required_role(path: str) -> str | None:
    for prefix, role in GUARDED_PREFIXES:
        if path == prefix or path.startswith(prefix + "/"):
            return role
    return None


def _request_token(request: Request, cookie_name: str) -> str | None:
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(cookie_name) or None


class RoleGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        role = required_role(request.url.path)
        if role is None:
            return await call_next(request)

        settings = request.app.state.settings
        token = _request_token(request, settings.session_cookie_name)
        payload = decode_access_token(token, settings) if token else None
        if payload is None or payload.get("role") != role:
            logger.info("Guard redirect path=%s required=%s", request.url.path, role)
            return RedirectResponse(url=f"{LOGIN_PATH}?next={quote(request.url.path)}", status_code=303)
        return await call_next(request)
