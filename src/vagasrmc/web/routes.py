from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from vagasrmc.api.deps import client_ip, get_app_settings, get_db, get_optional_principal
from vagasrmc.api.routes import start_session
from vagasrmc.config import Settings
from vagasrmc.core.accounts import AccountService
from vagasrmc.core.admin import AdminService
from vagasrmc.core.applications import ApplicationService
from vagasrmc.core.catalog import CatalogService
from vagasrmc.errors import VagasError
from vagasrmc.types import Principal

router = APIRouter(tags=["web"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

HOME_BY_ROLE = {"CANDIDATE": "/candidato", "COMPANY": "/empresa", "ADMIN": "/admin"}


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, next: str = "") -> HTMLResponse:
    return templates.TemplateResponse(request, "login.html", {"next": next, "error": None})


@router.post("/web/login")
def web_login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    next: str = Form(""),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        principal = AccountService(db, settings=settings).authenticate(
            email, password, ip_address=client_ip(request)
        )
    except VagasError as exc:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"next": next, "error": exc.message},
            status_code=exc.status_code,
        )

    target = next if next.startswith(HOME_BY_ROLE[principal.role]) else HOME_BY_ROLE[principal.role]
    response = RedirectResponse(url=target, status_code=303)
    start_session(response, principal, settings)
    return response


@router.post("/web/logout")
def web_logout(settings: Settings = Depends(get_app_settings)) -> RedirectResponse:
    response = RedirectResponse(url="/login", status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/candidato", response_class=HTMLResponse)
def candidate_dashboard(
    request: Request,
    principal: Principal | None = Depends(get_optional_principal),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    if principal is None:
        return RedirectResponse(url="/login", status_code=303)
    candidate = AccountService(db, settings=settings).get_candidate(principal.id)
    applications = ApplicationService(db, settings=settings).list_for_candidate(principal.id, limit=5)
    return templates.TemplateResponse(
        request,
        "candidate.html",
        {"candidate": candidate, "applications": applications.items, "total": applications.total},
    )


@router.get("/empresa", response_class=HTMLResponse)
def company_dashboard(
    request: Request,
    principal: Principal | None = Depends(get_optional_principal),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    if principal is None:
        return RedirectResponse(url="/login", status_code=303)
    company = AccountService(db, settings=settings).get_company(principal.id)
    jobs = CatalogService(db, settings=settings).list_company_jobs(principal.id)
    return templates.TemplateResponse(request, "company.html", {"company": company, "jobs": jobs})


@router.get("/admin", response_class=HTMLResponse)
def admin_dashboard(
    request: Request,
    principal: Principal | None = Depends(get_optional_principal),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    if principal is None:
        return RedirectResponse(url="/login", status_code=303)
    stats = AdminService(db, settings=settings).stats()
    return templates.TemplateResponse(request, "admin.html", {"stats": stats})
