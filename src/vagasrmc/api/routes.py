from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from vagasrmc.api import schemas
from vagasrmc.api.deps import (
    client_ip,
    get_app_settings,
    get_current_principal,
    get_db,
    get_optional_principal,
    require_candidate,
)
from vagasrmc.config import Settings
from vagasrmc.core.accounts import AccountService
from vagasrmc.core.applications import ApplicationService
from vagasrmc.core.catalog import CatalogService
from vagasrmc.core.favorites import FavoriteService
from vagasrmc.core.security import create_access_token
from vagasrmc.types import (
    ApplyRequest,
    CandidateRegistration,
    CompanyRegistration,
    JobOrder,
    JobSearchQuery,
    LoginRequest,
    Principal,
)

router = APIRouter(prefix="/api", tags=["api"])


def start_session(response: Response, principal: Principal, settings: Settings) -> str:
    token = create_access_token(user_id=principal.id, role=principal.role, settings=settings)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_ttl_min * 60,
        httponly=True,
        samesite="lax",
        secure=settings.app_env == "production",
    )
    return token


# auth


@router.post("/auth/register/candidate")
def register_candidate(
    payload: CandidateRegistration,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    user = AccountService(db, settings=settings).register_candidate(payload, ip_address=client_ip(request))
    return schemas.envelope(
        {"id": user.id, "email": user.email},
        message="Cadastro realizado com sucesso!",
    )


@router.post("/auth/register/company")
def register_company(
    payload: CompanyRegistration,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    user = AccountService(db, settings=settings).register_company(payload, ip_address=client_ip(request))
    return schemas.envelope(
        {"id": user.id, "email": user.email},
        message="Cadastro realizado com sucesso! Aguarde aprovação.",
    )


@router.post("/auth/login")
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    principal = AccountService(db, settings=settings).authenticate(
        payload.email,
        payload.password,
        ip_address=client_ip(request),
    )
    token = start_session(response, principal, settings)
    return schemas.envelope(schemas.SessionResponse(token=token, user=schemas.user_response(principal)))


@router.post("/auth/logout")
def logout(response: Response, settings: Settings = Depends(get_app_settings)) -> dict:
    response.delete_cookie(settings.session_cookie_name)
    return schemas.envelope(message="Sessão encerrada")


@router.get("/auth/me")
def me(principal: Principal = Depends(get_current_principal)) -> dict:
    return schemas.envelope(schemas.user_response(principal))


# jobs


@router.get("/jobs")
def list_jobs(
    q: str = "",
    city: str = "",
    area: str = "",
    level: str = "",
    modality: str = "",
    contract_type: str = Query("", alias="contractType"),
    salary_min: float | None = Query(None, alias="salaryMin"),
    salary_max: float | None = Query(None, alias="salaryMax"),
    page: int = 1,
    limit: int | None = None,
    order_by: JobOrder = Query("recent", alias="orderBy"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    query = JobSearchQuery(
        q=q,
        city=city,
        area=area,
        level=level,
        modality=modality,
        contract_type=contract_type,
        salary_min=salary_min,
        salary_max=salary_max,
        page=page,
        limit=limit if limit is not None else settings.page_size_default,
        order_by=order_by,
    )
    result = CatalogService(db, settings=settings).list_jobs(query)
    return schemas.paged(result, lambda row: schemas.job_summary(*row))


@router.get("/jobs/{slug}")
def get_job(
    slug: str,
    principal: Principal | None = Depends(get_optional_principal),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    detail = CatalogService(db, settings=settings).get_job_detail(slug, principal)
    return schemas.envelope(schemas.job_detail(detail))


@router.post("/jobs/{slug}/apply")
def apply_to_job(
    slug: str,
    request: Request,
    payload: ApplyRequest | None = None,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    application = ApplicationService(db, settings=settings).apply(
        principal.id,
        slug,
        cover_letter=payload.cover_letter if payload else None,
        ip_address=client_ip(request),
    )
    return schemas.envelope(
        schemas.ApplicationResponse.model_validate(application),
        message="Candidatura enviada com sucesso!",
    )


@router.post("/jobs/{slug}/favorite")
def toggle_favorite(
    slug: str,
    principal: Principal = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    action = FavoriteService(db, settings=settings).toggle(principal.id, slug)
    return schemas.envelope({"action": action})


# reference data


@router.get("/cities")
def list_cities(db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)) -> dict:
    rows = CatalogService(db, settings=settings).list_cities()
    return schemas.envelope([schemas.CityResponse.model_validate(row) for row in rows])


@router.get("/areas")
def list_areas(db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)) -> dict:
    rows = CatalogService(db, settings=settings).list_areas()
    return schemas.envelope([schemas.AreaResponse.model_validate(row) for row in rows])


@router.get("/segments")
def list_segments(db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)) -> dict:
    rows = CatalogService(db, settings=settings).list_segments()
    return schemas.envelope([schemas.SegmentResponse.model_validate(row) for row in rows])


@router.get("/plans")
def list_plans(db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)) -> dict:
    rows = CatalogService(db, settings=settings).list_plans()
    return schemas.envelope([schemas.PlanResponse.model_validate(row) for row in rows])
