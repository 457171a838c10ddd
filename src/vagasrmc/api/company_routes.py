from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from vagasrmc.api import schemas
from vagasrmc.api.deps import client_ip, get_app_settings, get_db, require_company
from vagasrmc.config import Settings
from vagasrmc.core.accounts import AccountService
from vagasrmc.core.applications import ApplicationService
from vagasrmc.core.catalog import CatalogService
from vagasrmc.types import (
    ApplicationStatusUpdate,
    CompanyProfileUpdate,
    JobInput,
    JobStatusUpdate,
    Principal,
)

router = APIRouter(prefix="/api/company", tags=["company"])


@router.get("/profile")
def get_profile(
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    company = AccountService(db, settings=settings).get_company(principal.id)
    return schemas.envelope(schemas.company_profile(company))


@router.patch("/profile")
def update_profile(
    payload: CompanyProfileUpdate,
    request: Request,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    company = AccountService(db, settings=settings).update_company_profile(
        principal.id, payload, ip_address=client_ip(request)
    )
    return schemas.envelope(schemas.company_profile(company), message="Perfil atualizado")


@router.get("/jobs")
def list_jobs(
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    rows = CatalogService(db, settings=settings).list_company_jobs(principal.id)
    return schemas.envelope([schemas.job_summary(job, count) for job, count in rows])


@router.post("/jobs")
def create_job(
    payload: JobInput,
    request: Request,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    job = CatalogService(db, settings=settings).create_job(principal.id, payload, ip_address=client_ip(request))
    return schemas.envelope(schemas.job_summary(job), message="Vaga publicada com sucesso!")


@router.patch("/jobs/{job_id}/status")
def set_job_status(
    job_id: int,
    payload: JobStatusUpdate,
    request: Request,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    job = CatalogService(db, settings=settings).set_job_status(
        principal.id, job_id, payload.status, ip_address=client_ip(request)
    )
    return schemas.envelope(schemas.job_summary(job))


@router.get("/applications")
def list_applications(
    job_id: int | None = None,
    status: str | None = None,
    page: int = 1,
    limit: int | None = None,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    result = ApplicationService(db, settings=settings).list_for_company(
        principal.id, job_id=job_id, status=status, page=page, limit=limit
    )
    return schemas.paged(result, schemas.company_application)


@router.patch("/applications")
def update_application(
    payload: ApplicationStatusUpdate,
    request: Request,
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    application = ApplicationService(db, settings=settings).set_status(
        principal.id, payload, ip_address=client_ip(request)
    )
    return schemas.envelope(schemas.ApplicationResponse.model_validate(application))
