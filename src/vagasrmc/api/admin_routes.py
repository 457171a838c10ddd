from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from vagasrmc.api import schemas
from vagasrmc.api.deps import client_ip, get_app_settings, get_db, require_admin
from vagasrmc.config import Settings
from vagasrmc.core.admin import AdminService
from vagasrmc.core.plans import PlanService
from vagasrmc.types import PlanType, Principal

router = APIRouter(prefix="/api/admin", tags=["admin"])


class SubscriptionRequest(BaseModel):
    plan: PlanType


def _company_row(company) -> dict:
    return {
        "id": company.id,
        "legal_name": company.legal_name,
        "trade_name": company.trade_name,
        "cnpj": company.cnpj,
        "is_verified": company.is_verified,
        "cities": [link.city.name for link in company.cities],
        "created_at": company.created_at.isoformat() if company.created_at else None,
    }


@router.get("/stats")
def stats(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    data = AdminService(db, settings=settings).stats()
    data["recent_jobs"] = [schemas.job_summary(job) for job in data["recent_jobs"]]
    data["recent_companies"] = [_company_row(company) for company in data["recent_companies"]]
    return schemas.envelope(data)


@router.get("/companies")
def list_companies(
    verified: bool | None = None,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    rows = AdminService(db, settings=settings).list_companies(verified=verified)
    return schemas.envelope([_company_row(company) for company in rows])


@router.post("/companies/{company_id}/verify")
def verify_company(
    company_id: int,
    request: Request,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    company = AdminService(db, settings=settings).verify_company(
        company_id, actor_id=principal.id, ip_address=client_ip(request)
    )
    return schemas.envelope(_company_row(company), message="Empresa verificada")


@router.post("/companies/{company_id}/subscription")
def assign_plan(
    company_id: int,
    payload: SubscriptionRequest,
    request: Request,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    subscription = PlanService(db, settings=settings).subscribe(
        company_id, payload.plan, actor_id=principal.id, ip_address=client_ip(request)
    )
    return schemas.envelope(
        {
            "company_id": subscription.company_id,
            "status": subscription.status,
            "plan": schemas.PlanResponse.model_validate(subscription.plan),
        }
    )


@router.get("/audit")
def audit_log(
    user_id: int | None = None,
    action: str | None = None,
    page: int = 1,
    limit: int | None = None,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    result = AdminService(db, settings=settings).audit_log(user_id=user_id, action=action, page=page, limit=limit)
    return schemas.paged(result, schemas.audit_entry)
