from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vagasrmc.db.models import (
    Application,
    AuditLog,
    Candidate,
    Company,
    FavoriteJob,
    Job,
)
from vagasrmc.types import Page, Principal


class _ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CityResponse(_ORMModel):
    id: int
    name: str
    slug: str


class AreaResponse(CityResponse):
    pass


class SegmentResponse(CityResponse):
    pass


class PlanResponse(_ORMModel):
    id: int
    name: str
    type: str
    max_active_jobs: int
    max_job_days: int
    can_highlight: bool
    can_feature: bool
    can_search_resume: bool
    price_monthly: float
    price_yearly: float | None = None


class UserResponse(BaseModel):
    id: int
    email: str
    role: str


class SessionResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse


class CompanySummary(_ORMModel):
    id: int
    trade_name: str
    logo_url: str | None = None
    is_verified: bool


class JobSummary(BaseModel):
    id: int
    slug: str
    title: str
    status: str
    level: str
    modality: str
    contract_type: str
    salary_min: float | None = None
    salary_max: float | None = None
    hide_salary: bool
    is_featured: bool
    is_highlighted: bool
    view_count: int
    published_at: datetime | None = None
    expires_at: datetime | None = None
    area: AreaResponse | None = None
    company: CompanySummary | None = None
    cities: list[CityResponse] = Field(default_factory=list)
    applications_count: int = 0


class JobDetailResponse(JobSummary):
    description: str
    requirements: str | None = None
    benefits: str | None = None
    work_schedule: str | None = None
    apply_by_platform: bool
    apply_by_whatsapp: str | None = None
    apply_by_email: str | None = None
    apply_by_url: str | None = None
    favorites_count: int = 0
    has_applied: bool = False
    is_favorited: bool = False


class CandidateProfileResponse(BaseModel):
    id: int
    email: str
    full_name: str
    cpf: str | None = None
    phone: str
    residence_city: CityResponse | None = None
    desired_position: str | None = None
    level: str | None = None
    area: AreaResponse | None = None
    experience_years: int | None = None
    education: str | None = None
    salary_min: float | None = None
    salary_max: float | None = None
    resume_url: str | None = None
    skills: list[str] = Field(default_factory=list)
    is_public_profile: bool
    receive_alerts: bool


class CompanyProfileResponse(BaseModel):
    id: int
    email: str
    legal_name: str
    trade_name: str
    cnpj: str
    phone: str
    whatsapp: str | None = None
    website: str | None = None
    description: str | None = None
    logo_url: str | None = None
    is_verified: bool
    segment: SegmentResponse | None = None
    cities: list[CityResponse] = Field(default_factory=list)
    plan: PlanResponse | None = None


class ApplicationResponse(_ORMModel):
    id: int
    job_id: int
    candidate_id: int
    status: str
    match_score: int
    cover_letter: str | None = None
    feedback: str | None = None
    viewed_at: datetime | None = None
    created_at: datetime | None = None


class ApplicantSummary(BaseModel):
    id: int
    full_name: str
    email: str
    phone: str
    residence_city: str | None = None
    skills: list[str] = Field(default_factory=list)


class CompanyApplicationResponse(ApplicationResponse):
    job_title: str
    candidate: ApplicantSummary


class CandidateApplicationResponse(ApplicationResponse):
    job: JobSummary


class FavoriteResponse(BaseModel):
    id: int
    created_at: datetime | None = None
    job: JobSummary


class AuditLogResponse(_ORMModel):
    id: int
    user_id: int | None = None
    action: str
    entity: str
    entity_id: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    ip_address: str | None = None
    created_at: datetime | None = None


def _job_fields(job: Job, applications_count: int) -> dict[str, Any]:
    hidden = job.hide_salary
    return {
        "id": job.id,
        "slug": job.slug,
        "title": job.title,
        "status": job.status,
        "level": job.level,
        "modality": job.modality,
        "contract_type": job.contract_type,
        "salary_min": None if hidden else job.salary_min,
        "salary_max": None if hidden else job.salary_max,
        "hide_salary": job.hide_salary,
        "is_featured": job.is_featured,
        "is_highlighted": job.is_highlighted,
        "view_count": job.view_count,
        "published_at": job.published_at,
        "expires_at": job.expires_at,
        "area": AreaResponse.model_validate(job.area) if job.area else None,
        "company": CompanySummary.model_validate(job.company) if job.company else None,
        "cities": [CityResponse.model_validate(link.city) for link in job.cities],
        "applications_count": applications_count,
    }


def job_summary(job: Job, applications_count: int = 0) -> JobSummary:
    return JobSummary(**_job_fields(job, applications_count))


def job_detail(detail) -> JobDetailResponse:
    job = detail.job
    return JobDetailResponse(
        **_job_fields(job, detail.applications_count),
        description=job.description,
        requirements=job.requirements,
        benefits=job.benefits,
        work_schedule=job.work_schedule,
        apply_by_platform=job.apply_by_platform,
        apply_by_whatsapp=job.apply_by_whatsapp,
        apply_by_email=job.apply_by_email,
        apply_by_url=job.apply_by_url,
        favorites_count=detail.favorites_count,
        has_applied=detail.has_applied,
        is_favorited=detail.is_favorited,
    )


def candidate_profile(candidate: Candidate) -> CandidateProfileResponse:
    return CandidateProfileResponse(
        id=candidate.id,
        email=candidate.user.email,
        full_name=candidate.full_name,
        cpf=candidate.cpf,
        phone=candidate.phone,
        residence_city=CityResponse.model_validate(candidate.residence_city) if candidate.residence_city else None,
        desired_position=candidate.desired_position,
        level=candidate.level,
        area=AreaResponse.model_validate(candidate.area) if candidate.area else None,
        experience_years=candidate.experience_years,
        education=candidate.education,
        salary_min=candidate.salary_min,
        salary_max=candidate.salary_max,
        resume_url=candidate.resume_url,
        skills=list(candidate.skills or []),
        is_public_profile=candidate.is_public_profile,
        receive_alerts=candidate.receive_alerts,
    )


def company_profile(company: Company) -> CompanyProfileResponse:
    subscription = company.subscription
    plan = subscription.plan if subscription is not None and subscription.status == "ACTIVE" else None
    return CompanyProfileResponse(
        id=company.id,
        email=company.user.email,
        legal_name=company.legal_name,
        trade_name=company.trade_name,
        cnpj=company.cnpj,
        phone=company.phone,
        whatsapp=company.whatsapp,
        website=company.website,
        description=company.description,
        logo_url=company.logo_url,
        is_verified=company.is_verified,
        segment=SegmentResponse.model_validate(company.segment) if company.segment else None,
        cities=[CityResponse.model_validate(link.city) for link in company.cities],
        plan=PlanResponse.model_validate(plan) if plan else None,
    )


def company_application(application: Application) -> CompanyApplicationResponse:
    candidate = application.candidate
    return CompanyApplicationResponse(
        **ApplicationResponse.model_validate(application).model_dump(),
        job_title=application.job.title,
        candidate=ApplicantSummary(
            id=candidate.id,
            full_name=candidate.full_name,
            email=candidate.user.email,
            phone=candidate.phone,
            residence_city=candidate.residence_city.name if candidate.residence_city else None,
            skills=list(candidate.skills or []),
        ),
    )


def candidate_application(application: Application) -> CandidateApplicationResponse:
    return CandidateApplicationResponse(
        **ApplicationResponse.model_validate(application).model_dump(),
        job=job_summary(application.job),
    )


def favorite(row: FavoriteJob) -> FavoriteResponse:
    return FavoriteResponse(id=row.id, created_at=row.created_at, job=job_summary(row.job))


def audit_entry(row: AuditLog) -> AuditLogResponse:
    return AuditLogResponse.model_validate(row)


def user_response(principal: Principal) -> UserResponse:
    return UserResponse(id=principal.id, email=principal.email, role=principal.role)


def dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [dump(item) for item in value]
    if isinstance(value, dict):
        return {key: dump(item) for key, item in value.items()}
    return value


def envelope(data: Any = None, *, message: str | None = None, **extra: Any) -> dict[str, Any]:
    """Success envelope: ``{"success": true, "data": ..., "message"?: ...}``."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = dump(data)
    if message is not None:
        body["message"] = message
    body.update(extra)
    return body


def paged(page: Page, serializer) -> dict[str, Any]:
    return envelope([serializer(item) for item in page.items], pagination=page.pagination())
