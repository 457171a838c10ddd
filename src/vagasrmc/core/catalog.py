from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.orm import Session

from vagasrmc.config import Settings, get_settings
from vagasrmc.core.plans import PlanService
from vagasrmc.core.text import slugify
from vagasrmc.db.base import utcnow
from vagasrmc.db.models import City, Company, Job, JobArea, JobCity, Plan, Segment
from vagasrmc.db.repositories import JobSearchFilters, Repository
from vagasrmc.errors import NotFound, ValidationError
from vagasrmc.types import JobInput, JobSearchQuery, Page, Principal

logger = logging.getLogger(__name__)


MAX_OFFSET = 2**63 - 1


def clamp_pagination(page: int | None, limit: int | None, *, default: int, maximum: int) -> tuple[int, int]:
    """Pages start at 1; limit falls back to ``default`` and is clamped to [1, maximum]."""
    page = max(1, page or 1)
    if limit is None:
        limit = default
    limit = max(1, min(limit, maximum))
    # OFFSET is bound as a 64-bit integer
    page = min(page, MAX_OFFSET // limit + 1)
    return page, limit


@dataclass(slots=True)
class JobDetail:
    job: Job
    applications_count: int
    favorites_count: int
    has_applied: bool = False
    is_favorited: bool = False


class CatalogService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)
        self.plans = PlanService(session, settings=self.settings)

    def paginate(self, page: int | None, limit: int | None) -> tuple[int, int]:
        return clamp_pagination(
            page,
            limit,
            default=self.settings.page_size_default,
            maximum=self.settings.page_size_max,
        )

    # public search

    def list_jobs(self, query: JobSearchQuery) -> Page:
        page, limit = self.paginate(query.page, query.limit)
        filters = JobSearchFilters(
            q=query.q.strip(),
            city=query.city.strip(),
            area=query.area.strip(),
            level=query.level.strip().upper(),
            modality=query.modality.strip().upper(),
            contract_type=query.contract_type.strip().upper(),
            salary_min=query.salary_min,
            salary_max=query.salary_max,
        )
        rows, total = self.repo.search_jobs(filters, order_by=query.order_by, page=page, limit=limit)
        return Page(items=rows, page=page, limit=limit, total=total)

    def get_job_detail(self, slug: str, principal: Principal | None = None) -> JobDetail:
        job = self.repo.get_job_by_slug(slug, active_only=True)
        if job is None:
            raise NotFound("Vaga não encontrada")

        self.repo.increment_job_views(job.id)
        self.repo.commit()
        self.session.refresh(job, ["view_count"])

        detail = JobDetail(
            job=job,
            applications_count=self.repo.count_job_applications(job.id),
            favorites_count=self.repo.count_job_favorites(job.id),
        )
        if principal is not None and principal.role == "CANDIDATE":
            candidate = self.repo.get_candidate_by_user(principal.id)
            if candidate is not None:
                detail.has_applied = self.repo.get_application(job.id, candidate.id) is not None
                detail.is_favorited = self.repo.get_favorite(candidate.id, job.id) is not None
        return detail

    # company side

    def _company_for(self, user_id: int) -> Company:
        company = self.repo.get_company_by_user(user_id)
        if company is None:
            raise NotFound("Empresa não encontrada")
        return company

    def _unique_slug(self, company_id: int, title: str) -> str:
        slug = slugify(title)
        if not self.repo.job_slug_exists(company_id, slug):
            return slug
        stamp = int(time.time() * 1000)
        candidate = f"{slug}-{stamp}"
        while self.repo.job_slug_exists(company_id, candidate):
            stamp += 1
            candidate = f"{slug}-{stamp}"
        return candidate

    def create_job(self, user_id: int, payload: JobInput, *, ip_address: str | None = None) -> Job:
        company = self._company_for(user_id)
        self.plans.ensure_job_quota(company.id)

        if self.repo.get_area(payload.area_id) is None:
            raise ValidationError("Área inválida")
        if self.repo.missing_city_ids(payload.city_ids):
            raise ValidationError("Cidade inválida")

        plan: Plan | None = self.plans.active_plan(company.id)
        now = utcnow()
        job = Job(
            company_id=company.id,
            title=payload.title,
            slug=self._unique_slug(company.id, payload.title),
            description=payload.description,
            requirements=payload.requirements,
            benefits=payload.benefits,
            area_id=payload.area_id,
            level=payload.level,
            modality=payload.modality,
            contract_type=payload.contract_type,
            salary_min=payload.salary_min,
            salary_max=payload.salary_max,
            hide_salary=payload.hide_salary,
            work_schedule=payload.work_schedule,
            apply_by_platform=payload.apply_by_platform,
            apply_by_whatsapp=payload.apply_by_whatsapp,
            apply_by_email=payload.apply_by_email,
            apply_by_url=payload.apply_by_url,
            is_highlighted=bool(payload.is_highlighted and plan is not None and plan.can_highlight),
            is_featured=bool(payload.is_featured and plan is not None and plan.can_feature),
            status="ACTIVE",
            published_at=now,
            expires_at=now + timedelta(days=self.plans.max_job_days_for(company.id)),
        )
        job.cities = [JobCity(city_id=city_id) for city_id in payload.city_ids]

        with self.repo.conflict_on_duplicate("Já existe uma vaga com este endereço"):
            self.repo.add(job)
            self.repo.append_audit_log(
                user_id=user_id,
                action="CREATE_JOB",
                entity="Job",
                entity_id=job.id,
                details={"title": job.title},
                ip_address=ip_address,
            )
            self.repo.commit()

        logger.info("Job created job_id=%s company_id=%s slug=%s", job.id, company.id, job.slug)
        return job

    def list_company_jobs(self, user_id: int) -> list[tuple[Job, int]]:
        company = self._company_for(user_id)
        return self.repo.list_company_jobs(company.id)

    def set_job_status(self, user_id: int, job_id: int, status: str, *, ip_address: str | None = None) -> Job:
        company = self._company_for(user_id)
        job = self.repo.get_company_job(company.id, job_id)
        if job is None:
            raise NotFound("Vaga não encontrada")
        if job.status == status:
            return job
        if job.status == "CLOSED":
            raise ValidationError("Vagas encerradas não podem ser alteradas")

        previous = job.status
        if status == "ACTIVE":
            self.plans.ensure_job_quota(company.id)
            now = utcnow()
            job.published_at = job.published_at or now
            job.expires_at = now + timedelta(days=self.plans.max_job_days_for(company.id))
        job.status = status

        self.repo.append_audit_log(
            user_id=user_id,
            action="UPDATE_JOB_STATUS",
            entity="Job",
            entity_id=job.id,
            details={"from": previous, "to": status},
            ip_address=ip_address,
        )
        self.repo.commit()
        logger.info("Job status changed job_id=%s %s->%s", job.id, previous, status)
        return job

    # reference data

    def list_cities(self) -> list[City]:
        return self.repo.list_cities()

    def list_areas(self) -> list[JobArea]:
        return self.repo.list_areas()

    def list_segments(self) -> list[Segment]:
        return self.repo.list_segments()

    def list_plans(self) -> list[Plan]:
        return self.repo.list_plans()
