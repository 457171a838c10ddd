from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, and_, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from vagasrmc.db.models import (
    Application,
    AuditLog,
    Candidate,
    City,
    Company,
    CompanyCity,
    FavoriteJob,
    Job,
    JobArea,
    JobCity,
    Plan,
    Segment,
    Subscription,
    User,
)
from vagasrmc.errors import Conflict


@dataclass(slots=True)
class JobSearchFilters:
    q: str = ""
    city: str = ""
    area: str = ""
    level: str = ""
    modality: str = ""
    contract_type: str = ""
    salary_min: float | None = None
    salary_max: float | None = None


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text matches literally (backslash is the escape char)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _job_loading_options() -> list:
    return [
        selectinload(Job.company),
        selectinload(Job.area),
        selectinload(Job.cities).selectinload(JobCity.city),
    ]


def _applications_count_column():
    return (
        select(func.count(Application.id))
        .where(Application.job_id == Job.id)
        .correlate(Job)
        .scalar_subquery()
    )


class Repository:
    """Data access over one SQLAlchemy session.

    Write helpers only add and flush; callers decide when a unit of work is
    committed so multi-row operations land in a single transaction.
    """

    def __init__(self, session: Session):
        self.session = session

    # unit of work

    def add(self, obj: Any) -> Any:
        self.session.add(obj)
        self.session.flush()
        return obj

    def delete(self, obj: Any) -> None:
        self.session.delete(obj)
        self.session.flush()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @contextmanager
    def conflict_on_duplicate(self, message: str) -> Iterator[None]:
        """Roll back and raise Conflict when a unique constraint rejects the enclosed writes."""
        try:
            yield
        except IntegrityError as exc:
            self.session.rollback()
            raise Conflict(message) from exc

    # users and profiles

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.session.scalar(select(User).where(User.email == email))

    def get_candidate_by_user(self, user_id: int) -> Candidate | None:
        statement = (
            select(Candidate)
            .where(Candidate.user_id == user_id)
            .options(selectinload(Candidate.residence_city), selectinload(Candidate.area))
        )
        return self.session.scalar(statement)

    def get_candidate_by_cpf(self, cpf: str) -> Candidate | None:
        return self.session.scalar(select(Candidate).where(Candidate.cpf == cpf))

    def get_company(self, company_id: int) -> Company | None:
        return self.session.get(Company, company_id)

    def get_company_by_user(self, user_id: int) -> Company | None:
        statement = (
            select(Company)
            .where(Company.user_id == user_id)
            .options(
                selectinload(Company.segment),
                selectinload(Company.cities).selectinload(CompanyCity.city),
                selectinload(Company.subscription).selectinload(Subscription.plan),
            )
        )
        return self.session.scalar(statement)

    def get_company_by_cnpj(self, cnpj: str) -> Company | None:
        return self.session.scalar(select(Company).where(Company.cnpj == cnpj))

    def list_companies(self, *, verified: bool | None = None, limit: int = 50) -> list[Company]:
        statement = select(Company).order_by(Company.created_at.desc(), Company.id.desc()).limit(limit)
        if verified is not None:
            statement = statement.where(Company.is_verified.is_(verified))
        statement = statement.options(selectinload(Company.cities).selectinload(CompanyCity.city))
        return list(self.session.scalars(statement).all())

    # reference data

    def get_city(self, city_id: int) -> City | None:
        return self.session.get(City, city_id)

    def missing_city_ids(self, city_ids: list[int]) -> list[int]:
        found = set(self.session.scalars(select(City.id).where(City.id.in_(city_ids))).all())
        return [city_id for city_id in city_ids if city_id not in found]

    def get_area(self, area_id: int) -> JobArea | None:
        return self.session.get(JobArea, area_id)

    def get_segment(self, segment_id: int) -> Segment | None:
        return self.session.get(Segment, segment_id)

    def list_cities(self) -> list[City]:
        return list(self.session.scalars(select(City).order_by(City.name.asc())).all())

    def list_areas(self) -> list[JobArea]:
        return list(self.session.scalars(select(JobArea).order_by(JobArea.name.asc())).all())

    def list_segments(self) -> list[Segment]:
        return list(self.session.scalars(select(Segment).order_by(Segment.name.asc())).all())

    def list_plans(self) -> list[Plan]:
        return list(self.session.scalars(select(Plan).order_by(Plan.price_monthly.asc())).all())

    def get_plan_by_type(self, plan_type: str) -> Plan | None:
        return self.session.scalar(select(Plan).where(Plan.type == plan_type))

    def get_subscription(self, company_id: int) -> Subscription | None:
        statement = (
            select(Subscription)
            .where(Subscription.company_id == company_id)
            .options(selectinload(Subscription.plan))
        )
        return self.session.scalar(statement)

    # jobs

    def _search_conditions(self, filters: JobSearchFilters) -> list:
        conditions = [Job.status == "ACTIVE"]
        if filters.q:
            pattern = f"%{escape_like(filters.q)}%"
            conditions.append(
                or_(
                    Job.title.ilike(pattern, escape="\\"),
                    Job.description.ilike(pattern, escape="\\"),
                    Job.company.has(Company.trade_name.ilike(pattern, escape="\\")),
                )
            )
        if filters.city:
            conditions.append(Job.cities.any(JobCity.city.has(City.slug == filters.city)))
        if filters.area:
            conditions.append(Job.area.has(JobArea.slug == filters.area))
        if filters.level:
            conditions.append(Job.level == filters.level)
        if filters.modality:
            conditions.append(Job.modality == filters.modality)
        if filters.contract_type:
            conditions.append(Job.contract_type == filters.contract_type)
        if filters.salary_min is not None:
            conditions.append(Job.salary_min >= filters.salary_min)
        if filters.salary_max is not None:
            conditions.append(Job.salary_max <= filters.salary_max)
        return conditions

    def search_jobs(
        self,
        filters: JobSearchFilters,
        *,
        order_by: str = "recent",
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[tuple[Job, int]], int]:
        conditions = self._search_conditions(filters)
        applications_count = _applications_count_column()

        if order_by == "salary":
            order_key = Job.salary_max.desc().nulls_last()
        elif order_by == "applications":
            order_key = applications_count.desc()
        else:
            order_key = Job.published_at.desc().nulls_last()

        statement: Select = (
            select(Job, applications_count.label("applications_count"))
            .where(and_(*conditions))
            .order_by(Job.is_featured.desc(), Job.is_highlighted.desc(), order_key, Job.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .options(*_job_loading_options())
        )
        rows = [(job, int(count or 0)) for job, count in self.session.execute(statement).all()]
        total = self.session.scalar(select(func.count(Job.id)).where(and_(*conditions))) or 0
        return rows, int(total)

    def get_job(self, job_id: int) -> Job | None:
        return self.session.get(Job, job_id)

    def get_job_by_slug(self, slug: str, *, active_only: bool = True) -> Job | None:
        statement = select(Job).where(Job.slug == slug)
        if active_only:
            statement = statement.where(Job.status == "ACTIVE")
        statement = statement.order_by(Job.id.asc()).limit(1).options(*_job_loading_options())
        return self.session.scalar(statement)

    def job_slug_exists(self, company_id: int, slug: str) -> bool:
        statement = select(Job.id).where(and_(Job.company_id == company_id, Job.slug == slug))
        return self.session.scalar(statement) is not None

    def count_active_jobs(self, company_id: int) -> int:
        statement = select(func.count(Job.id)).where(
            and_(Job.company_id == company_id, Job.status == "ACTIVE")
        )
        return int(self.session.scalar(statement) or 0)

    def list_company_jobs(self, company_id: int) -> list[tuple[Job, int]]:
        applications_count = _applications_count_column()
        statement = (
            select(Job, applications_count.label("applications_count"))
            .where(Job.company_id == company_id)
            .order_by(Job.created_at.desc(), Job.id.desc())
            .options(*_job_loading_options())
        )
        return [(job, int(count or 0)) for job, count in self.session.execute(statement).all()]

    def get_company_job(self, company_id: int, job_id: int) -> Job | None:
        statement = select(Job).where(and_(Job.id == job_id, Job.company_id == company_id))
        return self.session.scalar(statement)

    def increment_job_views(self, job_id: int) -> None:
        self.session.execute(update(Job).where(Job.id == job_id).values(view_count=Job.view_count + 1))

    def count_job_applications(self, job_id: int) -> int:
        return int(
            self.session.scalar(select(func.count(Application.id)).where(Application.job_id == job_id)) or 0
        )

    def count_job_favorites(self, job_id: int) -> int:
        return int(
            self.session.scalar(select(func.count(FavoriteJob.id)).where(FavoriteJob.job_id == job_id)) or 0
        )

    # applications

    def get_application(self, job_id: int, candidate_id: int) -> Application | None:
        statement = select(Application).where(
            and_(Application.job_id == job_id, Application.candidate_id == candidate_id)
        )
        return self.session.scalar(statement)

    def get_company_application(self, company_id: int, application_id: int) -> Application | None:
        statement = (
            select(Application)
            .join(Job, Application.job_id == Job.id)
            .where(and_(Application.id == application_id, Job.company_id == company_id))
        )
        return self.session.scalar(statement)

    def get_candidate_application(self, candidate_id: int, application_id: int) -> Application | None:
        statement = select(Application).where(
            and_(Application.id == application_id, Application.candidate_id == candidate_id)
        )
        return self.session.scalar(statement)

    def list_company_applications(
        self,
        company_id: int,
        *,
        job_id: int | None = None,
        status: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Application], int]:
        conditions = [Job.company_id == company_id]
        if job_id is not None:
            conditions.append(Application.job_id == job_id)
        if status:
            conditions.append(Application.status == status)

        statement = (
            select(Application)
            .join(Job, Application.job_id == Job.id)
            .where(and_(*conditions))
            .order_by(Application.match_score.desc(), Application.created_at.desc(), Application.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .options(
                selectinload(Application.job),
                selectinload(Application.candidate).selectinload(Candidate.user),
                selectinload(Application.candidate).selectinload(Candidate.residence_city),
            )
        )
        total = self.session.scalar(
            select(func.count(Application.id)).join(Job, Application.job_id == Job.id).where(and_(*conditions))
        )
        return list(self.session.scalars(statement).all()), int(total or 0)

    def list_candidate_applications(
        self,
        candidate_id: int,
        *,
        status: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Application], int]:
        conditions = [Application.candidate_id == candidate_id]
        if status:
            conditions.append(Application.status == status)

        statement = (
            select(Application)
            .where(and_(*conditions))
            .order_by(Application.created_at.desc(), Application.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .options(
                selectinload(Application.job).selectinload(Job.company),
                selectinload(Application.job).selectinload(Job.cities).selectinload(JobCity.city),
            )
        )
        total = self.session.scalar(select(func.count(Application.id)).where(and_(*conditions)))
        return list(self.session.scalars(statement).all()), int(total or 0)

    # favorites

    def get_favorite(self, candidate_id: int, job_id: int) -> FavoriteJob | None:
        statement = select(FavoriteJob).where(
            and_(FavoriteJob.candidate_id == candidate_id, FavoriteJob.job_id == job_id)
        )
        return self.session.scalar(statement)

    def list_favorites(self, candidate_id: int, *, page: int = 1, limit: int = 10) -> tuple[list[FavoriteJob], int]:
        statement = (
            select(FavoriteJob)
            .where(FavoriteJob.candidate_id == candidate_id)
            .order_by(FavoriteJob.created_at.desc(), FavoriteJob.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .options(
                selectinload(FavoriteJob.job).selectinload(Job.company),
                selectinload(FavoriteJob.job).selectinload(Job.area),
                selectinload(FavoriteJob.job).selectinload(Job.cities).selectinload(JobCity.city),
            )
        )
        total = self.session.scalar(
            select(func.count(FavoriteJob.id)).where(FavoriteJob.candidate_id == candidate_id)
        )
        return list(self.session.scalars(statement).all()), int(total or 0)

    # audit

    def append_audit_log(
        self,
        *,
        user_id: int | None,
        action: str,
        entity: str,
        entity_id: int | None = None,
        details: dict | None = None,
        ip_address: str | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            details=details or {},
            ip_address=ip_address,
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def list_audit_logs(
        self,
        *,
        user_id: int | None = None,
        action: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[AuditLog], int]:
        conditions = []
        if user_id is not None:
            conditions.append(AuditLog.user_id == user_id)
        if action:
            conditions.append(AuditLog.action == action)

        statement = select(AuditLog).order_by(AuditLog.id.desc()).offset((page - 1) * limit).limit(limit)
        count_statement = select(func.count(AuditLog.id))
        if conditions:
            statement = statement.where(and_(*conditions))
            count_statement = count_statement.where(and_(*conditions))
        return list(self.session.scalars(statement).all()), int(self.session.scalar(count_statement) or 0)

    # admin statistics

    def count(self, model: type, *conditions) -> int:
        statement = select(func.count()).select_from(model)
        if conditions:
            statement = statement.where(and_(*conditions))
        return int(self.session.scalar(statement) or 0)

    def jobs_by_city(self, limit: int = 10) -> list[tuple[str, int]]:
        statement = (
            select(City.name, func.count(JobCity.id).label("total"))
            .select_from(JobCity)
            .join(City, JobCity.city_id == City.id)
            .group_by(City.id, City.name)
            .order_by(func.count(JobCity.id).desc(), City.name.asc())
            .limit(limit)
        )
        return [(name, int(total)) for name, total in self.session.execute(statement).all()]

    def jobs_by_area(self, limit: int = 10) -> list[tuple[str, int]]:
        statement = (
            select(JobArea.name, func.count(Job.id).label("total"))
            .select_from(Job)
            .join(JobArea, Job.area_id == JobArea.id)
            .group_by(JobArea.id, JobArea.name)
            .order_by(func.count(Job.id).desc(), JobArea.name.asc())
            .limit(limit)
        )
        return [(name, int(total)) for name, total in self.session.execute(statement).all()]

    def recent_jobs(self, limit: int = 5) -> list[Job]:
        statement = (
            select(Job)
            .order_by(Job.created_at.desc(), Job.id.desc())
            .limit(limit)
            .options(*_job_loading_options())
        )
        return list(self.session.scalars(statement).all())
