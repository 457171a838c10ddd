from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from vagasrmc.config import Settings, get_settings
from vagasrmc.core.catalog import clamp_pagination
from vagasrmc.db.models import Application, Candidate, Company, Job, User
from vagasrmc.db.repositories import Repository
from vagasrmc.errors import NotFound
from vagasrmc.types import Page

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def stats(self) -> dict[str, Any]:
        return {
            "counts": {
                "users": self.repo.count(User),
                "candidates": self.repo.count(Candidate),
                "companies": self.repo.count(Company),
                "pending_companies": self.repo.count(Company, Company.is_verified.is_(False)),
                "jobs": self.repo.count(Job),
                "active_jobs": self.repo.count(Job, Job.status == "ACTIVE"),
                "applications": self.repo.count(Application),
            },
            "jobs_by_city": [{"name": name, "total": total} for name, total in self.repo.jobs_by_city(10)],
            "jobs_by_area": [{"name": name, "total": total} for name, total in self.repo.jobs_by_area(10)],
            "recent_jobs": self.repo.recent_jobs(5),
            "recent_companies": self.repo.list_companies(limit=5),
        }

    def list_companies(self, *, verified: bool | None = None, limit: int = 50) -> list[Company]:
        return self.repo.list_companies(verified=verified, limit=limit)

    def verify_company(self, company_id: int, *, actor_id: int | None = None, ip_address: str | None = None) -> Company:
        company = self.repo.get_company(company_id)
        if company is None:
            raise NotFound("Empresa não encontrada")
        if company.is_verified:
            return company

        company.is_verified = True
        self.repo.append_audit_log(
            user_id=actor_id,
            action="VERIFY_COMPANY",
            entity="Company",
            entity_id=company.id,
            ip_address=ip_address,
        )
        self.repo.commit()
        logger.info("Company verified company_id=%s", company.id)
        return company

    def audit_log(
        self,
        *,
        user_id: int | None = None,
        action: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page:
        page, limit = clamp_pagination(page, limit, default=50, maximum=200)
        rows, total = self.repo.list_audit_logs(user_id=user_id, action=action, page=page, limit=limit)
        return Page(items=rows, page=page, limit=limit, total=total)
