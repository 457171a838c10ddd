from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from vagasrmc.config import Settings, get_settings
from vagasrmc.db.base import utcnow
from vagasrmc.db.models import Plan, Subscription
from vagasrmc.db.repositories import Repository
from vagasrmc.errors import NotFound, QuotaExceeded
from vagasrmc.types import UNLIMITED

logger = logging.getLogger(__name__)


class PlanService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def active_plan(self, company_id: int) -> Plan | None:
        subscription = self.repo.get_subscription(company_id)
        if subscription is None or subscription.status != "ACTIVE":
            return None
        return subscription.plan

    def max_active_jobs_for(self, company_id: int) -> int:
        plan = self.active_plan(company_id)
        if plan is None:
            return self.settings.default_max_active_jobs
        return plan.max_active_jobs

    def max_job_days_for(self, company_id: int) -> int:
        plan = self.active_plan(company_id)
        if plan is None:
            free = self.repo.get_plan_by_type("FREE")
            return free.max_job_days if free else 30
        return plan.max_job_days

    def ensure_job_quota(self, company_id: int) -> None:
        """Raise QuotaExceeded when one more ACTIVE job would exceed the company's plan."""
        limit = self.max_active_jobs_for(company_id)
        if limit == UNLIMITED:
            return

        active = self.repo.count_active_jobs(company_id)
        if active >= limit:
            logger.warning("Job quota reached company_id=%s active=%s limit=%s", company_id, active, limit)
            raise QuotaExceeded(
                f"Limite de {limit} vagas ativas atingido. Atualize seu plano.",
                details={"limit": limit, "active": active},
            )

    def subscribe(
        self,
        company_id: int,
        plan_type: str,
        *,
        actor_id: int | None = None,
        ip_address: str | None = None,
    ) -> Subscription:
        company = self.repo.get_company(company_id)
        if company is None:
            raise NotFound("Empresa não encontrada")
        plan = self.repo.get_plan_by_type(plan_type.upper())
        if plan is None:
            raise NotFound("Plano não encontrado")

        subscription = self.repo.get_subscription(company_id)
        if subscription is None:
            subscription = Subscription(company_id=company_id, plan_id=plan.id, status="ACTIVE")
            self.repo.add(subscription)
        else:
            subscription.plan_id = plan.id
            subscription.status = "ACTIVE"
            subscription.started_at = utcnow()
            subscription.ends_at = None

        self.repo.append_audit_log(
            user_id=actor_id,
            action="SUBSCRIBE",
            entity="Company",
            entity_id=company_id,
            details={"plan": plan.type},
            ip_address=ip_address,
        )
        self.repo.commit()
        self.session.expire(subscription)
        logger.info("Company subscribed company_id=%s plan=%s", company_id, plan.type)
        return subscription
