from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from vagasrmc.config import Settings, get_settings
from vagasrmc.core.catalog import clamp_pagination
from vagasrmc.core.lifecycle import ApplicationPolicy, is_valid_status
from vagasrmc.core.matching import calculate_match_score
from vagasrmc.db.base import utcnow
from vagasrmc.db.models import Application, Candidate, Company
from vagasrmc.db.repositories import Repository
from vagasrmc.errors import Conflict, NotFound, ValidationError
from vagasrmc.types import ApplicationStatusUpdate, Page

logger = logging.getLogger(__name__)

CANDIDATE_PAGE_SIZE = 10


class ApplicationService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def _candidate_for(self, user_id: int) -> Candidate:
        candidate = self.repo.get_candidate_by_user(user_id)
        if candidate is None:
            raise NotFound("Candidato não encontrado")
        return candidate

    def _company_for(self, user_id: int) -> Company:
        company = self.repo.get_company_by_user(user_id)
        if company is None:
            raise NotFound("Empresa não encontrada")
        return company

    # candidate side

    def apply(
        self,
        user_id: int,
        job_slug: str,
        *,
        cover_letter: str | None = None,
        ip_address: str | None = None,
    ) -> Application:
        candidate = self._candidate_for(user_id)
        job = self.repo.get_job_by_slug(job_slug, active_only=True)
        if job is None:
            raise NotFound("Vaga não encontrada")
        if self.repo.get_application(job.id, candidate.id) is not None:
            raise Conflict("Você já se candidatou a esta vaga")

        score = calculate_match_score(candidate.skills or [], job.description)
        with self.repo.conflict_on_duplicate("Você já se candidatou a esta vaga"):
            application = self.repo.add(
                Application(
                    job_id=job.id,
                    candidate_id=candidate.id,
                    status="PENDING",
                    match_score=score,
                    cover_letter=cover_letter or None,
                )
            )
            self.repo.append_audit_log(
                user_id=user_id,
                action="APPLY",
                entity="Application",
                entity_id=application.id,
                details={"job_id": job.id, "job_title": job.title},
                ip_address=ip_address,
            )
            self.repo.commit()

        logger.info(
            "Application created application_id=%s job_id=%s candidate_id=%s score=%s",
            application.id,
            job.id,
            candidate.id,
            score,
        )
        return application

    def cancel(self, user_id: int, application_id: int, *, ip_address: str | None = None) -> None:
        candidate = self._candidate_for(user_id)
        application = self.repo.get_candidate_application(candidate.id, application_id)
        if application is None:
            raise NotFound("Candidatura não encontrada")
        if not ApplicationPolicy(application.status, application.viewed_at).can_cancel():
            raise ValidationError("Só é possível cancelar candidaturas pendentes")

        job_id = application.job_id
        self.repo.delete(application)
        self.repo.append_audit_log(
            user_id=user_id,
            action="CANCEL_APPLICATION",
            entity="Application",
            entity_id=application_id,
            details={"job_id": job_id},
            ip_address=ip_address,
        )
        self.repo.commit()
        logger.info("Application cancelled application_id=%s", application_id)

    def list_for_candidate(
        self,
        user_id: int,
        *,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page:
        candidate = self._candidate_for(user_id)
        page, limit = clamp_pagination(
            page, limit, default=CANDIDATE_PAGE_SIZE, maximum=self.settings.page_size_max
        )
        rows, total = self.repo.list_candidate_applications(candidate.id, status=status, page=page, limit=limit)
        return Page(items=rows, page=page, limit=limit, total=total)

    # company side

    def list_for_company(
        self,
        user_id: int,
        *,
        job_id: int | None = None,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> Page:
        company = self._company_for(user_id)
        page, limit = clamp_pagination(
            page, limit, default=self.settings.page_size_default, maximum=self.settings.page_size_max
        )
        rows, total = self.repo.list_company_applications(
            company.id, job_id=job_id, status=status, page=page, limit=limit
        )
        return Page(items=rows, page=page, limit=limit, total=total)

    def set_status(
        self,
        user_id: int,
        payload: ApplicationStatusUpdate,
        *,
        ip_address: str | None = None,
    ) -> Application:
        if not is_valid_status(payload.status):
            raise ValidationError("Status inválido")

        company = self._company_for(user_id)
        application = self.repo.get_company_application(company.id, payload.application_id)
        if application is None:
            raise NotFound("Candidatura não encontrada")

        change = ApplicationPolicy(application.status, application.viewed_at).transition(
            payload.status, now=utcnow()
        )
        application.status = change.current
        application.viewed_at = change.viewed_at
        if payload.feedback is not None:
            application.feedback = payload.feedback

        self.repo.append_audit_log(
            user_id=user_id,
            action="UPDATE_APPLICATION",
            entity="Application",
            entity_id=application.id,
            details={"from": change.previous, "to": change.current},
            ip_address=ip_address,
        )
        self.repo.commit()
        logger.info(
            "Application status set application_id=%s %s->%s",
            application.id,
            change.previous,
            change.current,
        )
        return application
