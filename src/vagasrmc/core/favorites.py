from __future__ import annotations

import logging
from typing import Literal

from sqlalchemy.orm import Session

from vagasrmc.config import Settings, get_settings
from vagasrmc.core.catalog import clamp_pagination
from vagasrmc.db.models import Candidate, FavoriteJob
from vagasrmc.db.repositories import Repository
from vagasrmc.errors import NotFound
from vagasrmc.types import Page

logger = logging.getLogger(__name__)

ToggleResult = Literal["favorited", "unfavorited"]


class FavoriteService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def _candidate_for(self, user_id: int) -> Candidate:
        candidate = self.repo.get_candidate_by_user(user_id)
        if candidate is None:
            raise NotFound("Candidato não encontrado")
        return candidate

    def toggle(self, user_id: int, job_slug: str) -> ToggleResult:
        """Remove the favorite when present, otherwise create it. Paused or closed jobs can be favorited too."""
        candidate = self._candidate_for(user_id)
        job = self.repo.get_job_by_slug(job_slug, active_only=False)
        if job is None:
            raise NotFound("Vaga não encontrada")

        existing = self.repo.get_favorite(candidate.id, job.id)
        if existing is not None:
            self.repo.delete(existing)
            self.repo.commit()
            logger.info("Favorite removed candidate_id=%s job_id=%s", candidate.id, job.id)
            return "unfavorited"

        with self.repo.conflict_on_duplicate("Vaga já está nos favoritos"):
            self.repo.add(FavoriteJob(candidate_id=candidate.id, job_id=job.id))
            self.repo.commit()
        logger.info("Favorite added candidate_id=%s job_id=%s", candidate.id, job.id)
        return "favorited"

    def list_favorites(self, user_id: int, *, page: int | None = None, limit: int | None = None) -> Page:
        candidate = self._candidate_for(user_id)
        page, limit = clamp_pagination(page, limit, default=10, maximum=self.settings.page_size_max)
        rows, total = self.repo.list_favorites(candidate.id, page=page, limit=limit)
        return Page(items=rows, page=page, limit=limit, total=total)
