from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from vagasrmc.types import APPLICATION_STATUSES, ApplicationStatus

INITIAL_STATUS: ApplicationStatus = "PENDING"
TERMINAL_STATUSES = frozenset({"REJECTED", "HIRED"})
PIPELINE_ORDER: dict[str, int] = {status: index for index, status in enumerate(APPLICATION_STATUSES)}


def is_valid_status(status: str) -> bool:
    return status in PIPELINE_ORDER


@dataclass(slots=True)
class StatusChange:
    previous: str
    current: str
    viewed_at: datetime | None

    @property
    def changed(self) -> bool:
        return self.previous != self.current


@dataclass(slots=True)
class ApplicationPolicy:
    status: str
    viewed_at: datetime | None = None

    def can_cancel(self) -> bool:
        return self.status == INITIAL_STATUS

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition(self, target: str, *, now: datetime) -> StatusChange:
        """Company-driven status set. ``viewed_at`` is stamped on the first entry into VIEWED only."""
        if not is_valid_status(target):
            raise ValueError(f"unsupported application status '{target}'")

        viewed_at = self.viewed_at
        if target == "VIEWED" and viewed_at is None:
            viewed_at = now
        return StatusChange(previous=self.status, current=target, viewed_at=viewed_at)
