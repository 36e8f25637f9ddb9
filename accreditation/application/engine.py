from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from accreditation.infrastructure.db.repositories.application_repository import ApplicationRepository
from accreditation.infrastructure.db.repositories.institution_repository import InstitutionRepository
from accreditation.services.application_registry import ApplicationRegistry
from accreditation.services.progress import ProgressAggregator
from accreditation.services.status_machine import StatusStateMachine


@dataclass
class AccreditationEngine:
    """
    Repositories and services bound to one SQLAlchemy session.
    The aggregator listens to application saves to keep SAR-phase
    institution progress current.
    """
    session: Session
    institutions: InstitutionRepository
    applications: ApplicationRepository
    aggregator: ProgressAggregator
    state_machine: StatusStateMachine
    registry: ApplicationRegistry

    @classmethod
    def from_session(
            cls, session: Session, clock: Optional[Callable[[], datetime]] = None
    ) -> "AccreditationEngine":
        institutions = InstitutionRepository(session)
        applications = ApplicationRepository(session)
        aggregator = ProgressAggregator(institutions, applications, clock=clock)
        state_machine = StatusStateMachine(institutions, applications, aggregator, clock=clock)
        registry = ApplicationRegistry(institutions, applications, state_machine, clock=clock)
        applications.subscribe(aggregator.refresh_institution)
        return cls(
            session=session,
            institutions=institutions,
            applications=applications,
            aggregator=aggregator,
            state_machine=state_machine,
            registry=registry,
        )

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
