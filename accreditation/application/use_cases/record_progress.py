# accreditation/application/use_cases/record_progress.py
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from accreditation.application.engine import AccreditationEngine
from accreditation.config.logger import logger
from accreditation.domain.exceptions import InvalidTransition
from accreditation.domain.models import ApplicationStatus, Institution, ProgressClass, SARApplication
from accreditation.services.progress import classify, default_clock, validate_percentage

_STATUS_BY_CLASS = {
    ProgressClass.DRAFT: ApplicationStatus.DRAFT,
    ProgressClass.IN_PROGRESS: ApplicationStatus.IN_PROGRESS,
    ProgressClass.COMPLETED: ApplicationStatus.COMPLETED,
}


class RecordApplicationProgressUseCase:
    """
    Called by the form editor every time an application field is saved.

    • completion must be an integer 0–100
    • a decrease is accepted (a field may be cleared) but logged as a
      data-quality warning
    • status follows the completion: 0 → draft, 100 → completed, else in-progress
    • submitted applications are read-only

    One commit per call; on a storage error the session is rolled back and
    the error re-raised.
    """

    def __init__(self, engine: AccreditationEngine, clock: Optional[Callable[[], datetime]] = None):
        self._engine = engine
        self._clock = clock or default_clock

    def execute(self, record_id: str, percentage: int, actor: str) -> SARApplication:
        apps = self._engine.applications
        app = apps.get(record_id)
        percentage = validate_percentage(percentage, app.application_id)

        if app.status is ApplicationStatus.SUBMITTED:
            raise InvalidTransition(app.status, ApplicationStatus.IN_PROGRESS,
                                    reason=f"application {app.application_id} is already submitted")

        if percentage < app.completion_percentage:
            logger.warning("Completion of %s decreased: %d%% → %d%% (by %s)",
                           app.application_id, app.completion_percentage, percentage, actor)

        app.completion_percentage = percentage
        app.status = _STATUS_BY_CLASS[classify(percentage)]
        app.last_modified_date = self._clock()
        app.last_modified_by = actor

        try:
            apps.put(app)
            self._engine.commit()
        except SQLAlchemyError as db_err:
            logger.exception("Transaction error, rolling back: %s", db_err)
            self._engine.rollback()
            raise

        logger.info("%s: %d%% (%s) by %s", app.application_id, percentage, app.status.value, actor)
        return app


class SubmitApplicationUseCase:
    """
    Locks a fully completed application as submitted.
    """

    def __init__(self, engine: AccreditationEngine, clock: Optional[Callable[[], datetime]] = None):
        self._engine = engine
        self._clock = clock or default_clock

    def execute(self, record_id: str, actor: str) -> SARApplication:
        apps = self._engine.applications
        app = apps.get(record_id)

        if app.status is ApplicationStatus.SUBMITTED:
            raise InvalidTransition(app.status, ApplicationStatus.SUBMITTED,
                                    reason=f"application {app.application_id} is already submitted")
        if classify(app.completion_percentage) is not ProgressClass.COMPLETED:
            raise InvalidTransition(app.status, ApplicationStatus.SUBMITTED,
                                    reason=f"application {app.application_id} is "
                                           f"{app.completion_percentage}% complete")

        app.status = ApplicationStatus.SUBMITTED
        app.last_modified_date = self._clock()
        app.last_modified_by = actor

        try:
            apps.put(app)
            self._engine.commit()
        except SQLAlchemyError as db_err:
            logger.exception("Transaction error, rolling back: %s", db_err)
            self._engine.rollback()
            raise

        logger.info("%s submitted by %s", app.application_id, actor)
        return app


class RecordPreQualifierProgressUseCase:
    """
    Operator reports how far the pre-qualifier artifacts are; one commit
    per call, rolled back and re-raised on a storage error.
    """

    def __init__(self, engine: AccreditationEngine):
        self._engine = engine

    def execute(self, institution_id: str, percentage: int) -> Institution:
        try:
            inst = self._engine.aggregator.record_pre_qualifier_progress(institution_id, percentage)
            self._engine.commit()
        except SQLAlchemyError as db_err:
            logger.exception("Transaction error, rolling back: %s", db_err)
            self._engine.rollback()
            raise
        return inst
