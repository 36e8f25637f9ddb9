# accreditation/application/use_cases/create_sar_applications.py
from __future__ import annotations

from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from accreditation.application.engine import AccreditationEngine
from accreditation.config.logger import logger
from accreditation.domain.exceptions import AlreadyExists
from accreditation.domain.models import SARApplication
from accreditation.services.application_registry import BatchCreation


class CreateSarApplicationsUseCase:
    """
    Creates the SAR applications an institute asks for and commits once.

    • `ensure_institute_info` is idempotent: an existing institute-info
      application is returned instead of raising AlreadyExists
    • `create_departments` commits whatever part of the batch succeeded

    A storage error anywhere in the call (the registry flushes on every
    put) rolls the session back and is re-raised.
    """

    def __init__(self, engine: AccreditationEngine):
        self._engine = engine

    def ensure_institute_info(self, institution_id: str, actor: str) -> SARApplication:
        try:
            app = self._engine.registry.create_institute_info_application(institution_id, actor)
            self._engine.commit()
        except AlreadyExists as exc:
            logger.debug("Reusing %s", exc.record_id)
            return self._engine.applications.get_by_application_id(exc.record_id)
        except SQLAlchemyError as db_err:
            logger.exception("Transaction error, rolling back: %s", db_err)
            self._engine.rollback()
            raise
        return app

    def create_departments(self, institution_id: str, department_ids: Iterable[str], actor: str) -> BatchCreation:
        try:
            batch = self._engine.registry.create_applications(institution_id, department_ids, actor)
            if batch:
                self._engine.commit()
        except SQLAlchemyError as db_err:
            logger.exception("Transaction error, rolling back: %s", db_err)
            self._engine.rollback()
            raise
        return batch
