# accreditation/application/use_cases/onboard_institution.py
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from accreditation.application.engine import AccreditationEngine
from accreditation.application.schemas import OnboardingRequest
from accreditation.config.logger import logger
from accreditation.domain.models import Institution


class OnboardInstitutionUseCase:
    """
    Registers a new institution (status 'registered') and commits it.
    Validation errors surface as InvalidInstitution, a taken institution
    code as AlreadyExists.
    """

    def __init__(self, engine: AccreditationEngine):
        self._engine = engine

    def execute(self, request: OnboardingRequest | dict) -> Institution:
        try:
            inst = self._engine.registry.onboard_institution(request)
            self._engine.commit()
        except SQLAlchemyError as db_err:
            logger.exception("Transaction error, rolling back: %s", db_err)
            self._engine.rollback()
            raise
        return inst
