# accreditation/application/use_cases/advance_status.py
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from accreditation.application.engine import AccreditationEngine
from accreditation.config.logger import logger
from accreditation.domain.exceptions import InvalidTransition
from accreditation.domain.models import Institution
from accreditation.services.status_machine import next_status


class AdvanceInstitutionStatusUseCase:
    """
    Operator action: move an institution to its next lifecycle status.
    InvalidTransition is logged with the current status and re-raised for
    the caller to show.
    """

    def __init__(self, engine: AccreditationEngine):
        self._engine = engine

    def execute(self, institution_id: str) -> Institution:
        inst = self._engine.institutions.get(institution_id)
        target = next_status(inst.status)
        if target is None:
            raise InvalidTransition(inst.status, inst.status, reason="already at the final status",
                                    institution_id=institution_id)
        try:
            inst = self._engine.state_machine.transition(institution_id, target)
            self._engine.commit()
        except InvalidTransition as exc:
            logger.warning("Refused for %s (currently '%s'): %s",
                           inst.institution_code, inst.status.value, exc)
            raise
        except SQLAlchemyError as db_err:
            logger.exception("Transaction error, rolling back: %s", db_err)
            self._engine.rollback()
            raise
        return inst
