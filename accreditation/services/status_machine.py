"""
Institution status state machine.

    registered → pre-qualifiers-ongoing → pre-qualifiers-completed → sar-ongoing → sar-completed

Only the immediate successor of the current status is accepted; there is no
way back. The machine is the single authority over `Institution.status` and
over the `completion_percentage` / `pre_qualifiers_completed` fields that
go with it.

Every transition is an explicit operator action except
pre-qualifiers-completed → sar-ongoing, which the application registry
fires when the first SAR application of the institution is created.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Optional

from accreditation.config.logger import logger
from accreditation.domain.exceptions import InvalidTransition
from accreditation.domain.models import Institution, InstitutionStatus, ProgressClass, StatusChange
from accreditation.domain.phase_window import is_window_closed, window_for
from accreditation.infrastructure.db.repositories.application_repository import ApplicationRepository
from accreditation.infrastructure.db.repositories.institution_repository import InstitutionRepository
from accreditation.services.progress import ProgressAggregator, classify, default_clock

TRANSITIONS: Dict[InstitutionStatus, InstitutionStatus] = {
    InstitutionStatus.REGISTERED: InstitutionStatus.PRE_QUALIFIERS_ONGOING,
    InstitutionStatus.PRE_QUALIFIERS_ONGOING: InstitutionStatus.PRE_QUALIFIERS_COMPLETED,
    InstitutionStatus.PRE_QUALIFIERS_COMPLETED: InstitutionStatus.SAR_ONGOING,
    InstitutionStatus.SAR_ONGOING: InstitutionStatus.SAR_COMPLETED,
}


def next_status(status) -> Optional[InstitutionStatus]:
    """Immediate successor, or None for the terminal state."""
    return TRANSITIONS.get(InstitutionStatus(status))


def is_valid_transition(current, target) -> bool:
    return next_status(current) is InstitutionStatus(target)


class StatusStateMachine:
    def __init__(
            self,
            institutions: InstitutionRepository,
            applications: ApplicationRepository,
            aggregator: ProgressAggregator,
            clock: Optional[Callable[[], datetime]] = None,
    ):
        self._institutions = institutions
        self._applications = applications
        self._aggregator = aggregator
        self._clock = clock or default_clock

    # ——— named transitions ——————————————————————————————————————————

    def start_pre_qualifiers(self, institution_id: str) -> Institution:
        return self.transition(institution_id, InstitutionStatus.PRE_QUALIFIERS_ONGOING)

    def complete_pre_qualifiers(self, institution_id: str) -> Institution:
        return self.transition(institution_id, InstitutionStatus.PRE_QUALIFIERS_COMPLETED)

    def begin_sar(self, institution_id: str, reason: Optional[str] = None) -> Institution:
        return self.transition(institution_id, InstitutionStatus.SAR_ONGOING, reason=reason)

    def complete_sar(self, institution_id: str) -> Institution:
        return self.transition(institution_id, InstitutionStatus.SAR_COMPLETED)

    # ——— core ——————————————————————————————————————————————————————

    def transition(self, institution_id: str, target, reason: Optional[str] = None) -> Institution:
        """
        Apply `target` if it is the legal next step and its guard holds.
        Raises InvalidTransition otherwise; the stored record is not touched.
        """
        inst = self._institutions.get(institution_id)
        current = InstitutionStatus(inst.status)
        try:
            target = InstitutionStatus(target)
        except ValueError:
            raise InvalidTransition(current, target, reason="unknown status",
                                    institution_id=institution_id) from None

        expected = next_status(current)
        if expected is None:
            raise InvalidTransition(current, target, reason=f"'{current.value}' is terminal",
                                    institution_id=institution_id)
        if target is not expected:
            raise InvalidTransition(current, target,
                                    reason=f"next allowed status is '{expected.value}'",
                                    institution_id=institution_id)

        self._check_guard(inst, target)

        now = self._clock()
        window = window_for(inst)
        # only closing an ongoing phase can be late; opening the next one cannot
        if current.is_ongoing and is_window_closed(window, now):
            logger.warning("%s: '%s' → '%s' after the phase window closed on %s",
                           inst.institution_code, current.value, target.value,
                           window.end_date.strftime("%Y-%m-%d"))

        self._apply_effects(inst, target)
        inst.status = target
        inst.last_updated = now
        inst.history.append(StatusChange(from_status=current, to_status=target, at=now, reason=reason))
        self._institutions.put(inst)

        logger.info("Institution %s: %s → %s", inst.institution_code, current.value, target.value)
        return inst

    def _check_guard(self, inst: Institution, target: InstitutionStatus) -> None:
        if target is InstitutionStatus.PRE_QUALIFIERS_COMPLETED:
            pct = inst.completion_percentage or 0
            if classify(pct) is not ProgressClass.COMPLETED:
                raise InvalidTransition(inst.status, target,
                                        reason=f"pre-qualifiers are {pct}% complete",
                                        institution_id=inst.id)

        elif target is InstitutionStatus.SAR_ONGOING:
            if not self._applications.list_by_institution(inst.id):
                raise InvalidTransition(inst.status, target,
                                        reason="no SAR application has been created yet",
                                        institution_id=inst.id)

        elif target is InstitutionStatus.SAR_COMPLETED:
            # checked per application: the rounded mean already reads 100 at 99.5
            apps = self._applications.list_by_institution(inst.id)
            unfinished = [a for a in apps if classify(a.completion_percentage) is not ProgressClass.COMPLETED]
            if not apps or unfinished:
                pct = self._aggregator.institution_progress(inst.id)
                raise InvalidTransition(
                    inst.status, target,
                    reason=f"SAR applications are {pct}% complete, "
                           f"{len(unfinished)} of {len(apps)} unfinished",
                    institution_id=inst.id,
                )

    @staticmethod
    def _apply_effects(inst: Institution, target: InstitutionStatus) -> None:
        if target is InstitutionStatus.PRE_QUALIFIERS_COMPLETED:
            inst.pre_qualifiers_completed = True
        # completion only means something while a phase is ongoing
        inst.completion_percentage = 0 if target.is_ongoing else None
