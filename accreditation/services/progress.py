from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, List, Optional

from accreditation.config.config import settings
from accreditation.config.logger import logger
from accreditation.domain.exceptions import InvalidPercentage, InvalidTransition
from accreditation.domain.models import (
    ApplicationSummary, DashboardStats, Institution, InstitutionStatus, ProgressClass, SARApplication,
)
from accreditation.infrastructure.db.repositories.application_repository import ApplicationRepository
from accreditation.infrastructure.db.repositories.institution_repository import InstitutionRepository

_STATUS_COUNTERS = {
    InstitutionStatus.PRE_QUALIFIERS_ONGOING: "pre_qualifiers_ongoing",
    InstitutionStatus.PRE_QUALIFIERS_COMPLETED: "pre_qualifiers_completed",
    InstitutionStatus.SAR_ONGOING: "sar_ongoing",
    InstitutionStatus.SAR_COMPLETED: "sar_completed",
}


def default_clock() -> datetime:
    return datetime.now(settings.timezone).replace(tzinfo=None)


def validate_percentage(value, application_id: Optional[str] = None) -> int:
    # bool is an int subclass but never a meaningful percentage
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        raise InvalidPercentage(value, application_id)
    return value


def classify(percentage: int) -> ProgressClass:
    if percentage == 0:
        return ProgressClass.DRAFT
    if percentage == 100:
        return ProgressClass.COMPLETED
    return ProgressClass.IN_PROGRESS


def mean_progress(percentages: Iterable[int]) -> int:
    """
    Rounded arithmetic mean; 0 for an empty collection.
    Halves round up, so 62.5 → 63.
    """
    values = list(percentages)
    if not values:
        return 0
    return int(sum(values) / len(values) + 0.5)


def dashboard_stats(institutions: Iterable[Institution]) -> DashboardStats:
    """
    Single pass over the collection. `total_registered` counts everyone,
    regardless of status.
    """
    stats = DashboardStats()
    for inst in institutions:
        stats.total_registered += 1
        counter = _STATUS_COUNTERS.get(InstitutionStatus(inst.status))
        if counter:
            setattr(stats, counter, getattr(stats, counter) + 1)
    return stats


def filter_by_status(institutions: Iterable[Institution], status) -> List[Institution]:
    """
    Drill-down behind a dashboard counter. 'registered' is the
    total-registered card, so it returns every institution.
    """
    status = InstitutionStatus(status)
    if status is InstitutionStatus.REGISTERED:
        return list(institutions)
    return [i for i in institutions if InstitutionStatus(i.status) is status]


class ProgressAggregator:
    """
    Rolls application completion up to institution and dashboard level.
    Reads go straight to the application store; the only writes are the
    institution's `completion_percentage` while a phase is ongoing.
    """

    classify = staticmethod(classify)
    dashboard_stats = staticmethod(dashboard_stats)
    filter_by_status = staticmethod(filter_by_status)

    def __init__(
            self,
            institutions: InstitutionRepository,
            applications: ApplicationRepository,
            clock: Optional[Callable[[], datetime]] = None,
    ):
        self._institutions = institutions
        self._applications = applications
        self._clock = clock or default_clock

    def institution_progress(self, institution_id: str) -> int:
        apps = self._applications.list_by_institution(institution_id)
        return mean_progress(a.completion_percentage for a in apps)

    def application_summary(self, institution_id: str) -> ApplicationSummary:
        progresses = [a.completion_percentage for a in self._applications.list_by_institution(institution_id)]
        classes = [classify(p) for p in progresses]
        return ApplicationSummary(
            total_applications=len(progresses),
            completed=classes.count(ProgressClass.COMPLETED),
            in_progress=classes.count(ProgressClass.IN_PROGRESS),
            not_started=classes.count(ProgressClass.DRAFT),
            overall_progress=mean_progress(progresses),
        )

    def record_pre_qualifier_progress(self, institution_id: str, percentage: int) -> Institution:
        """
        Completion of the pre-qualifier artifacts, as reported by the operator.
        Only accepted while pre-qualifiers are ongoing. Flushes but does not
        commit; RecordPreQualifierProgressUseCase owns the transaction.
        """
        inst = self._institutions.get(institution_id)
        if inst.status is not InstitutionStatus.PRE_QUALIFIERS_ONGOING:
            raise InvalidTransition(
                inst.status, InstitutionStatus.PRE_QUALIFIERS_ONGOING,
                reason="pre-qualifier progress can only be recorded while pre-qualifiers are ongoing",
                institution_id=institution_id,
            )
        percentage = validate_percentage(percentage)
        if inst.completion_percentage is not None and percentage < inst.completion_percentage:
            logger.warning("Pre-qualifier progress of %s decreased: %d%% → %d%%",
                           inst.institution_code, inst.completion_percentage, percentage)
        inst.completion_percentage = percentage
        inst.last_updated = self._clock()
        self._institutions.put(inst)
        logger.info("Pre-qualifier progress of %s: %d%%", inst.institution_code, percentage)
        return inst

    def refresh_institution(self, app: SARApplication) -> None:
        """
        Application-store listener: keeps the owning institution's
        completion in step with its applications during the SAR phase.
        """
        inst = self._institutions.get(app.institution_id)
        if inst.status is not InstitutionStatus.SAR_ONGOING:
            return
        progress = self.institution_progress(inst.id)
        if progress == inst.completion_percentage:
            return
        inst.completion_percentage = progress
        inst.last_updated = self._clock()
        self._institutions.put(inst)
        logger.debug("SAR progress of %s refreshed to %d%%", inst.institution_code, progress)
