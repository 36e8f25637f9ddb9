from __future__ import annotations

import math
from datetime import datetime, timedelta

from accreditation.config.config import settings
from accreditation.domain.models import Institution, InstitutionStatus, PhaseWindow

_PRE_QUALIFIER_STATUSES = (
    InstitutionStatus.PRE_QUALIFIERS_ONGOING,
    InstitutionStatus.PRE_QUALIFIERS_COMPLETED,
)
_SAR_STATUSES = (
    InstitutionStatus.SAR_ONGOING,
    InstitutionStatus.SAR_COMPLETED,
)


def add_months(moment: datetime, months: int) -> datetime:
    """
    Calendar-month addition: the month component moves by `months` and a
    day that does not exist in the target month rolls over into the next
    one (Nov 30 + 3 months → Mar 1 in a leap year). Time of day is kept.
    """
    total = moment.month - 1 + months
    year = moment.year + total // 12
    month = total % 12 + 1
    first = moment.replace(year=year, month=month, day=1)
    return first + timedelta(days=moment.day - 1)


def window_for(institution: Institution) -> PhaseWindow:
    """
    Start/end of the phase the institution is currently in.
    Pure: the institution is never modified.
    """
    registered = institution.registered_date
    status = InstitutionStatus(institution.status)

    if status in _PRE_QUALIFIER_STATUSES:
        return PhaseWindow(
            start_date=registered,
            end_date=add_months(registered, settings.pre_qualifier_months),
        )
    if status in _SAR_STATUSES:
        start = add_months(registered, settings.pre_qualifier_months)
        return PhaseWindow(start_date=start, end_date=add_months(start, settings.sar_months))

    return PhaseWindow(start_date=registered, end_date=registered)


def days_remaining(window: PhaseWindow, today: datetime) -> int:
    """Whole days (rounded up) until the window closes; 0 once it has closed."""
    seconds = (window.end_date - today).total_seconds()
    if seconds <= 0:
        return 0
    return math.ceil(seconds / 86400)


def is_window_closed(window: PhaseWindow, moment: datetime) -> bool:
    return moment > window.end_date
