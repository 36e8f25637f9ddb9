from __future__ import annotations

from typing import Iterable, Optional


class AccreditationError(Exception):
    """Base of every recoverable engine error."""


class InvalidTransition(AccreditationError):
    """
    Requested status change is not the legal next step.
    The record is left untouched; `current` is what the caller should show.
    """

    def __init__(self, current, requested, reason: Optional[str] = None,
                 institution_id: Optional[str] = None):
        self.current = current
        self.requested = requested
        self.reason = reason
        self.institution_id = institution_id
        msg = f"Cannot move from '{_value(current)}' to '{_value(requested)}'"
        if institution_id:
            msg += f" (institution {institution_id})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class AlreadyExists(AccreditationError):
    def __init__(self, institution_id: str, record_id: Optional[str] = None,
                 what: str = "institute-info application"):
        self.institution_id = institution_id
        self.record_id = record_id
        self.what = what
        msg = f"{what} already exists for institution {institution_id}"
        if record_id:
            msg += f" ({record_id})"
        super().__init__(msg)


class DuplicateApplication(AccreditationError):
    def __init__(self, institution_id: str, department_id: str,
                 application_id: Optional[str] = None):
        self.institution_id = institution_id
        self.department_id = department_id
        self.application_id = application_id
        msg = f"Department '{department_id}' of institution {institution_id} already has an application"
        if application_id:
            msg += f" ({application_id})"
        super().__init__(msg)


class UnknownDepartment(AccreditationError):
    def __init__(self, institution_id: str, department_id: str, category):
        self.institution_id = institution_id
        self.department_id = department_id
        self.category = category
        super().__init__(
            f"Department '{department_id}' is not offered for category "
            f"'{_value(category)}' (institution {institution_id})"
        )


class NotFound(AccreditationError, LookupError):
    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class InvalidInstitution(AccreditationError, ValueError):
    """Onboarding payload failed validation."""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("Invalid institution: " + "; ".join(self.errors))


class InvalidPercentage(AccreditationError, ValueError):
    def __init__(self, value, application_id: Optional[str] = None):
        self.value = value
        self.application_id = application_id
        msg = f"Completion percentage must be an integer between 0 and 100, got {value!r}"
        if application_id:
            msg += f" (application {application_id})"
        super().__init__(msg)


def _value(status) -> str:
    return getattr(status, "value", status)
