from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from pydantic import ValidationError

from accreditation.application.schemas import ContactSchema, OnboardingRequest
from accreditation.config.config import settings
from accreditation.config.logger import logger
from accreditation.domain.catalog import departments_for, find_department
from accreditation.domain.exceptions import (
    AccreditationError, AlreadyExists, DuplicateApplication, InvalidInstitution, UnknownDepartment,
)
from accreditation.domain.models import (
    INSTITUTE_INFO, ApplicationStatus, Contact, Department, Institution, InstitutionStatus, SARApplication,
)
from accreditation.infrastructure.db.repositories.application_repository import ApplicationRepository
from accreditation.infrastructure.db.repositories.institution_repository import InstitutionRepository
from accreditation.services.progress import default_clock
from accreditation.services.status_machine import StatusStateMachine

INSTITUTE_INFO_NAME = "Institute Information"


class BatchCreation(Sequence):
    """
    Outcome of `create_applications`: behaves as the sequence of created
    applications; `rejected` holds one error per skipped department id.
    """

    def __init__(self, created: List[SARApplication], rejected: List[AccreditationError]):
        self.created = created
        self.rejected = rejected

    def __getitem__(self, index):
        return self.created[index]

    def __len__(self) -> int:
        return len(self.created)

    def __repr__(self) -> str:
        return f"BatchCreation(created={len(self.created)}, rejected={len(self.rejected)})"


def application_id_for(institution: Institution, suffix: str, created: datetime) -> str:
    """'{institutionCode}-{suffix}-{YYYYMMDD}', e.g. 'RGUKT-IS-20250905'."""
    return f"{institution.institution_code}-{suffix}-{created.strftime('%Y%m%d')}"


class ApplicationRegistry:
    """
    Creates institutions and their SAR applications.

    • one institute-info application per institution
    • at most one application per (institution, catalog department)
    • the first application of a pre-qualifiers-completed institution
      moves it to sar-ongoing (`start_sar_phase_if_needed`)

    Callers serialize writes per institution; duplicate detection here is
    logical, not a lock.
    """

    def __init__(
            self,
            institutions: InstitutionRepository,
            applications: ApplicationRepository,
            state_machine: StatusStateMachine,
            clock: Optional[Callable[[], datetime]] = None,
    ):
        self._institutions = institutions
        self._applications = applications
        self._state_machine = state_machine
        self._clock = clock or default_clock

    # ——— onboarding ——————————————————————————————————————————————————

    def onboard_institution(self, request: OnboardingRequest | dict) -> Institution:
        if not isinstance(request, OnboardingRequest):
            try:
                request = OnboardingRequest.model_validate(request)
            except ValidationError as exc:
                raise InvalidInstitution(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
                ) from exc

        existing = self._institutions.find_by_code(request.institution_code)
        if existing is not None:
            raise AlreadyExists(existing.id, record_id=request.institution_code, what="institution code")

        now = self._clock()
        inst = Institution(
            id=uuid.uuid4().hex,
            name=request.name,
            institution_code=request.institution_code,
            institution_category=request.institution_category,
            address=request.address,
            established_year=request.established_year,
            coordinator=Contact(
                name=request.coordinator_name,
                email=request.coordinator_email,
                contact_number=request.coordinator_phone,
            ),
            registered_date=now,
            last_updated=now,
            status=InstitutionStatus.REGISTERED,
            aishe_code=request.aishe_code,
            tier_category=request.tier_category,
            email=request.email,
            nba_coordinator=self._to_contact(request.nba_coordinator),
            chairman=self._to_contact(request.chairman),
        )
        self._institutions.put(inst)
        logger.info("Onboarded institution %s (%s, %s)",
                    inst.institution_code, inst.name, inst.institution_category.value)
        return inst

    @staticmethod
    def _to_contact(schema: Optional[ContactSchema]) -> Optional[Contact]:
        if schema is None:
            return None
        return Contact(
            name=schema.name,
            email=schema.email,
            contact_number=schema.contact_number,
            designation=schema.designation,
        )

    # ——— SAR applications ——————————————————————————————————————————————

    def create_institute_info_application(self, institution_id: str, actor: str) -> SARApplication:
        inst = self._institutions.get(institution_id)
        apps = self._applications.list_by_institution(institution_id)

        for app in apps:
            if app.is_institute_info:
                raise AlreadyExists(institution_id, record_id=app.application_id)

        app = self._new_application(inst, INSTITUTE_INFO, INSTITUTE_INFO_NAME,
                                    settings.institute_info_suffix, actor)
        self._applications.put(app)
        logger.info("Created %s for %s", app.application_id, inst.institution_code)

        self.start_sar_phase_if_needed(inst)
        return app

    def create_applications(
            self, institution_id: str, department_ids: Iterable[str], actor: str
    ) -> BatchCreation:
        """
        One application per requested department. Duplicates and departments
        outside the institution's catalog are skipped and reported in
        `.rejected`; the rest of the batch still goes through.
        """
        if isinstance(department_ids, str):
            raise TypeError(f"department_ids must be a collection of ids, not the string {department_ids!r}")
        inst = self._institutions.get(institution_id)
        existing = {a.department_id: a for a in self._applications.list_by_institution(institution_id)}

        created: List[SARApplication] = []
        rejected: List[AccreditationError] = []

        for dept_id in department_ids:
            if dept_id in existing:
                err = DuplicateApplication(institution_id, dept_id, existing[dept_id].application_id)
                logger.warning("✕ %s", err)
                rejected.append(err)
                continue

            dept: Optional[Department] = find_department(inst.institution_category, dept_id)
            if dept is None:
                err = UnknownDepartment(institution_id, dept_id, inst.institution_category)
                logger.warning("✕ %s", err)
                rejected.append(err)
                continue

            app = self._new_application(inst, dept.id, dept.name, dept.code, actor)
            self._applications.put(app)
            existing[dept.id] = app
            created.append(app)
            logger.info("Created %s for %s", app.application_id, inst.institution_code)

        logger.info("Batch for %s: created=%d, skipped=%d",
                    inst.institution_code, len(created), len(rejected))

        if created:
            self.start_sar_phase_if_needed(inst)
        return BatchCreation(created, rejected)

    def list_available_departments(self, institution_id: str) -> List[Department]:
        inst = self._institutions.get(institution_id)
        taken = {a.department_id for a in self._applications.list_by_institution(institution_id)}
        return [d for d in departments_for(inst.institution_category) if d.id not in taken]

    def start_sar_phase_if_needed(self, inst: Institution) -> bool:
        """
        Automatic pre-qualifiers-completed → sar-ongoing trigger, fired by the
        first SAR application created while the institution is still
        pre-qualifiers-completed. Returns True if it fired.
        """
        current = self._institutions.get(inst.id)
        if current.status is not InstitutionStatus.PRE_QUALIFIERS_COMPLETED:
            return False
        self._state_machine.begin_sar(inst.id, reason="first SAR application created")
        return True

    def _new_application(
            self, inst: Institution, department_id: str, department_name: str, suffix: str, actor: str
    ) -> SARApplication:
        now = self._clock()
        return SARApplication(
            id=uuid.uuid4().hex,
            application_id=application_id_for(inst, suffix, now),
            institution_id=inst.id,
            department_id=department_id,
            department_name=department_name,
            application_start_date=now,
            last_modified_date=now,
            last_modified_by=actor,
            status=ApplicationStatus.DRAFT,
            completion_percentage=0,
        )
