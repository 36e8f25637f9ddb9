import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

INSTITUTE_INFO = "institute-info"  # sentinel department id of the institution-wide application


class InstitutionCategory(str, Enum):
    ENGINEERING = "Engineering"
    MBA = "MBA"
    MEDICAL = "Medical"
    ARTS_SCIENCE = "Arts & Science"
    PHARMACY = "Pharmacy"
    ARCHITECTURE = "Architecture"
    MCA = "MCA"
    HOSPITALITY = "Hospitality & Tourism Management"


class TierCategory(str, Enum):
    TIER_I = "Tier I"
    TIER_II = "Tier II"
    TIER_III = "Tier III"


class InstitutionStatus(str, Enum):
    """Lifecycle of an institution, listed in forward order."""
    REGISTERED = "registered"
    PRE_QUALIFIERS_ONGOING = "pre-qualifiers-ongoing"
    PRE_QUALIFIERS_COMPLETED = "pre-qualifiers-completed"
    SAR_ONGOING = "sar-ongoing"
    SAR_COMPLETED = "sar-completed"

    @property
    def is_ongoing(self) -> bool:
        return self.value.endswith("-ongoing")


class ApplicationStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"
    COMPLETED = "completed"


class ProgressClass(str, Enum):
    DRAFT = "Draft"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


@dataclass
class Contact:
    """
    Contact person of an institution: coordinator, NBA coordinator or chairman.
    """
    name: str
    email: str
    contact_number: str
    designation: Optional[str] = None


@dataclass
class Department:
    """
    Catalog department.
    - id: stable slug, e.g. 'cse'
    - code: short code used in application identifiers, e.g. 'CSE'
    """
    id: str
    name: str
    category: InstitutionCategory
    code: str


@dataclass
class StatusChange:
    from_status: InstitutionStatus
    to_status: InstitutionStatus
    at: datetime.datetime
    reason: Optional[str] = None


@dataclass
class Institution:
    """
    Institution under accreditation.
    `completion_percentage` is only set while the status ends in '-ongoing'.
    """
    id: str
    name: str
    institution_code: str  # human-readable, unique
    institution_category: InstitutionCategory
    address: str
    established_year: int
    coordinator: Contact
    registered_date: datetime.datetime  # immutable once set
    last_updated: datetime.datetime
    status: InstitutionStatus = InstitutionStatus.REGISTERED
    completion_percentage: Optional[int] = None
    pre_qualifiers_completed: bool = False
    aishe_code: Optional[str] = None
    tier_category: Optional[TierCategory] = None
    email: Optional[str] = None
    nba_coordinator: Optional[Contact] = None
    chairman: Optional[Contact] = None
    history: List[StatusChange] = field(default_factory=list)


@dataclass
class SARApplication:
    """
    Self-Assessment-Report application: one institute-info application
    per institution plus one per catalog department.
    """
    id: str  # internal key
    application_id: str  # '{institutionCode}-{suffix}-{YYYYMMDD}'
    institution_id: str  # FK → Institution.id
    department_id: str  # catalog slug or INSTITUTE_INFO
    department_name: str
    application_start_date: datetime.datetime
    last_modified_date: datetime.datetime
    last_modified_by: str
    status: ApplicationStatus = ApplicationStatus.DRAFT
    completion_percentage: int = 0

    @property
    def is_institute_info(self) -> bool:
        return self.department_id == INSTITUTE_INFO


@dataclass(frozen=True)
class PhaseWindow:
    start_date: datetime.datetime
    end_date: datetime.datetime


@dataclass
class DashboardStats:
    """
    Institution counts by status. Derived on demand, never persisted.
    """
    total_registered: int = 0
    pre_qualifiers_ongoing: int = 0
    pre_qualifiers_completed: int = 0
    sar_ongoing: int = 0
    sar_completed: int = 0


@dataclass
class ApplicationSummary:
    """
    Per-institution roll-up of SAR applications.
    """
    total_applications: int
    completed: int
    in_progress: int
    not_started: int
    overall_progress: int
