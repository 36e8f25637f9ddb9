# accreditation/domain/catalog.py
"""
Static department catalog: which departments may get a SAR application,
per institution category. The order of each list is the display order.
"""
from typing import Dict, Optional, Tuple

from accreditation.domain.models import Department, InstitutionCategory

# (slug, display name, short code for application ids)
_CATALOG: Dict[InstitutionCategory, Tuple[Tuple[str, str, str], ...]] = {
    InstitutionCategory.ENGINEERING: (
        ("cse", "Computer Science Engineering", "CSE"),
        ("ece", "Electronics and Communication Engineering", "ECE"),
        ("mech", "Mechanical Engineering", "ME"),
        ("civil", "Civil Engineering", "CE"),
        ("eee", "Electrical Engineering", "EEE"),
        ("it", "Information Technology", "IT"),
        ("chem", "Chemical Engineering", "CHE"),
        ("biotech", "Biotechnology", "BT"),
    ),
    InstitutionCategory.MBA: (
        ("mba-general", "Master of Business Administration", "MBA"),
        ("pgdm", "Post Graduate Diploma in Management", "PGDM"),
        ("bba", "Bachelor of Business Administration", "BBA"),
    ),
    InstitutionCategory.MEDICAL: (
        ("mbbs", "Bachelor of Medicine and Bachelor of Surgery", "MBBS"),
        ("nursing", "Nursing", "NUR"),
        ("physiotherapy", "Physiotherapy", "PT"),
    ),
    InstitutionCategory.ARTS_SCIENCE: (
        ("physics", "Physics", "PHY"),
        ("chemistry", "Chemistry", "CHM"),
        ("mathematics", "Mathematics", "MAT"),
        ("english", "English", "ENG"),
        ("commerce", "Commerce", "COM"),
    ),
    InstitutionCategory.PHARMACY: (
        ("bpharm", "Bachelor of Pharmacy", "BPH"),
        ("mpharm", "Master of Pharmacy", "MPH"),
        ("pharmd", "Doctor of Pharmacy", "PHD"),
    ),
    InstitutionCategory.ARCHITECTURE: (
        ("barch", "Bachelor of Architecture", "BAR"),
        ("march", "Master of Architecture", "MAR"),
    ),
    InstitutionCategory.MCA: (
        ("mca", "Master of Computer Applications", "MCA"),
    ),
    InstitutionCategory.HOSPITALITY: (
        ("hotel-management", "Hotel Management and Catering Technology", "HMCT"),
        ("tourism", "Tourism and Travel Management", "TTM"),
    ),
}


def _coerce_category(category) -> Optional[InstitutionCategory]:
    if isinstance(category, InstitutionCategory):
        return category
    try:
        return InstitutionCategory(category)
    except ValueError:
        return None


def departments_for(category) -> Tuple[Department, ...]:
    """
    Departments eligible for SAR applications for `category`
    (an InstitutionCategory or its string value).
    An unrecognized category yields an empty tuple: nothing configured yet.
    """
    cat = _coerce_category(category)
    if cat is None:
        return ()
    return tuple(
        Department(id=slug, name=name, category=cat, code=code)
        for slug, name, code in _CATALOG.get(cat, ())
    )


def find_department(category, department_id: str) -> Optional[Department]:
    for dept in departments_for(category):
        if dept.id == department_id:
            return dept
    return None
