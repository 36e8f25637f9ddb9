import pytest

from accreditation.domain.catalog import departments_for, find_department
from accreditation.domain.models import InstitutionCategory


@pytest.mark.parametrize("category", list(InstitutionCategory))
def test_every_category_has_departments_with_distinct_ids_and_codes(category):
    depts = departments_for(category)
    assert depts
    assert len({d.id for d in depts}) == len(depts)
    assert len({d.code for d in depts}) == len(depts)
    assert all(d.category is category for d in depts)
    # 'IS' is reserved for the institute-info application
    assert "IS" not in {d.code for d in depts}


def test_engineering_order_is_stable():
    ids = [d.id for d in departments_for(InstitutionCategory.ENGINEERING)]
    assert ids == ["cse", "ece", "mech", "civil", "eee", "it", "chem", "biotech"]
    assert departments_for("Engineering") == departments_for(InstitutionCategory.ENGINEERING)


@pytest.mark.parametrize("category", ["Law", "", None, "engineering"])
def test_unknown_category_yields_empty(category):
    assert departments_for(category) == ()


def test_find_department():
    dept = find_department(InstitutionCategory.ENGINEERING, "cse")
    assert dept.name == "Computer Science Engineering"
    assert dept.code == "CSE"
    assert find_department(InstitutionCategory.MBA, "cse") is None
    assert find_department("Unknown", "cse") is None
