from dataclasses import replace

import pytest

from accreditation.domain.exceptions import NotFound
from accreditation.domain.models import Contact, InstitutionStatus, StatusChange


def test_institution_round_trip_keeps_contacts_and_history(acc, institution, clock):
    inst = replace(
        institution,
        chairman=Contact(name="S. Reddy", email="chair@rgukt.in", contact_number="9111111111",
                         designation="Chairman"),
        history=[StatusChange(InstitutionStatus.REGISTERED, InstitutionStatus.PRE_QUALIFIERS_ONGOING,
                              clock.now, "kick-off")],
        status=InstitutionStatus.PRE_QUALIFIERS_ONGOING,
        completion_percentage=0,
    )
    acc.institutions.put(inst)
    assert acc.institutions.get(inst.id) == inst
    assert acc.institutions.find_by_code("RGUKT") == inst
    assert acc.institutions.find_by_code("NOPE") is None


def test_get_missing_raises_not_found(acc):
    with pytest.raises(NotFound) as exc_info:
        acc.institutions.get("missing")
    assert exc_info.value.record_id == "missing"
    assert isinstance(exc_info.value, LookupError)

    with pytest.raises(NotFound):
        acc.applications.get("missing")
    with pytest.raises(NotFound):
        acc.applications.get_by_application_id("RGUKT-IS-20240110")


def test_list_by_institution_reads_own_writes(acc, institution, make_institution):
    other = make_institution()
    acc.registry.create_applications(institution.id, ["cse"], "x@y.in")
    acc.registry.create_applications(other.id, ["ece"], "x@y.in")

    assert [a.department_id for a in acc.applications.list_by_institution(institution.id)] == ["cse"]
    assert [a.department_id for a in acc.applications.list_by_institution(other.id)] == ["ece"]


def test_listeners_are_notified_after_put(acc, institution):
    seen = []
    acc.applications.subscribe(seen.append)
    app = acc.registry.create_institute_info_application(institution.id, "x@y.in")
    assert seen == [app]

    acc.applications.unsubscribe(seen.append)
    app.completion_percentage = 10
    acc.applications.put(app)
    assert len(seen) == 1
