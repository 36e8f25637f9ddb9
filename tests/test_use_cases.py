import logging

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from accreditation.application.use_cases.advance_status import AdvanceInstitutionStatusUseCase
from accreditation.application.use_cases.create_sar_applications import CreateSarApplicationsUseCase
from accreditation.application.use_cases.onboard_institution import OnboardInstitutionUseCase
from accreditation.application.use_cases.record_progress import (
    RecordApplicationProgressUseCase, RecordPreQualifierProgressUseCase, SubmitApplicationUseCase,
)
from accreditation.domain.exceptions import InvalidInstitution, InvalidPercentage, InvalidTransition, NotFound
from accreditation.domain.models import ApplicationStatus, InstitutionStatus

ACTOR = "editor@rgukt.in"


@pytest.fixture
def app(acc, institution):
    return acc.registry.create_institute_info_application(institution.id, "admin@nba.org")


@pytest.fixture
def recorder(acc, clock):
    return RecordApplicationProgressUseCase(acc, clock=clock)


def test_record_progress_updates_status_and_audit_fields(acc, app, recorder, clock):
    clock.advance(hours=3)
    saved = recorder.execute(app.id, 40, ACTOR)
    assert saved.status is ApplicationStatus.IN_PROGRESS
    assert saved.last_modified_by == ACTOR
    assert saved.last_modified_date == clock.now
    assert saved.application_start_date == app.application_start_date

    stored = acc.applications.get(app.id)
    assert stored.completion_percentage == 40

    assert recorder.execute(app.id, 100, ACTOR).status is ApplicationStatus.COMPLETED
    assert recorder.execute(app.id, 0, ACTOR).status is ApplicationStatus.DRAFT


def test_decrease_is_accepted_but_flagged(app, recorder, caplog):
    recorder.execute(app.id, 70, ACTOR)
    caplog.set_level(logging.WARNING, logger="accreditation")
    saved = recorder.execute(app.id, 60, ACTOR)
    assert saved.completion_percentage == 60
    assert "decreased" in caplog.text


@pytest.mark.parametrize("bad", [-5, 150, 33.3])
def test_out_of_range_percentage(acc, app, recorder, bad):
    with pytest.raises(InvalidPercentage):
        recorder.execute(app.id, bad, ACTOR)
    assert acc.applications.get(app.id).completion_percentage == 0


def test_unknown_application(recorder):
    with pytest.raises(NotFound):
        recorder.execute("nope", 10, ACTOR)


def test_submit_requires_completion_and_locks(acc, app, recorder, clock):
    submitter = SubmitApplicationUseCase(acc, clock=clock)
    with pytest.raises(InvalidTransition, match="0% complete"):
        submitter.execute(app.id, ACTOR)

    recorder.execute(app.id, 100, ACTOR)
    assert submitter.execute(app.id, ACTOR).status is ApplicationStatus.SUBMITTED

    with pytest.raises(InvalidTransition, match="already submitted"):
        recorder.execute(app.id, 90, ACTOR)
    with pytest.raises(InvalidTransition, match="already submitted"):
        submitter.execute(app.id, ACTOR)
    assert acc.applications.get(app.id).completion_percentage == 100


def test_onboard_use_case_commits(acc, payload, session):
    inst = OnboardInstitutionUseCase(acc).execute(payload(institutionCode="IIITN"))
    session.rollback()
    assert acc.institutions.get(inst.id).institution_code == "IIITN"


def test_onboard_use_case_surfaces_validation(acc, payload):
    with pytest.raises(InvalidInstitution):
        OnboardInstitutionUseCase(acc).execute(payload(name=""))


def test_ensure_institute_info_is_idempotent(acc, institution):
    use_case = CreateSarApplicationsUseCase(acc)
    first = use_case.ensure_institute_info(institution.id, ACTOR)
    second = use_case.ensure_institute_info(institution.id, ACTOR)
    assert first == second
    assert len(acc.applications.list_by_institution(institution.id)) == 1


def test_create_departments_commits_partial_batch(acc, institution, session):
    use_case = CreateSarApplicationsUseCase(acc)
    batch = use_case.create_departments(institution.id, ["cse", "mbbs"], ACTOR)
    session.rollback()
    assert [a.department_id for a in acc.applications.list_by_institution(institution.id)] == ["cse"]
    assert len(batch.rejected) == 1


def test_advance_status_walks_the_lifecycle(acc, institution):
    advance = AdvanceInstitutionStatusUseCase(acc)
    assert advance.execute(institution.id).status is InstitutionStatus.PRE_QUALIFIERS_ONGOING

    with pytest.raises(InvalidTransition) as exc_info:
        advance.execute(institution.id)
    assert exc_info.value.current is InstitutionStatus.PRE_QUALIFIERS_ONGOING

    acc.aggregator.record_pre_qualifier_progress(institution.id, 100)
    assert advance.execute(institution.id).status is InstitutionStatus.PRE_QUALIFIERS_COMPLETED


def test_advance_status_at_the_end(acc, institution, advance_to):
    advance_to(institution.id, InstitutionStatus.SAR_COMPLETED)
    with pytest.raises(InvalidTransition, match="final status"):
        AdvanceInstitutionStatusUseCase(acc).execute(institution.id)


def test_create_departments_rolls_back_when_a_put_fails(acc, institution, monkeypatch):
    rolled_back = []

    def failing_flush(*args, **kwargs):
        raise OperationalError("INSERT INTO sar_applications", {}, Exception("disk I/O error"))

    monkeypatch.setattr(acc.session, "flush", failing_flush)
    monkeypatch.setattr(acc, "rollback", lambda: rolled_back.append(True))

    with pytest.raises(SQLAlchemyError):
        CreateSarApplicationsUseCase(acc).create_departments(institution.id, ["cse"], ACTOR)
    assert rolled_back == [True]


def test_record_pre_qualifier_progress_commits(acc, institution, advance_to, session):
    advance_to(institution.id, InstitutionStatus.PRE_QUALIFIERS_ONGOING)
    inst = RecordPreQualifierProgressUseCase(acc).execute(institution.id, 60)
    assert inst.completion_percentage == 60

    session.rollback()
    assert acc.institutions.get(institution.id).completion_percentage == 60
