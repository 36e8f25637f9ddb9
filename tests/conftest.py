"""
Shared fixtures: one in-memory SQLite database per test, a controllable
clock and a Faker-backed institution factory.
"""
from datetime import datetime, timedelta

import pytest
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from accreditation.application.engine import AccreditationEngine
from accreditation.application.use_cases.record_progress import RecordApplicationProgressUseCase
from accreditation.domain.models import InstitutionCategory, InstitutionStatus
from accreditation.infrastructure.db.models import Base

fake = Faker("en_IN")


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 10, 9, 30))


@pytest.fixture
def session():
    db = create_engine("sqlite://", future=True)
    Base.metadata.create_all(db)
    Session = sessionmaker(bind=db, future=True)
    s = Session()
    try:
        yield s
    finally:
        s.close()
        db.dispose()


@pytest.fixture
def acc(session, clock) -> AccreditationEngine:
    return AccreditationEngine.from_session(session, clock=clock)


def onboarding_payload(**overrides) -> dict:
    payload = {
        "name": fake.company() + " Institute of Technology",
        "institutionCode": fake.unique.bothify("??##").upper(),
        "aisheCode": fake.bothify("C-#####"),
        "institutionCategory": InstitutionCategory.ENGINEERING.value,
        "tierCategory": "Tier I",
        "email": fake.email(),
        "address": fake.address(),
        "establishedYear": "2008",
        "coordinatorName": fake.name(),
        "coordinatorEmail": fake.email(),
        "coordinatorPhone": fake.phone_number(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_institution(acc):
    def _make(**overrides):
        inst = acc.registry.onboard_institution(onboarding_payload(**overrides))
        acc.commit()
        return inst
    return _make


@pytest.fixture
def institution(make_institution):
    return make_institution(institutionCode="RGUKT")


@pytest.fixture
def advance_to(acc, clock):
    """Drive an institution forward through the legal path up to `status`."""
    recorder = RecordApplicationProgressUseCase(acc, clock=clock)

    def _advance(institution_id: str, status: InstitutionStatus):
        status = InstitutionStatus(status)
        order = list(InstitutionStatus)
        while True:
            current = acc.institutions.get(institution_id).status
            if order.index(current) >= order.index(status):
                return acc.institutions.get(institution_id)
            if current is InstitutionStatus.REGISTERED:
                acc.state_machine.start_pre_qualifiers(institution_id)
            elif current is InstitutionStatus.PRE_QUALIFIERS_ONGOING:
                acc.aggregator.record_pre_qualifier_progress(institution_id, 100)
                acc.state_machine.complete_pre_qualifiers(institution_id)
            elif current is InstitutionStatus.PRE_QUALIFIERS_COMPLETED:
                acc.registry.create_institute_info_application(institution_id, "admin@nba.org")
            elif current is InstitutionStatus.SAR_ONGOING:
                for app in acc.applications.list_by_institution(institution_id):
                    recorder.execute(app.id, 100, "admin@nba.org")
                acc.state_machine.complete_sar(institution_id)
            acc.commit()

    return _advance


@pytest.fixture
def payload():
    return onboarding_payload
