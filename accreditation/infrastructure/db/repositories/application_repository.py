# repositories/application_repository.py
from typing import Callable, List

from sqlalchemy.orm import Session

from accreditation.domain.exceptions import NotFound
from accreditation.domain.models import ApplicationStatus, SARApplication
from accreditation.infrastructure.db.models import SARApplicationModel

ApplicationListener = Callable[[SARApplication], None]


class ApplicationRepository:
    """
    Record store for SAR applications.
    Listeners registered with `subscribe` are called after every `put`.
    """

    def __init__(self, session: Session):
        self._session = session
        self._listeners: List[ApplicationListener] = []

    # ——— MAPPERS ——————————————————————————————————————————————
    @staticmethod
    def _to_application_model(app: SARApplication) -> SARApplicationModel:
        return SARApplicationModel(
            id=app.id,
            application_id=app.application_id,
            institution_id=app.institution_id,
            department_id=app.department_id,
            department_name=app.department_name,
            status=ApplicationStatus(app.status).value,
            completion_percentage=app.completion_percentage,
            application_start_date=app.application_start_date,
            last_modified_date=app.last_modified_date,
            last_modified_by=app.last_modified_by,
        )

    @staticmethod
    def _to_application_domain(m: SARApplicationModel) -> SARApplication:
        return SARApplication(
            id=m.id,
            application_id=m.application_id,
            institution_id=m.institution_id,
            department_id=m.department_id,
            department_name=m.department_name,
            application_start_date=m.application_start_date,
            last_modified_date=m.last_modified_date,
            last_modified_by=m.last_modified_by,
            status=ApplicationStatus(m.status),
            completion_percentage=m.completion_percentage,
        )

    # ——— OBSERVERS ——————————————————————————————————————————————
    def subscribe(self, listener: ApplicationListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ApplicationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ——— STORE METHODS ——————————————————————————————————————————————

    def get(self, record_id: str) -> SARApplication:
        m = self._session.get(SARApplicationModel, record_id)
        if m is None:
            raise NotFound("SARApplication", record_id)
        return self._to_application_domain(m)

    def get_by_application_id(self, application_id: str) -> SARApplication:
        m = (
            self._session.query(SARApplicationModel)
            .filter_by(application_id=application_id)
            .one_or_none()
        )
        if m is None:
            raise NotFound("SARApplication", application_id)
        return self._to_application_domain(m)

    def list_by_institution(self, institution_id: str) -> list[SARApplication]:
        models = (
            self._session.query(SARApplicationModel)
            .filter_by(institution_id=institution_id)
            .order_by(
                SARApplicationModel.application_start_date.asc(),
                SARApplicationModel.application_id.asc(),
            )
            .all()
        )
        return [self._to_application_domain(m) for m in models]

    def put(self, app: SARApplication) -> None:
        self._session.merge(self._to_application_model(app))
        self._session.flush()
        for listener in list(self._listeners):
            listener(app)

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()
