# repositories/institution_repository.py
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from accreditation.domain.exceptions import NotFound
from accreditation.domain.models import (
    Contact, Institution, InstitutionCategory, InstitutionStatus, StatusChange, TierCategory,
)
from accreditation.infrastructure.db.models import InstitutionModel


class InstitutionRepository:
    def __init__(self, session: Session):
        self._session = session

    # ——— MAPPERS ——————————————————————————————————————————————
    @staticmethod
    def _contact_to_json(contact: Optional[Contact]) -> Optional[dict]:
        if contact is None:
            return None
        return {
            "name": contact.name,
            "email": contact.email,
            "contact_number": contact.contact_number,
            "designation": contact.designation,
        }

    @staticmethod
    def _contact_from_json(raw: Optional[dict]) -> Optional[Contact]:
        if not raw:
            return None
        return Contact(
            name=raw["name"],
            email=raw["email"],
            contact_number=raw["contact_number"],
            designation=raw.get("designation"),
        )

    @staticmethod
    def _history_to_json(history: list[StatusChange]) -> list[dict]:
        return [
            {
                "from": ch.from_status.value,
                "to": ch.to_status.value,
                "at": ch.at.isoformat(),
                "reason": ch.reason,
            }
            for ch in history
        ]

    @staticmethod
    def _history_from_json(raw: Optional[list]) -> list[StatusChange]:
        return [
            StatusChange(
                from_status=InstitutionStatus(r["from"]),
                to_status=InstitutionStatus(r["to"]),
                at=datetime.fromisoformat(r["at"]),
                reason=r.get("reason"),
            )
            for r in (raw or [])
        ]

    @classmethod
    def _to_institution_model(cls, inst: Institution) -> InstitutionModel:
        return InstitutionModel(
            id=inst.id,
            name=inst.name,
            institution_code=inst.institution_code,
            aishe_code=inst.aishe_code,
            institution_category=InstitutionCategory(inst.institution_category).value,
            tier_category=TierCategory(inst.tier_category).value if inst.tier_category else None,
            email=inst.email,
            address=inst.address,
            established_year=inst.established_year,
            coordinator=cls._contact_to_json(inst.coordinator),
            nba_coordinator=cls._contact_to_json(inst.nba_coordinator),
            chairman=cls._contact_to_json(inst.chairman),
            registered_date=inst.registered_date,
            last_updated=inst.last_updated,
            status=InstitutionStatus(inst.status).value,
            completion_percentage=inst.completion_percentage,
            pre_qualifiers_completed=inst.pre_qualifiers_completed,
            history=cls._history_to_json(inst.history),
        )

    @classmethod
    def _to_institution_domain(cls, m: InstitutionModel) -> Institution:
        return Institution(
            id=m.id,
            name=m.name,
            institution_code=m.institution_code,
            institution_category=InstitutionCategory(m.institution_category),
            address=m.address,
            established_year=m.established_year,
            coordinator=cls._contact_from_json(m.coordinator),
            registered_date=m.registered_date,
            last_updated=m.last_updated,
            status=InstitutionStatus(m.status),
            completion_percentage=m.completion_percentage,
            pre_qualifiers_completed=m.pre_qualifiers_completed,
            aishe_code=m.aishe_code,
            tier_category=TierCategory(m.tier_category) if m.tier_category else None,
            email=m.email,
            nba_coordinator=cls._contact_from_json(m.nba_coordinator),
            chairman=cls._contact_from_json(m.chairman),
            history=cls._history_from_json(m.history),
        )

    # ——— STORE METHODS ——————————————————————————————————————————————

    def get(self, institution_id: str) -> Institution:
        m = self._session.get(InstitutionModel, institution_id)
        if m is None:
            raise NotFound("Institution", institution_id)
        return self._to_institution_domain(m)

    def find_by_code(self, institution_code: str) -> Institution | None:
        m = (
            self._session.query(InstitutionModel)
            .filter_by(institution_code=institution_code)
            .one_or_none()
        )
        return self._to_institution_domain(m) if m else None

    def list_all(self) -> list[Institution]:
        models = (
            self._session.query(InstitutionModel)
            .order_by(InstitutionModel.registered_date.asc(), InstitutionModel.institution_code.asc())
            .all()
        )
        return [self._to_institution_domain(m) for m in models]

    def put(self, inst: Institution) -> None:
        """
        Upsert one record. Flushed immediately so subsequent reads see it.
        """
        self._session.merge(self._to_institution_model(inst))
        self._session.flush()

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()
