# accreditation/infrastructure/db/queries/overview.py
from datetime import datetime
from typing import List, Optional

import pandas as pd
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from accreditation.domain.models import Institution, InstitutionCategory, InstitutionStatus
from accreditation.domain.phase_window import days_remaining, window_for
from accreditation.infrastructure.db.models import InstitutionModel
from accreditation.infrastructure.db.repositories.institution_repository import InstitutionRepository
from accreditation.services.progress import default_clock

_OVERVIEW_COLUMNS = [
    "institution_code", "name", "category", "status", "completion_percentage",
    "window_start", "window_end", "days_remaining",
]


def search_institutions(
        session: Session,
        term: Optional[str] = None,
        category: Optional[InstitutionCategory] = None,
) -> List[Institution]:
    """
    Case-insensitive search on name, institution code or AISHE code,
    optionally restricted to one category.
    """
    q = session.query(InstitutionModel)
    if term:
        pattern = f"%{term.strip().lower()}%"
        q = q.filter(
            or_(
                func.lower(InstitutionModel.name).like(pattern),
                func.lower(InstitutionModel.institution_code).like(pattern),
                func.lower(func.coalesce(InstitutionModel.aishe_code, "")).like(pattern),
            )
        )
    if category:
        q = q.filter(InstitutionModel.institution_category == InstitutionCategory(category).value)
    rows = q.order_by(InstitutionModel.institution_code.asc()).all()
    return [InstitutionRepository._to_institution_domain(m) for m in rows]


def institutions_by_status(session: Session, status: InstitutionStatus) -> List[Institution]:
    """
    Institutions currently in `status`.
    """
    rows = (
        session.query(InstitutionModel)
        .filter(InstitutionModel.status == InstitutionStatus(status).value)
        .order_by(InstitutionModel.registered_date.asc())
        .all()
    )
    return [InstitutionRepository._to_institution_domain(m) for m in rows]


def institution_overview_df(session: Session, today: Optional[datetime] = None) -> "pd.DataFrame":
    """
    One row per institution:
        institution_code | name | category | status | completion_percentage
        | window_start | window_end | days_remaining
    """
    today = today or default_clock()
    rows = []
    for inst in InstitutionRepository(session).list_all():
        window = window_for(inst)
        rows.append({
            "institution_code": inst.institution_code,
            "name": inst.name,
            "category": inst.institution_category.value,
            "status": inst.status.value,
            "completion_percentage": inst.completion_percentage,
            "window_start": window.start_date,
            "window_end": window.end_date,
            "days_remaining": days_remaining(window, today),
        })
    return pd.DataFrame(rows, columns=_OVERVIEW_COLUMNS)
