from sqlalchemy import (
    JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class InstitutionModel(Base):
    __tablename__ = 'institutions'
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    institution_code = Column(String, nullable=False, unique=True)
    aishe_code = Column(String, nullable=True)
    institution_category = Column(String, nullable=False)
    tier_category = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=False)
    established_year = Column(Integer, nullable=False)
    # contacts: {name, email, contact_number, designation}
    coordinator = Column(JSON, nullable=False)
    nba_coordinator = Column(JSON, nullable=True)
    chairman = Column(JSON, nullable=True)
    registered_date = Column(DateTime, nullable=False)
    last_updated = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default='registered')
    completion_percentage = Column(Integer, nullable=True)
    pre_qualifiers_completed = Column(Boolean, nullable=False, default=False)
    # [{from, to, at, reason}, ...]
    history = Column(JSON, nullable=False, default=list)

    applications = relationship('SARApplicationModel', back_populates='institution')


class SARApplicationModel(Base):
    __tablename__ = 'sar_applications'
    __table_args__ = (
        UniqueConstraint('institution_id', 'department_id', name='uq_sar_institution_department'),
    )
    id = Column(String, primary_key=True)
    application_id = Column(String, nullable=False, unique=True)
    institution_id = Column(String, ForeignKey('institutions.id'), nullable=False, index=True)
    department_id = Column(String, nullable=False)
    department_name = Column(String, nullable=False)
    status = Column(String, nullable=False, default='draft')
    completion_percentage = Column(Integer, nullable=False, default=0)
    application_start_date = Column(DateTime, nullable=False)
    last_modified_date = Column(DateTime, nullable=False)
    last_modified_by = Column(String, nullable=False)

    institution = relationship('InstitutionModel', back_populates='applications')
