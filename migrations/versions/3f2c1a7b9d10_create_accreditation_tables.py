"""create institutions and sar_applications

Revision ID: 3f2c1a7b9d10
Revises:
Create Date: 2025-09-05 10:00:00
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f2c1a7b9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'institutions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('institution_code', sa.String(), nullable=False, unique=True),
        sa.Column('aishe_code', sa.String(), nullable=True),
        sa.Column('institution_category', sa.String(), nullable=False),
        sa.Column('tier_category', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('established_year', sa.Integer(), nullable=False),
        sa.Column('coordinator', sa.JSON(), nullable=False),
        sa.Column('nba_coordinator', sa.JSON(), nullable=True),
        sa.Column('chairman', sa.JSON(), nullable=True),
        sa.Column('registered_date', sa.DateTime(), nullable=False),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('completion_percentage', sa.Integer(), nullable=True),
        sa.Column('pre_qualifiers_completed', sa.Boolean(), nullable=False),
        sa.Column('history', sa.JSON(), nullable=False),
    )
    op.create_table(
        'sar_applications',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('application_id', sa.String(), nullable=False, unique=True),
        sa.Column('institution_id', sa.String(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('department_id', sa.String(), nullable=False),
        sa.Column('department_name', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('completion_percentage', sa.Integer(), nullable=False),
        sa.Column('application_start_date', sa.DateTime(), nullable=False),
        sa.Column('last_modified_date', sa.DateTime(), nullable=False),
        sa.Column('last_modified_by', sa.String(), nullable=False),
        sa.UniqueConstraint('institution_id', 'department_id', name='uq_sar_institution_department'),
    )
    op.create_index('ix_sar_applications_institution_id', 'sar_applications', ['institution_id'])


def downgrade() -> None:
    op.drop_index('ix_sar_applications_institution_id', table_name='sar_applications')
    op.drop_table('sar_applications')
    op.drop_table('institutions')
