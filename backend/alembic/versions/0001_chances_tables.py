"""create schools and admission_submissions

Revision ID: 0001_chances_tables
Revises:
Create Date: 2026-10-19

Tables read by the chances calculator:
- schools: Institutional statistics (acceptance rate, test ranges, GPA bands)
- admission_submissions: Self-reported outcomes forming the peer cohort
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_chances_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create schools and admission_submissions."""

    op.create_table(
        'schools',
        sa.Column('id', sa.UUID(), nullable=False, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=True, unique=True),
        sa.Column('state', sa.String(2), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('school_type', sa.String(32), nullable=False),
        sa.Column('acceptance_rate', sa.Numeric(5, 2), nullable=True),
        sa.Column('sat_average', sa.Integer(), nullable=True),
        sa.Column('sat_25th_percentile', sa.Integer(), nullable=True),
        sa.Column('sat_75th_percentile', sa.Integer(), nullable=True),
        sa.Column('act_median', sa.Integer(), nullable=True),
        sa.Column('act_25th_percentile', sa.Integer(), nullable=True),
        sa.Column('act_75th_percentile', sa.Integer(), nullable=True),
        sa.Column('gpa_percent_400', sa.Numeric(5, 2), nullable=True),
        sa.Column('gpa_percent_375_to_399', sa.Numeric(5, 2), nullable=True),
        sa.Column('gpa_percent_350_to_374', sa.Numeric(5, 2), nullable=True),
        sa.Column('gpa_percent_325_to_349', sa.Numeric(5, 2), nullable=True),
        sa.Column('gpa_percent_300_to_324', sa.Numeric(5, 2), nullable=True),
        sa.Column('gpa_percent_below_300', sa.Numeric(5, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint(
            'acceptance_rate IS NULL OR (acceptance_rate >= 0 AND acceptance_rate <= 100)',
            name='ck_schools_acceptance_rate_range',
        ),
    )
    op.create_index('ix_schools_name', 'schools', ['name'])

    op.create_table(
        'admission_submissions',
        sa.Column('id', sa.UUID(), nullable=False, primary_key=True),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('school_id', sa.UUID(), sa.ForeignKey('schools.id', ondelete='CASCADE'), nullable=False),
        sa.Column('admission_cycle', sa.String(9), nullable=False),
        sa.Column('decision', sa.String(20), nullable=False),
        sa.Column('application_round', sa.String(20), nullable=False),
        sa.Column('gpa_unweighted', sa.Numeric(4, 2), nullable=True),
        sa.Column('gpa_weighted', sa.Numeric(4, 2), nullable=True),
        sa.Column('sat_score', sa.Integer(), nullable=True),
        sa.Column('act_score', sa.Integer(), nullable=True),
        sa.Column('intended_major', sa.String(100), nullable=True),
        sa.Column('state_of_residence', sa.String(2), nullable=False),
        sa.Column('submission_status', sa.String(20), server_default='pending_review', nullable=False),
        sa.Column('flag_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.UniqueConstraint('user_id', 'school_id', 'admission_cycle', name='unique_user_school_cycle'),
        sa.CheckConstraint(
            "admission_cycle ~ '^[0-9]{4}-[0-9]{4}$'",
            name='ck_admission_submissions_cycle_format',
        ),
    )
    op.create_index('ix_admission_submissions_user_id', 'admission_submissions', ['user_id'])
    op.create_index('ix_admission_submissions_school_id', 'admission_submissions', ['school_id'])
    op.create_index('ix_admission_submissions_submission_status', 'admission_submissions', ['submission_status'])


def downgrade() -> None:
    """Drop chances tables."""
    op.drop_index('ix_admission_submissions_submission_status', table_name='admission_submissions')
    op.drop_index('ix_admission_submissions_school_id', table_name='admission_submissions')
    op.drop_index('ix_admission_submissions_user_id', table_name='admission_submissions')
    op.drop_table('admission_submissions')
    op.drop_index('ix_schools_name', table_name='schools')
    op.drop_table('schools')
