"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # Create ENUM types
    op.execute("CREATE TYPE criterion_data_type AS ENUM ('decimal', 'integer', 'enum', 'bool')")
    op.execute("CREATE TYPE scenario_status AS ENUM ('draft', 'submitted', 'processing', 'evaluated', 'error', 'archived')")

    # Create lenders table
    op.create_table(
        'lenders',
        sa.Column('lender_id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        *_timestamps(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('website_url', sa.String(length=255), nullable=True),
        sa.Column('contact_name', sa.String(length=255), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('profile_score', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.UniqueConstraint('name', name='uq_lenders_name'),
        sa.CheckConstraint('profile_score IS NULL OR (profile_score >= 0 AND profile_score <= 100)', name='ck_lenders_profile_score'),
    )
    op.create_index('ix_lenders_name', 'lenders', ['name'])
    op.create_index('ix_lenders_active', 'lenders', ['active'])

    # Create lender_states table (no rows for a lender = nationwide)
    op.create_table(
        'lender_states',
        sa.Column('lender_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('state_code', sa.String(length=2), nullable=False),
        sa.PrimaryKeyConstraint('lender_id', 'state_code'),
        sa.ForeignKeyConstraint(['lender_id'], ['lenders.lender_id'], ondelete='CASCADE'),
    )

    # Create metros table
    op.create_table(
        'metros',
        sa.Column('metro_id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('state_code', sa.String(length=2), nullable=False),
        sa.Column('coverage_notes', sa.Text(), nullable=True),
        sa.UniqueConstraint('name', name='uq_metros_name'),
    )
    op.create_index('ix_metros_state_code', 'metros', ['state_code'])

    # Create programs table (identity is program_id + program_version)
    op.create_table(
        'programs',
        sa.Column('program_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('program_version', sa.Integer(), server_default=sa.text('1'), nullable=False),
        *_timestamps(),
        sa.Column('lender_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('product_type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('valid_from', sa.Date(), nullable=True),
        sa.Column('valid_to', sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint('program_id', 'program_version'),
        sa.ForeignKeyConstraint(['lender_id'], ['lenders.lender_id'], ondelete='CASCADE'),
        sa.CheckConstraint('valid_to IS NULL OR valid_from IS NULL OR valid_from <= valid_to', name='ck_programs_validity'),
    )
    op.create_index('ix_programs_lender_id', 'programs', ['lender_id'])

    # Create program_criteria table
    op.create_table(
        'program_criteria',
        sa.Column('criterion_id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        *_timestamps(),
        sa.Column('program_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('program_version', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('data_type', postgresql.ENUM(name='criterion_data_type', create_type=False), nullable=False),
        sa.Column('hard_min', sa.Numeric(precision=18, scale=4), nullable=True),
        sa.Column('hard_max', sa.Numeric(precision=18, scale=4), nullable=True),
        sa.Column('soft_min', sa.Numeric(precision=18, scale=4), nullable=True),
        sa.Column('soft_max', sa.Numeric(precision=18, scale=4), nullable=True),
        sa.Column('enum_values', postgresql.ARRAY(sa.String(length=100)), nullable=True),
        sa.Column('bool_value', sa.Boolean(), nullable=True),
        sa.Column('required_flag', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.ForeignKeyConstraint(
            ['program_id', 'program_version'],
            ['programs.program_id', 'programs.program_version'],
            ondelete='CASCADE',
        ),
        sa.CheckConstraint('hard_min IS NULL OR hard_max IS NULL OR hard_min <= hard_max', name='ck_program_criteria_hard_range'),
    )
    op.create_index('ix_program_criteria_program_id', 'program_criteria', ['program_id'])

    # Create program_metros table
    op.create_table(
        'program_metros',
        sa.Column('program_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('program_version', sa.Integer(), nullable=False),
        sa.Column('metro_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint('program_id', 'program_version', 'metro_id'),
        sa.ForeignKeyConstraint(
            ['program_id', 'program_version'],
            ['programs.program_id', 'programs.program_version'],
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['metro_id'], ['metros.metro_id'], ondelete='CASCADE'),
    )

    # Create pricing_matrix table
    op.create_table(
        'pricing_matrix',
        sa.Column('matrix_id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        *_timestamps(),
        sa.Column('program_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('program_version', sa.Integer(), nullable=False),
        sa.Column('spread_bps', sa.Integer(), nullable=False),
        sa.Column('ltv_band', sa.String(length=20), nullable=False),
        sa.Column('dscr_band', sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(
            ['program_id', 'program_version'],
            ['programs.program_id', 'programs.program_version'],
            ondelete='CASCADE',
        ),
    )
    op.create_index('ix_pricing_matrix_program_id', 'pricing_matrix', ['program_id'])

    # Create scenarios table
    op.create_table(
        'scenarios',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        *_timestamps(),
        sa.Column('external_id', sa.String(length=100), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', postgresql.ENUM(name='scenario_status', create_type=False), server_default='draft', nullable=False),
        sa.Column('loan_data', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.UniqueConstraint('external_id', name='uq_scenarios_external_id'),
    )
    op.create_index('ix_scenarios_status', 'scenarios', ['status'])


def downgrade() -> None:
    op.drop_index('ix_scenarios_status', table_name='scenarios')
    op.drop_table('scenarios')

    op.drop_index('ix_pricing_matrix_program_id', table_name='pricing_matrix')
    op.drop_table('pricing_matrix')

    op.drop_table('program_metros')

    op.drop_index('ix_program_criteria_program_id', table_name='program_criteria')
    op.drop_table('program_criteria')

    op.drop_index('ix_programs_lender_id', table_name='programs')
    op.drop_table('programs')

    op.drop_index('ix_metros_state_code', table_name='metros')
    op.drop_table('metros')

    op.drop_table('lender_states')

    op.drop_index('ix_lenders_active', table_name='lenders')
    op.drop_index('ix_lenders_name', table_name='lenders')
    op.drop_table('lenders')

    # Drop ENUM types
    op.execute('DROP TYPE scenario_status')
    op.execute('DROP TYPE criterion_data_type')
