"""initial_careers_schema

Revision ID: 20260101_0000
Revises:
Create Date: 2026-01-01 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


revision = '20260101_0000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'companies',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('owner_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('primary_color', sa.String(20), nullable=False),
        sa.Column('accent_color', sa.String(20), nullable=False),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('banner_url', sa.String(500), nullable=True),
        sa.Column('culture_video_url', sa.String(500), nullable=True),
        sa.Column('social_links', sa.JSON(), nullable=True),
        sa.Column('sections', sa.JSON(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_companies_owner_id', ondelete='CASCADE'),
    )
    op.create_index(op.f('ix_companies_owner_id'), 'companies', ['owner_id'], unique=False)
    op.create_index(op.f('ix_companies_slug'), 'companies', ['slug'], unique=True)
    op.create_index(op.f('ix_companies_is_published'), 'companies', ['is_published'], unique=False)

    job_type = sa.Enum('full-time', 'part-time', 'contract', 'internship', name='job_type')
    job_status = sa.Enum('open', 'closed', name='job_status')

    op.create_table(
        'jobs',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('company_id', sa.String(36), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('job_type', job_type, nullable=False),
        sa.Column('status', job_status, nullable=False),
        sa.Column('work_policy', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('employment_type', sa.String(), nullable=True),
        sa.Column('experience_level', sa.String(), nullable=True),
        sa.Column('salary_range', sa.String(), nullable=True),
        sa.Column('posted_days_ago', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], name='fk_jobs_company_id', ondelete='CASCADE'),
        sa.UniqueConstraint('company_id', 'slug', name='uq_jobs_company_slug'),
    )
    op.create_index(op.f('ix_jobs_company_id'), 'jobs', ['company_id'], unique=False)
    op.create_index(op.f('ix_jobs_status'), 'jobs', ['status'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_jobs_status'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_company_id'), table_name='jobs')
    op.drop_table('jobs')
    sa.Enum(name='job_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='job_type').drop(op.get_bind(), checkfirst=True)

    op.drop_index(op.f('ix_companies_is_published'), table_name='companies')
    op.drop_index(op.f('ix_companies_slug'), table_name='companies')
    op.drop_index(op.f('ix_companies_owner_id'), table_name='companies')
    op.drop_table('companies')

    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
