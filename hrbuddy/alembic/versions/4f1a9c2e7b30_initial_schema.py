"""initial_schema

Revision ID: 4f1a9c2e7b30
Revises:
Create Date: 2026-10-17 09:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1a9c2e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all application tables."""
    op.create_table(
        'applicants',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('linkedin_url', sa.Text, nullable=True),
        sa.Column('portfolio_url', sa.Text, nullable=True),
        sa.Column('source', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'positions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('department', sa.String(100), nullable=False, server_default='General'),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('applicant_id', sa.String(36), sa.ForeignKey('applicants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position_id', sa.String(36), sa.ForeignKey('positions.id'), nullable=False),
        sa.Column('status', sa.String(30), nullable=False, server_default='new'),
        sa.Column('cover_letter', sa.Text, nullable=True),
        sa.Column('form_data', sa.JSON, nullable=True),
        sa.Column('applied_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'application_stages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stage', sa.String(50), nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('changed_at', sa.DateTime, nullable=False),
        sa.Column('changed_by', sa.String(100), nullable=False, server_default='system'),
    )

    op.create_table(
        'skills',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('category', sa.String(100), nullable=True),
    )

    op.create_table(
        'applicant_skills',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('applicant_id', sa.String(36), sa.ForeignKey('applicants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('skill_id', sa.String(36), sa.ForeignKey('skills.id'), nullable=False),
        sa.Column('years_experience', sa.Float, nullable=True),
        sa.Column('proficiency_level', sa.Integer, nullable=True),
        sa.Column('is_highlighted', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_ai_detected', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('applicant_id', 'skill_id'),
    )

    op.create_table(
        'files',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_type', sa.String(100), nullable=False),
        sa.Column('file_size', sa.Integer, nullable=False, server_default='0'),
        sa.Column('storage_path', sa.Text, nullable=False),
        sa.Column('file_category', sa.String(50), nullable=False, server_default='resume'),
        sa.Column('uploaded_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'ai_analyses',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('analysis_type', sa.String(50), nullable=False),
        sa.Column('analysis_result', sa.JSON, nullable=False),
        sa.Column('confidence_score', sa.Float, nullable=True),
        sa.Column('model_version', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )


def downgrade() -> None:
    """Drop all application tables."""
    op.drop_table('ai_analyses')
    op.drop_table('files')
    op.drop_table('applicant_skills')
    op.drop_table('skills')
    op.drop_table('application_stages')
    op.drop_table('applications')
    op.drop_table('positions')
    op.drop_table('applicants')
