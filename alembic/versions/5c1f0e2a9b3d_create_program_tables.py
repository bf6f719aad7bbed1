"""create_program_tables

Revision ID: 5c1f0e2a9b3d
Revises:
Create Date: 2026-10-19 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '5c1f0e2a9b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'program_templates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('team_id', sa.String(length=64), nullable=False),
        sa.Column('coach_user_id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('weeks_count', sa.Integer(), nullable=False),
        sa.Column('cycle_days', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('weeks_count > 0', name='ck_program_templates_weeks_positive'),
        sa.CheckConstraint('cycle_days > 0', name='ck_program_templates_cycle_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_program_templates_team_id', 'program_templates', ['team_id'])
    op.create_index('ix_program_templates_coach_user_id', 'program_templates', ['coach_user_id'])

    op.create_table(
        'program_focuses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('team_id', sa.String(length=64), nullable=False),
        sa.Column('coach_user_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cues', _json(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_program_focuses_team_id', 'program_focuses', ['team_id'])
    op.create_index('ix_program_focuses_coach_user_id', 'program_focuses', ['coach_user_id'])

    op.create_table(
        'program_drills',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('team_id', sa.String(length=64), nullable=False),
        sa.Column('coach_user_id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=140), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('goal', sa.Text(), nullable=True),
        sa.Column('equipment', _json(), nullable=False),
        sa.Column('cues', _json(), nullable=False),
        sa.Column('common_mistakes', _json(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_program_drills_team_id', 'program_drills', ['team_id'])
    op.create_index('ix_program_drills_coach_user_id', 'program_drills', ['coach_user_id'])

    op.create_table(
        'program_drill_media',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('drill_id', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=140), nullable=True),
        sa.Column('video_id', sa.String(length=64), nullable=True),
        sa.Column('external_url', sa.String(length=2000), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['drill_id'], ['program_drills.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_program_drill_media_drill_id', 'program_drill_media', ['drill_id'])

    op.create_table(
        'program_template_weeks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('goals', _json(), nullable=False),
        sa.Column('assignments', _json(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['template_id'], ['program_templates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('template_id', 'week_index', name='uq_template_week'),
    )

    op.create_table(
        'program_template_days',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('day_index', sa.Integer(), nullable=False),
        sa.Column('focus_id', sa.Integer(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['template_id'], ['program_templates.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['focus_id'], ['program_focuses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('template_id', 'week_index', 'day_index', name='uq_template_day'),
    )

    op.create_table(
        'program_template_day_assignments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('day_index', sa.Integer(), nullable=False),
        sa.Column('drill_id', sa.Integer(), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('requires_upload', sa.Boolean(), nullable=False),
        sa.Column('upload_prompt', sa.Text(), nullable=True),
        sa.Column('notes_to_player', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['template_id'], ['program_templates.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['drill_id'], ['program_drills.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_template_day_assignments_day',
        'program_template_day_assignments',
        ['template_id', 'week_index', 'day_index'],
    )
    op.create_index(
        'ix_program_template_day_assignments_drill_id',
        'program_template_day_assignments',
        ['drill_id'],
    )

    op.create_table(
        'program_enrollments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.String(length=64), nullable=False),
        sa.Column('player_user_id', sa.String(length=64), nullable=False),
        sa.Column('coach_user_id', sa.String(length=64), nullable=False),
        sa.Column('start_at', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['template_id'], ['program_templates.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_program_enrollments_template_id', 'program_enrollments', ['template_id'])
    op.create_index('ix_program_enrollments_team_id', 'program_enrollments', ['team_id'])
    op.create_index('ix_program_enrollments_coach_user_id', 'program_enrollments', ['coach_user_id'])
    op.create_index(
        'ix_program_enrollments_player_status',
        'program_enrollments',
        ['player_user_id', 'status'],
    )

    op.create_table(
        'program_week_overrides',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('enrollment_id', sa.Integer(), nullable=False),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('goals', _json(), nullable=False),
        sa.Column('assignments', _json(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['enrollment_id'], ['program_enrollments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('enrollment_id', 'week_index', name='uq_week_override'),
    )

    op.create_table(
        'program_day_overrides',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('enrollment_id', sa.Integer(), nullable=False),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('day_index', sa.Integer(), nullable=False),
        sa.Column('focus_id', sa.Integer(), nullable=True),
        sa.Column('day_note', sa.Text(), nullable=True),
        sa.Column('assignments', _json(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['enrollment_id'], ['program_enrollments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['focus_id'], ['program_focuses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('enrollment_id', 'week_index', 'day_index', name='uq_day_override'),
    )

    op.create_table(
        'program_assignment_completions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('enrollment_id', sa.Integer(), nullable=False),
        sa.Column('assignment_id', sa.String(length=64), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['enrollment_id'], ['program_enrollments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('enrollment_id', 'assignment_id', name='uq_assignment_completion'),
    )

    op.create_table(
        'program_submissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('enrollment_id', sa.Integer(), nullable=False),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('day_index', sa.Integer(), nullable=True),
        sa.Column('assignment_id', sa.String(length=64), nullable=True),
        sa.Column('video_id', sa.String(length=64), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['enrollment_id'], ['program_enrollments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_program_submissions_enrollment_week',
        'program_submissions',
        ['enrollment_id', 'week_index'],
    )
    op.create_index(
        'ix_program_submissions_assignment',
        'program_submissions',
        ['enrollment_id', 'assignment_id'],
    )

    op.create_table(
        'program_reviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('submission_id', sa.Integer(), nullable=False),
        sa.Column('reviewer_user_id', sa.String(length=64), nullable=True),
        sa.Column('review_note', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['submission_id'], ['program_submissions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('submission_id', name='uq_review_submission'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('program_reviews')
    op.drop_index('ix_program_submissions_assignment', table_name='program_submissions')
    op.drop_index('ix_program_submissions_enrollment_week', table_name='program_submissions')
    op.drop_table('program_submissions')
    op.drop_table('program_assignment_completions')
    op.drop_table('program_day_overrides')
    op.drop_table('program_week_overrides')
    op.drop_index('ix_program_enrollments_player_status', table_name='program_enrollments')
    op.drop_index('ix_program_enrollments_coach_user_id', table_name='program_enrollments')
    op.drop_index('ix_program_enrollments_team_id', table_name='program_enrollments')
    op.drop_index('ix_program_enrollments_template_id', table_name='program_enrollments')
    op.drop_table('program_enrollments')
    op.drop_index(
        'ix_program_template_day_assignments_drill_id',
        table_name='program_template_day_assignments',
    )
    op.drop_index('ix_template_day_assignments_day', table_name='program_template_day_assignments')
    op.drop_table('program_template_day_assignments')
    op.drop_table('program_template_days')
    op.drop_table('program_template_weeks')
    op.drop_index('ix_program_drill_media_drill_id', table_name='program_drill_media')
    op.drop_table('program_drill_media')
    op.drop_index('ix_program_drills_coach_user_id', table_name='program_drills')
    op.drop_index('ix_program_drills_team_id', table_name='program_drills')
    op.drop_table('program_drills')
    op.drop_index('ix_program_focuses_coach_user_id', table_name='program_focuses')
    op.drop_index('ix_program_focuses_team_id', table_name='program_focuses')
    op.drop_table('program_focuses')
    op.drop_index('ix_program_templates_coach_user_id', table_name='program_templates')
    op.drop_index('ix_program_templates_team_id', table_name='program_templates')
    op.drop_table('program_templates')
