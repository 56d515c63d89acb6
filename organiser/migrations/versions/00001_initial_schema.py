"""Initial schema - organisations, users, candidates, interviewers, interviews, feedback.

Revision ID: 00001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '00001'
down_revision = None
branch_labels = None
depends_on = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    # =====================
    # Independent tables (no foreign keys)
    # =====================

    # organisations
    op.create_table(
        'organisations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('registration_number', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=False),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('street', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('verification_status', sa.String(20), nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('admin_user_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('contact_email'),
    )

    # =====================
    # Tables with foreign keys
    # =====================

    # users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('roles', sa.JSON(), nullable=False),
        sa.Column('recruiter_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.ForeignKeyConstraint(['recruiter_id'], ['organisations.id'], ondelete='SET NULL'),
    )

    # refresh_tokens
    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )

    # candidates
    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('position', sa.String(255), nullable=True),
        sa.Column('experience', sa.Float(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('resume_url', sa.String(500), nullable=True),
        sa.Column('linkedin_url', sa.String(500), nullable=True),
        sa.Column('github_url', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('recruiter_id', sa.Integer(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.ForeignKeyConstraint(['recruiter_id'], ['organisations.id'], ondelete='SET NULL'),
    )

    # interviewers
    op.create_table(
        'interviewers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('department', sa.String(255), nullable=True),
        sa.Column('expertise', sa.JSON(), nullable=False),
        sa.Column('years_of_experience', sa.Integer(), nullable=True),
        sa.Column('availability', sa.Boolean(), nullable=True),
        sa.Column('total_interviews', sa.Integer(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
    )

    # interviews
    op.create_table(
        'interviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('recruiter_id', sa.Integer(), nullable=True),
        sa.Column('candidate_id', sa.Integer(), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('interview_type', sa.String(30), nullable=False),
        sa.Column('round', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('meeting_link', sa.String(500), nullable=True),
        sa.Column('location', sa.String(500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('candidate_confirmed', sa.Boolean(), nullable=False),
        sa.Column('candidate_confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('feedback_requested', sa.Boolean(), nullable=False),
        sa.Column('feedback_requested_at', sa.DateTime(), nullable=True),
        sa.Column('result', sa.String(20), nullable=True),
        sa.Column('next_round_interview_id', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['recruiter_id'], ['organisations.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id']),
        sa.ForeignKeyConstraint(['next_round_interview_id'], ['interviews.id']),
    )
    op.create_index('idx_interviews_status', 'interviews', ['status'])
    op.create_index('idx_interviews_candidate', 'interviews', ['candidate_id'])
    op.create_index('idx_interviews_scheduled', 'interviews', ['scheduled_at'])

    # interview_interviewers
    op.create_table(
        'interview_interviewers',
        sa.Column('interview_id', sa.Integer(), nullable=False),
        sa.Column('interviewer_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('interview_id', 'interviewer_id'),
        sa.ForeignKeyConstraint(['interview_id'], ['interviews.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['interviewer_id'], ['interviewers.id'], ondelete='CASCADE'),
    )

    # feedback
    op.create_table(
        'feedback',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('interview_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('technical_skills', sa.Integer(), nullable=True),
        sa.Column('communication_skills', sa.Integer(), nullable=True),
        sa.Column('problem_solving', sa.Integer(), nullable=True),
        sa.Column('cultural_fit', sa.Integer(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('strengths', sa.Text(), nullable=True),
        sa.Column('weaknesses', sa.Text(), nullable=True),
        sa.Column('recommendation', sa.String(20), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('interview_id'),
        sa.ForeignKeyConstraint(['interview_id'], ['interviews.id'], ondelete='CASCADE'),
    )


def downgrade() -> None:
    # Drop in reverse order of dependencies
    op.drop_table('feedback')
    op.drop_table('interview_interviewers')
    op.drop_index('idx_interviews_scheduled', 'interviews')
    op.drop_index('idx_interviews_candidate', 'interviews')
    op.drop_index('idx_interviews_status', 'interviews')
    op.drop_table('interviews')
    op.drop_table('interviewers')
    op.drop_table('candidates')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
    op.drop_table('organisations')
