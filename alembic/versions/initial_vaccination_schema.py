"""initial_vaccination_schema

Revision ID: initial_vaccination_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000

This migration creates the vaccination portal tables:
- users: Portal login accounts
- students: Student records keyed by studentID
- vaccination_drives: Scheduled drives with their dose inventory
- vaccination_records: Doses received by students, one per (student, drive)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'initial_vaccination_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('role', sa.Enum('coordinator', 'admin', 'student', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'students',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('student_id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('class_name', sa.String(length=50), nullable=False),
        sa.Column('gender', sa.Enum('Male', 'Female', 'Other', name='gender'), nullable=False),
        sa.Column('dob', sa.Date(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_students_student_id', 'students', ['student_id'], unique=True)
    op.create_index('ix_students_class_name', 'students', ['class_name'])

    op.create_table(
        'vaccination_drives',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('drive_id', sa.String(length=64), nullable=False),
        sa.Column('vaccine_name', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('available_doses', sa.Integer(), nullable=False),
        sa.Column('grades', sa.String(length=100), nullable=False),
        sa.Column('is_expired', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('available_doses >= 0', name='ck_drive_available_doses_non_negative'),
    )
    op.create_index('ix_vaccination_drives_drive_id', 'vaccination_drives', ['drive_id'], unique=True)
    op.create_index('ix_vaccination_drives_date', 'vaccination_drives', ['date'])
    op.create_index('ix_vaccination_drives_is_expired', 'vaccination_drives', ['is_expired'])

    op.create_table(
        'vaccination_records',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('student_pk', sa.BigInteger(), nullable=False),
        sa.Column('drive_id', sa.String(length=64), nullable=False),
        sa.Column('vaccine_name', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['student_pk'], ['students.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('student_pk', 'drive_id', name='uq_vaccination_student_drive'),
    )
    op.create_index('ix_vaccination_records_student_pk', 'vaccination_records', ['student_pk'])
    op.create_index('ix_vaccination_records_drive_id', 'vaccination_records', ['drive_id'])
    op.create_index('ix_vaccination_records_vaccine_name', 'vaccination_records', ['vaccine_name'])
    op.create_index('ix_vaccination_records_date', 'vaccination_records', ['date'])


def downgrade() -> None:
    op.drop_table('vaccination_records')
    op.drop_table('vaccination_drives')
    op.drop_table('students')
    op.drop_table('users')
    sa.Enum(name='gender').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
