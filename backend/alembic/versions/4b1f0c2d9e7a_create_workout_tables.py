"""create exercise / workout tables + seed workout types

Revision ID: 4b1f0c2d9e7a
Revises:
Create Date: 2025-09-14 10:12:03.512114

"""
import uuid
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1f0c2d9e7a'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

WORKOUT_TYPES = [
    ("strength", "Strength", "dumbbell"),
    ("cardio", "Cardio", "heart"),
    ("hiit", "HIIT", "flame"),
    ("mobility", "Mobility", "stretch"),
    ("sport", "Sport", "ball"),
]


def upgrade() -> None:
    # 1) global catalogue
    workout_type = op.create_table(
        'workout_type',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('key', sa.String(length=40), nullable=False, unique=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('icon', sa.String(length=40), nullable=True),
    )

    # 2) per-user exercise definitions (user_id points at the auth provider's users)
    op.create_table(
        'exercise',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('exercise_type', sa.String(length=16), nullable=False, server_default='strength'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 3) workout sessions
    op.create_table(
        'workout_session',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False, index=True),
        sa.Column('workout_type_id', sa.Uuid(), sa.ForeignKey('workout_type.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 4) exercises inside a session; children are deleted by the app, not by cascade
    op.create_table(
        'workout_exercise',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('workout_session_id', sa.Uuid(), sa.ForeignKey('workout_session.id'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Uuid(), sa.ForeignKey('exercise.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name_snapshot', sa.String(length=120), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 5) sets
    op.create_table(
        'workout_set',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('workout_exercise_id', sa.Uuid(), sa.ForeignKey('workout_exercise.id'), nullable=False, index=True),
        sa.Column('reps', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('weight', sa.Numeric(10, 2), nullable=True),
        sa.Column('calories', sa.Numeric(10, 2), nullable=True),
        sa.Column('distance', sa.Numeric(10, 3), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    op.bulk_insert(
        workout_type,
        [{"id": uuid.uuid4(), "key": k, "name": n, "icon": i} for k, n, i in WORKOUT_TYPES],
    )


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('workout_set')
    op.drop_table('workout_exercise')
    op.drop_table('workout_session')
    op.drop_table('exercise')
    op.drop_table('workout_type')
