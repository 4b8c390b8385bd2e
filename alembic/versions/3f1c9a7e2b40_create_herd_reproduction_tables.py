"""Create animals, breeding_records, calvings and notifications

Revision ID: 3f1c9a7e2b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- animals ---
    op.create_table(
        'animals',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('ear_tag', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('sex', sa.String(length=8), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('lifecycle_status', sa.String(length=16), server_default='Active', nullable=False),
        sa.Column('reproductive_override', sa.String(length=16), server_default='None', nullable=False),
        sa.Column('dam_id', sa.Uuid(), nullable=True),
        sa.Column('sire_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.ForeignKeyConstraint(['dam_id'], ['animals.id']),
        sa.ForeignKeyConstraint(['sire_id'], ['animals.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'ear_tag', name='ux_animals_user_ear_tag'),
    )
    op.create_index('ix_animals_user_id', 'animals', ['user_id'], unique=False)

    # --- breeding_records ---
    op.create_table(
        'breeding_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('animal_id', sa.Uuid(), nullable=False),
        sa.Column('sire_id', sa.Uuid(), nullable=True),
        sa.Column('breeding_date', sa.Date(), nullable=False),
        sa.Column('method', sa.String(length=16), nullable=False),
        sa.Column('pd_result', sa.String(length=16), server_default='Unchecked', nullable=False),
        sa.Column('pregnancy_check_date', sa.Date(), nullable=True),
        sa.Column('confirmed_pregnant', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('reopen_flagged_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.ForeignKeyConstraint(['animal_id'], ['animals.id']),
        sa.ForeignKeyConstraint(['sire_id'], ['animals.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_breeding_records_user_animal_date',
        'breeding_records',
        ['user_id', 'animal_id', 'breeding_date'],
        unique=False,
    )
    op.create_index(
        'ix_breeding_records_unchecked',
        'breeding_records',
        ['user_id', 'pd_result', 'breeding_date'],
        unique=False,
        postgresql_where="pd_result = 'Unchecked'",
    )

    # --- calvings ---
    op.create_table(
        'calvings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('animal_id', sa.Uuid(), nullable=False),
        sa.Column('breeding_record_id', sa.Uuid(), nullable=True),
        sa.Column('calving_date', sa.Date(), nullable=False),
        sa.Column('calf_ear_tag', sa.String(length=128), nullable=True),
        sa.Column('calf_sex', sa.String(length=8), nullable=True),
        sa.Column('calf_id', sa.Uuid(), nullable=True),
        sa.Column('birth_weight', sa.Numeric(precision=6, scale=2), nullable=True),
        sa.Column('complications', sa.Text(), nullable=True),
        sa.Column('assistance_required', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['animal_id'], ['animals.id']),
        sa.ForeignKeyConstraint(['breeding_record_id'], ['breeding_records.id']),
        sa.ForeignKeyConstraint(['calf_id'], ['animals.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_calvings_user_animal_date',
        'calvings',
        ['user_id', 'animal_id', 'calving_date'],
        unique=False,
    )

    # --- notifications ---
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('animal_id', sa.Uuid(), nullable=True),
        sa.Column('channel', sa.String(length=16), server_default='in_app', nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('dedup_key', sa.String(length=160), nullable=False),
        sa.Column('scheduled_for', sa.Date(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('data', sa.Text(), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('dedup_key'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'], unique=False)
    op.create_index('ix_notifications_read', 'notifications', ['read'], unique=False)
    op.create_index('ix_notifications_user_read', 'notifications', ['user_id', 'read'], unique=False)
    op.create_index(
        'ix_notifications_user_scheduled', 'notifications', ['user_id', 'scheduled_for'], unique=False
    )


def downgrade() -> None:
    op.drop_index('ix_notifications_user_scheduled', table_name='notifications')
    op.drop_index('ix_notifications_user_read', table_name='notifications')
    op.drop_index('ix_notifications_read', table_name='notifications')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_calvings_user_animal_date', table_name='calvings')
    op.drop_table('calvings')
    op.drop_index('ix_breeding_records_unchecked', table_name='breeding_records')
    op.drop_index('ix_breeding_records_user_animal_date', table_name='breeding_records')
    op.drop_table('breeding_records')
    op.drop_index('ix_animals_user_id', table_name='animals')
    op.drop_table('animals')
