"""add negative PD follow-up dates to breeding_records

Revision ID: 8d2e4f6a1c73
Revises: 3f1c9a7e2b40
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d2e4f6a1c73'
down_revision: Union[str, Sequence[str], None] = '3f1c9a7e2b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('breeding_records', sa.Column('post_pd_treatment_due_date', sa.Date(), nullable=True))
    op.add_column('breeding_records', sa.Column('keep_in_breeding_until', sa.Date(), nullable=True))
    op.add_column('breeding_records', sa.Column('reopen_date', sa.Date(), nullable=True))


def downgrade() -> None:
    op.drop_column('breeding_records', 'reopen_date')
    op.drop_column('breeding_records', 'keep_in_breeding_until')
    op.drop_column('breeding_records', 'post_pd_treatment_due_date')
