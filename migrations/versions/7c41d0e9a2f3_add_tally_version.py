"""add tally version

Revision ID: 7c41d0e9a2f3
Revises: 3f9a1c2e7b10
Create Date: 2026-10-18 16:41:07.902115

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '7c41d0e9a2f3'
down_revision = '3f9a1c2e7b10'
branch_labels = None
depends_on = None


def upgrade():
    op.add_column(
        "tallies",
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )


def downgrade():
    op.drop_column("tallies", "version")
