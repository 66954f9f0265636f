"""Create paper table

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create paper table with unique url."""
    op.create_table(
        "paper",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("reference", sa.String(255), nullable=False),
        sa.Column("body", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("originator", sa.String(2000), nullable=False),
        sa.Column("paper_type", sa.String(255), nullable=False),
        sa.Column("published_at", sa.Date(), nullable=False),
        sa.Column("resolution", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.UniqueConstraint("url", name="uq_paper_url"),
    )

    op.create_index("idx_paper_published_at", "paper", ["published_at"])


def downgrade() -> None:
    """Drop paper table."""
    op.drop_index("idx_paper_published_at", table_name="paper")
    op.drop_table("paper")
