"""Add trigram indexes for substring search on PostgreSQL.

B-tree indexes cannot serve ``ILIKE '%term%'``; GIN trigram indexes can,
so filtered searches avoid scanning every document.

Revision ID: 002
Revises: 001
"""

from alembic import op

# revision identifiers, used by Alembic.
revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None

TRIGRAM_COLUMNS = ("subject", "class_name", "school")


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")
    for column in TRIGRAM_COLUMNS:
        op.create_index(
            f"ix_documents_{column}_trgm",
            "documents",
            [column],
            postgresql_using="gin",
            postgresql_ops={column: "gin_trgm_ops"},
        )


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    for column in TRIGRAM_COLUMNS:
        op.drop_index(f"ix_documents_{column}_trgm", table_name="documents")
