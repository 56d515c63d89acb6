"""Link candidates to login accounts.

Adds candidates.user_id so a CANDIDATE user can only confirm their own
interviews.

Revision ID: 00002
Revises: 00001
Create Date: 2026-10-20
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "00002"
down_revision = "00001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Add user_id to candidates."""
    # Batch mode so the foreign key also works on SQLite
    with op.batch_alter_table("candidates") as batch_op:
        batch_op.add_column(sa.Column("user_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_candidates_user_id",
            "users",
            ["user_id"],
            ["id"],
            ondelete="SET NULL",
        )
        batch_op.create_index("ix_candidates_user_id", ["user_id"])


def downgrade() -> None:
    """Remove user_id from candidates."""
    with op.batch_alter_table("candidates") as batch_op:
        batch_op.drop_index("ix_candidates_user_id")
        batch_op.drop_constraint("fk_candidates_user_id", type_="foreignkey")
        batch_op.drop_column("user_id")
