"""Create users table and seed the admin and test accounts.

Revision ID: 20190930115154
Revises:
Create Date: 2019-09-30

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from crudkit.core.security import hash_password

revision: str = "20190930115154"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ADMIN_ID = "00000000-0000-0000-0000-000000000000"
TEST_ID = "1802d2f8-1a18-43c1-9c58-1c3f7100c842"
# Development-only credential for both seed accounts; change or delete in production.
SEED_PASSWORD = "123456"


def upgrade() -> None:
    users = op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("password", sa.String(length=122), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_by", sa.String(length=36), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.bulk_insert(
        users,
        [
            {
                "id": ADMIN_ID,
                "first_name": "admin",
                "last_name": "user",
                "email": "admin@admin.com",
                "password": hash_password(SEED_PASSWORD),
                "created_by": ADMIN_ID,
                "updated_by": ADMIN_ID,
            },
            {
                "id": TEST_ID,
                "first_name": "test",
                "last_name": "user",
                "email": "test@admin.com",
                "password": hash_password(SEED_PASSWORD),
                "created_by": ADMIN_ID,
                "updated_by": ADMIN_ID,
            },
        ],
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
