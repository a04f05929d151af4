"""change batches and per-field change audit

Revision ID: 0003_change_batches
Revises: 0002_products_inventory
Create Date: 2025-10-22 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0003_change_batches"
down_revision = "0002_products_inventory"
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        if dialect.name == "mssql":
            from sqlalchemy.dialects.mssql import UNIQUEIDENTIFIER

            return dialect.type_descriptor(UNIQUEIDENTIFIER(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def upgrade() -> None:
    op.create_table(
        "ChangeBatch",
        sa.Column("BatchID", sa.String(length=64), primary_key=True),
        sa.Column("BatchName", sa.String(length=200), nullable=False),
        sa.Column("Entity", sa.String(length=20), nullable=False),
        sa.Column("AccountName", sa.String(length=150), nullable=False),
        sa.Column("CreatedAt", sa.DateTime(), nullable=False),
        sa.Column("Upsert", sa.Boolean(), nullable=False),
        sa.Column("Transactional", sa.Boolean(), nullable=False),
        sa.Column("EmployeeID", sa.Integer(), nullable=True),
        sa.Column("Reason", sa.String(length=200), nullable=True),
        sa.Column("Created", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("Updated", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("Unchanged", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("Skipped", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("Status", sa.String(length=20), nullable=False, server_default="applied"),
        sa.Column("TraceID", sa.String(length=64), nullable=True),
        sa.Column("RolledBackAt", sa.DateTime(), nullable=True),
        sa.Column("RolledBackBy", sa.String(length=150), nullable=True),
    )
    op.create_index("ix_change_batch_created_at", "ChangeBatch", ["CreatedAt"])

    op.create_table(
        "ChangeAudit",
        sa.Column("AuditID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("BatchID", sa.String(length=64), sa.ForeignKey("ChangeBatch.BatchID"), nullable=False),
        sa.Column("Entity", sa.String(length=20), nullable=False),
        sa.Column("EntityKey", sa.String(length=200), nullable=False),
        sa.Column("ProductID", GUID(), nullable=True),
        sa.Column("LocationID", sa.String(length=32), nullable=True),
        sa.Column("Action", sa.String(length=10), nullable=False),
        sa.Column("Field", sa.String(length=64), nullable=False),
        sa.Column("OldValue", sa.Text(), nullable=True),
        sa.Column("NewValue", sa.Text(), nullable=True),
        sa.Column("CreatedAt", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_ChangeAudit_BatchID", "ChangeAudit", ["BatchID"])
    op.create_index("ix_change_audit_product", "ChangeAudit", ["ProductID"])


def downgrade() -> None:
    op.drop_index("ix_change_audit_product", table_name="ChangeAudit")
    op.drop_index("ix_ChangeAudit_BatchID", table_name="ChangeAudit")
    op.drop_table("ChangeAudit")
    op.drop_index("ix_change_batch_created_at", table_name="ChangeBatch")
    op.drop_table("ChangeBatch")
