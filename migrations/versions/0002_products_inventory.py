"""products, inventory and inventory transactions

Revision ID: 0002_products_inventory
Revises: 0001_initial
Create Date: 2025-10-21 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0002_products_inventory"
down_revision = "0001_initial"
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
        "Products",
        sa.Column("ProductID", GUID(), primary_key=True),
        sa.Column("ProductName", sa.String(length=256), nullable=True),
        sa.Column("ProductPhoto", sa.String(length=512), nullable=True),
        sa.Column("ProductDescription", sa.Text(), nullable=True),
        sa.Column("ProductCostPrice", sa.Numeric(18, 2), nullable=True),
        sa.Column("ProductMinPrice", sa.Numeric(18, 2), nullable=True),
        sa.Column("ProductMarkupPrice", sa.Numeric(18, 2), nullable=True),
        sa.Column("ProductIsAvailable", sa.Boolean(), nullable=True),
        sa.Column("BarcodeNumber", sa.String(length=64), nullable=True),
        sa.Column("BarcodeNumber2", sa.String(length=64), nullable=True),
        sa.Column("Color", sa.String(length=64), nullable=True),
        sa.Column("WholesalerID", sa.Integer(), nullable=True),
        sa.Column("ProductComission", sa.Numeric(18, 4), nullable=True),
        sa.Column("Product_CategoryID", sa.Integer(), nullable=True),
        sa.Column("IsFixedPrice", sa.Boolean(), nullable=True),
        sa.Column("Size", sa.String(length=64), nullable=True),
        sa.Column("Attr", sa.String(length=256), nullable=True),
        sa.Column("IsDiffTaxRate", sa.Boolean(), nullable=True),
        sa.Column("DiffTaxRate", sa.Numeric(6, 3), nullable=True),
        sa.Column("IsLockProductMarkupPrice", sa.Boolean(), nullable=True),
        sa.Column("IsTaxIncluded", sa.Boolean(), nullable=True),
        sa.Column("SKU", sa.String(length=64), nullable=True),
        sa.Column("LastPurchaseCostPrice", sa.Numeric(18, 2), nullable=True),
        sa.Column("IsLockProductMinimumPrice", sa.Boolean(), nullable=True),
        sa.Column("CommissionType", sa.String(length=32), nullable=True),
        sa.Column("Version", sa.Integer(), nullable=True),
        sa.Column("IsTracked", sa.Boolean(), nullable=True),
        sa.Column("VariantName1", sa.String(length=64), nullable=True),
        sa.Column("VariantName2", sa.String(length=64), nullable=True),
        sa.Column("ProductFamilyId", sa.Integer(), nullable=True),
        sa.Column("CreatedBy", sa.String(length=64), nullable=True),
        sa.Column("CreatedOn", sa.DateTime(), nullable=True),
        sa.Column("ShopifyId", sa.BigInteger(), nullable=True),
    )
    op.create_index("ix_Products_SKU", "Products", ["SKU"])

    op.create_table(
        "Inventory",
        sa.Column("InventoryID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("LocationID", sa.String(length=32), nullable=False),
        sa.Column("ProductID", GUID(), sa.ForeignKey("Products.ProductID"), nullable=False),
        sa.Column("Quantity", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("DesiredQuantity", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("MinimumQuantity", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("Version", sa.Integer(), nullable=False, server_default="1"),
        sa.UniqueConstraint("ProductID", "LocationID", name="uq_inventory_product_location"),
    )
    op.create_index("ix_inventory_location", "Inventory", ["LocationID"])

    op.create_table(
        "Inventory_Transactions",
        sa.Column("TransactionID", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ProductID", GUID(), nullable=False),
        sa.Column("Quantity", sa.Numeric(18, 2), nullable=False),
        sa.Column("Timestamp", sa.DateTime(), nullable=False),
        sa.Column("SrcLocationID", sa.String(length=32), nullable=True),
        sa.Column("DstLocationID", sa.String(length=32), nullable=True),
        sa.Column("EmployeeID", sa.Integer(), nullable=True),
        sa.Column("Comment", sa.String(length=200), nullable=True),
        sa.Column("TransactionType", sa.String(length=20), nullable=False),
        sa.Column("TypeReferID", sa.String(length=64), nullable=True),
        sa.Column("CostPrice", sa.Numeric(18, 2), nullable=True),
        sa.Column("Version", sa.Integer(), nullable=True),
    )
    op.create_index("ix_Inventory_Transactions_ProductID", "Inventory_Transactions", ["ProductID"])
    op.create_index("ix_inventory_transactions_timestamp", "Inventory_Transactions", ["Timestamp"])


def downgrade() -> None:
    op.drop_index("ix_inventory_transactions_timestamp", table_name="Inventory_Transactions")
    op.drop_index("ix_Inventory_Transactions_ProductID", table_name="Inventory_Transactions")
    op.drop_table("Inventory_Transactions")
    op.drop_index("ix_inventory_location", table_name="Inventory")
    op.drop_table("Inventory")
    op.drop_index("ix_Products_SKU", table_name="Products")
    op.drop_table("Products")
