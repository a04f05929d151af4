import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator, CHAR


class GUID(TypeDecorator):
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        if dialect.name == "mssql":
            from sqlalchemy.dialects.mssql import UNIQUEIDENTIFIER

            return dialect.type_descriptor(UNIQUEIDENTIFIER(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name in {"postgresql", "mssql"}:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(value))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class Base(DeclarativeBase):
    pass


class Product(Base):
    __tablename__ = "Products"

    product_id: Mapped[uuid.UUID] = mapped_column("ProductID", GUID(), primary_key=True, default=uuid.uuid4)
    product_name: Mapped[str | None] = mapped_column("ProductName", String(256))
    product_photo: Mapped[str | None] = mapped_column("ProductPhoto", String(512))
    product_description: Mapped[str | None] = mapped_column("ProductDescription", Text)
    product_cost_price: Mapped[Decimal | None] = mapped_column("ProductCostPrice", Numeric(18, 2))
    product_min_price: Mapped[Decimal | None] = mapped_column("ProductMinPrice", Numeric(18, 2))
    product_markup_price: Mapped[Decimal | None] = mapped_column("ProductMarkupPrice", Numeric(18, 2))
    product_is_available: Mapped[bool | None] = mapped_column("ProductIsAvailable", Boolean)
    barcode_number: Mapped[str | None] = mapped_column("BarcodeNumber", String(64))
    barcode_number2: Mapped[str | None] = mapped_column("BarcodeNumber2", String(64))
    color: Mapped[str | None] = mapped_column("Color", String(64))
    wholesaler_id: Mapped[int | None] = mapped_column("WholesalerID", Integer)
    product_comission: Mapped[Decimal | None] = mapped_column("ProductComission", Numeric(18, 4))
    product_category_id: Mapped[int | None] = mapped_column("Product_CategoryID", Integer)
    is_fixed_price: Mapped[bool | None] = mapped_column("IsFixedPrice", Boolean)
    size: Mapped[str | None] = mapped_column("Size", String(64))
    attr: Mapped[str | None] = mapped_column("Attr", String(256))
    is_diff_tax_rate: Mapped[bool | None] = mapped_column("IsDiffTaxRate", Boolean)
    diff_tax_rate: Mapped[Decimal | None] = mapped_column("DiffTaxRate", Numeric(6, 3))
    is_lock_product_markup_price: Mapped[bool | None] = mapped_column("IsLockProductMarkupPrice", Boolean)
    is_tax_included: Mapped[bool | None] = mapped_column("IsTaxIncluded", Boolean)
    sku: Mapped[str | None] = mapped_column("SKU", String(64), index=True)
    last_purchase_cost_price: Mapped[Decimal | None] = mapped_column("LastPurchaseCostPrice", Numeric(18, 2))
    is_lock_product_minimum_price: Mapped[bool | None] = mapped_column("IsLockProductMinimumPrice", Boolean)
    commission_type: Mapped[str | None] = mapped_column("CommissionType", String(32))
    version: Mapped[int | None] = mapped_column("Version", Integer)
    is_tracked: Mapped[bool | None] = mapped_column("IsTracked", Boolean)
    variant_name1: Mapped[str | None] = mapped_column("VariantName1", String(64))
    variant_name2: Mapped[str | None] = mapped_column("VariantName2", String(64))
    product_family_id: Mapped[int | None] = mapped_column("ProductFamilyId", Integer)
    created_by: Mapped[str | None] = mapped_column("CreatedBy", String(64))
    created_on: Mapped[datetime | None] = mapped_column("CreatedOn", DateTime)
    shopify_id: Mapped[int | None] = mapped_column("ShopifyId", BigInteger)

    inventory = relationship("Inventory", back_populates="product")


class Inventory(Base):
    __tablename__ = "Inventory"

    inventory_id: Mapped[int] = mapped_column("InventoryID", Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[str] = mapped_column("LocationID", String(32), nullable=False)
    product_id: Mapped[uuid.UUID] = mapped_column("ProductID", GUID(), ForeignKey("Products.ProductID"), nullable=False)
    quantity: Mapped[Decimal] = mapped_column("Quantity", Numeric(18, 2), nullable=False, default=0)
    desired_quantity: Mapped[Decimal] = mapped_column("DesiredQuantity", Numeric(18, 2), nullable=False, default=0)
    minimum_quantity: Mapped[Decimal] = mapped_column("MinimumQuantity", Numeric(18, 2), nullable=False, default=0)
    version: Mapped[int] = mapped_column("Version", Integer, nullable=False, default=1)

    product = relationship("Product", back_populates="inventory")

    __table_args__ = (UniqueConstraint("ProductID", "LocationID", name="uq_inventory_product_location"),)


class InventoryTransaction(Base):
    __tablename__ = "Inventory_Transactions"

    transaction_id: Mapped[int] = mapped_column("TransactionID", Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[uuid.UUID] = mapped_column("ProductID", GUID(), index=True, nullable=False)
    quantity: Mapped[Decimal] = mapped_column("Quantity", Numeric(18, 2), nullable=False)
    timestamp: Mapped[datetime] = mapped_column("Timestamp", DateTime, default=datetime.utcnow, nullable=False)
    src_location_id: Mapped[str | None] = mapped_column("SrcLocationID", String(32))
    dst_location_id: Mapped[str | None] = mapped_column("DstLocationID", String(32))
    employee_id: Mapped[int | None] = mapped_column("EmployeeID", Integer)
    comment: Mapped[str | None] = mapped_column("Comment", String(200))
    transaction_type: Mapped[str] = mapped_column("TransactionType", String(20), nullable=False)
    type_refer_id: Mapped[str | None] = mapped_column("TypeReferID", String(64))
    cost_price: Mapped[Decimal | None] = mapped_column("CostPrice", Numeric(18, 2))
    version: Mapped[int | None] = mapped_column("Version", Integer)


class ChangeBatch(Base):
    __tablename__ = "ChangeBatch"

    batch_id: Mapped[str] = mapped_column("BatchID", String(64), primary_key=True)
    batch_name: Mapped[str] = mapped_column("BatchName", String(200), nullable=False)
    entity: Mapped[str] = mapped_column("Entity", String(20), nullable=False)
    account_name: Mapped[str] = mapped_column("AccountName", String(150), nullable=False)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", DateTime, default=datetime.utcnow, nullable=False)
    upsert: Mapped[bool] = mapped_column("Upsert", Boolean, nullable=False)
    transactional: Mapped[bool] = mapped_column("Transactional", Boolean, nullable=False)
    employee_id: Mapped[int | None] = mapped_column("EmployeeID", Integer)
    reason: Mapped[str | None] = mapped_column("Reason", String(200))
    created_count: Mapped[int] = mapped_column("Created", Integer, nullable=False, default=0)
    updated_count: Mapped[int] = mapped_column("Updated", Integer, nullable=False, default=0)
    unchanged_count: Mapped[int] = mapped_column("Unchanged", Integer, nullable=False, default=0)
    skipped_count: Mapped[int] = mapped_column("Skipped", Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column("Status", String(20), nullable=False, default="applied")
    trace_id: Mapped[str | None] = mapped_column("TraceID", String(64))
    rolled_back_at: Mapped[datetime | None] = mapped_column("RolledBackAt", DateTime)
    rolled_back_by: Mapped[str | None] = mapped_column("RolledBackBy", String(150))

    changes = relationship("ChangeAudit", back_populates="batch", order_by="ChangeAudit.audit_id")


class ChangeAudit(Base):
    __tablename__ = "ChangeAudit"

    audit_id: Mapped[int] = mapped_column("AuditID", Integer, primary_key=True, autoincrement=True)
    batch_id: Mapped[str] = mapped_column("BatchID", String(64), ForeignKey("ChangeBatch.BatchID"), index=True, nullable=False)
    entity: Mapped[str] = mapped_column("Entity", String(20), nullable=False)
    entity_key: Mapped[str] = mapped_column("EntityKey", String(200), nullable=False)
    product_id: Mapped[uuid.UUID | None] = mapped_column("ProductID", GUID())
    location_id: Mapped[str | None] = mapped_column("LocationID", String(32))
    action: Mapped[str] = mapped_column("Action", String(10), nullable=False)
    field: Mapped[str] = mapped_column("Field", String(64), nullable=False)
    old_value: Mapped[str | None] = mapped_column("OldValue", Text)
    new_value: Mapped[str | None] = mapped_column("NewValue", Text)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", DateTime, default=datetime.utcnow, nullable=False)

    batch = relationship("ChangeBatch", back_populates="changes")


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    account_name: Mapped[str] = mapped_column(String(150), nullable=False, unique=True, index=True)
    hashed_key: Mapped[str] = mapped_column(String(255), nullable=False)
    employee_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class IdempotencyRecord(Base):
    __tablename__ = "idempotency_records"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    account_name: Mapped[str] = mapped_column(String(150), index=True, nullable=False)
    endpoint: Mapped[str] = mapped_column(String(255), nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    idempotency_key: Mapped[str] = mapped_column(String(255), nullable=False)
    request_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False)
    status_code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    response_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("account_name", "endpoint", "method", "idempotency_key", name="uq_idempotency"),
    )


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    account_name: Mapped[str] = mapped_column(String(150), index=True, nullable=False)
    trace_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    entity_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    event_metadata: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    result: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


Index("ix_inventory_location", Inventory.location_id)
Index("ix_change_audit_product", ChangeAudit.product_id)
Index("ix_inventory_transactions_timestamp", InventoryTransaction.timestamp)
Index("ix_change_batch_created_at", ChangeBatch.created_at)
