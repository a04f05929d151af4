from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from app.novabulk.core.config import settings
from app.novabulk.core.error_catalog import AppError, ErrorCatalog
from app.novabulk.repos.inventory import InventoryRepository
from app.novabulk.repos.products import ProductRepository
from app.novabulk.repos.transactions import TransactionRepository
from app.novabulk.services.bulk_schemas import GUID, PRODUCTS, SCHEMAS
from app.novabulk.services.field_values import CoercionError, coerce_value, is_blank

PRODUCT_SUMMARY_COLUMNS = (
    "ProductID",
    "ProductName",
    "SKU",
    "ProductCostPrice",
    "ProductMinPrice",
    "ProductMarkupPrice",
    "ProductIsAvailable",
    "BarcodeNumber",
    "Color",
    "WholesalerID",
    "IsTracked",
    "Version",
)
ID_TYPES = {"productid": "ProductID", "sku": "SKU"}


def _json_value(value):
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, UUID):
        return str(value)
    return value


def product_to_dict(product, columns=None) -> dict:
    schema = SCHEMAS[PRODUCTS]
    wanted = columns or schema.columns
    return {column: getattr(product, schema.field_for(column).attribute) for column in wanted}


def inventory_to_dict(item, product) -> dict:
    return {
        "InventoryID": item.inventory_id,
        "LocationID": item.location_id,
        "ProductID": item.product_id,
        "Quantity": item.quantity,
        "DesiredQuantity": item.desired_quantity,
        "MinimumQuantity": item.minimum_quantity,
        "Version": item.version,
        "SKU": product.sku if product is not None else None,
        "ProductName": product.product_name if product is not None else None,
    }


def transaction_to_dict(transaction, product) -> dict:
    return {
        "TransactionID": transaction.transaction_id,
        "ProductID": transaction.product_id,
        "Quantity": transaction.quantity,
        "Timestamp": transaction.timestamp,
        "SrcLocationID": transaction.src_location_id,
        "DstLocationID": transaction.dst_location_id,
        "EmployeeID": transaction.employee_id,
        "Comment": transaction.comment,
        "TransactionType": transaction.transaction_type,
        "TypeReferID": transaction.type_refer_id,
        "CostPrice": transaction.cost_price,
        "Version": transaction.version,
        "SKU": product.sku if product is not None else None,
        "ProductName": product.product_name if product is not None else None,
    }


def parse_product_id(value: str | None, *, field: str = "productId") -> UUID | None:
    if is_blank(value):
        return None
    try:
        return coerce_value(GUID, value)
    except CoercionError as exc:
        raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"field": field, "message": exc.message}) from exc


class CatalogService:
    def __init__(self, db):
        self.products = ProductRepository(db)
        self.inventory = InventoryRepository(db)
        self.transactions = TransactionRepository(db)

    def list_products(self, *, sku: str | None = None, product_id: str | None = None) -> list[dict]:
        rows = self.products.list(
            sku=(sku or "").strip() or None,
            product_id=parse_product_id(product_id),
            limit=settings.LIST_LIMIT,
        )
        return [product_to_dict(product, PRODUCT_SUMMARY_COLUMNS) for product in rows]

    def get_product(self, id_type: str, identifier: str) -> dict:
        column = ID_TYPES.get((id_type or "").lower())
        if column is None:
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"field": "idType", "message": "idType must be ProductID or SKU"},
            )
        if column == "SKU":
            product = self.products.get_by_sku(identifier.strip())
        else:
            try:
                product = self.products.get_by_id(coerce_value(GUID, identifier))
            except CoercionError:
                product = None
        if product is None:
            raise AppError(ErrorCatalog.PRODUCT_NOT_FOUND, details={"idType": column, "identifier": identifier})
        return {column: _json_value(value) for column, value in product_to_dict(product).items()}

    def list_inventory(self, *, location_id: str | None = None, product_id: str | None = None) -> list[dict]:
        rows = self.inventory.list_with_products(
            location_id=(location_id or "").strip() or None,
            product_id=parse_product_id(product_id),
            limit=settings.LIST_LIMIT,
        )
        return [inventory_to_dict(item, product) for item, product in rows]

    def get_inventory(self, location_id: str, product_id: str) -> dict:
        row = self.inventory.get_with_product(
            location_id=location_id.strip(),
            product_id=parse_product_id(product_id),
        )
        if row is None:
            raise AppError(
                ErrorCatalog.INVENTORY_NOT_FOUND,
                details={"locationId": location_id, "productId": product_id},
            )
        item, product = row
        return inventory_to_dict(item, product)

    def list_transactions(self, *, product_id: str | None = None, limit: int = 50) -> list[dict]:
        rows = self.transactions.list_with_products(product_id=parse_product_id(product_id), limit=limit)
        return [transaction_to_dict(transaction, product) for transaction, product in rows]
