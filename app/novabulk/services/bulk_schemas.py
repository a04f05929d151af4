from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable

from app.novabulk.core.error_catalog import AppError, ErrorCatalog

DECIMAL = "decimal"
INTEGER = "integer"
BOOLEAN = "boolean"
GUID = "guid"
DATETIME = "datetime"
TEXT = "text"

PRODUCTS = "products"
INVENTORY = "inventory"


@dataclass(frozen=True)
class FieldSpec:
    column: str
    kind: str = TEXT
    attribute: str | None = None
    scale: int | None = None


@dataclass(frozen=True)
class WarningRule:
    field: str
    message: str
    check: Callable[[dict], bool]


@dataclass(frozen=True)
class EntitySchema:
    name: str
    label: str
    key_fields: tuple[str, ...]
    fields: tuple[FieldSpec, ...]
    sample: str
    warnings: tuple[WarningRule, ...] = field(default_factory=tuple)

    @property
    def columns(self) -> list[str]:
        return [spec.column for spec in self.fields]

    def columns_of_kind(self, *kinds: str) -> list[str]:
        return [spec.column for spec in self.fields if spec.kind in kinds]

    @property
    def numeric(self) -> list[str]:
        return self.columns_of_kind(DECIMAL, INTEGER)

    @property
    def boolean(self) -> list[str]:
        return self.columns_of_kind(BOOLEAN)

    def field_for(self, column: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.column == column:
                return spec
        return None

    def describe(self) -> dict:
        return {
            "entity": self.name,
            "label": self.label,
            "keyFields": list(self.key_fields),
            "columns": self.columns,
            "numeric": self.numeric,
            "integer": self.columns_of_kind(INTEGER),
            "boolean": self.boolean,
            "guid": self.columns_of_kind(GUID),
            "datetime": self.columns_of_kind(DATETIME),
            "sample": self.sample,
        }


def _number(value) -> Decimal | None:
    if value is None or str(value).strip() == "":
        return None
    try:
        parsed = Decimal(str(value).strip())
    except ArithmeticError:
        return None
    return parsed if parsed.is_finite() else None


def _min_above_markup(row: dict) -> bool:
    min_price = _number(row.get("ProductMinPrice"))
    markup_price = _number(row.get("ProductMarkupPrice"))
    return min_price is not None and markup_price is not None and min_price > markup_price


def _quantity_below_minimum(row: dict) -> bool:
    quantity = _number(row.get("Quantity"))
    minimum = _number(row.get("MinimumQuantity"))
    return quantity is not None and minimum is not None and quantity < minimum


PRODUCT_FIELDS = (
    FieldSpec("ProductID", GUID, "product_id"),
    FieldSpec("ProductName", TEXT, "product_name"),
    FieldSpec("ProductPhoto", TEXT, "product_photo"),
    FieldSpec("ProductDescription", TEXT, "product_description"),
    FieldSpec("ProductCostPrice", DECIMAL, "product_cost_price", 2),
    FieldSpec("ProductMinPrice", DECIMAL, "product_min_price", 2),
    FieldSpec("ProductMarkupPrice", DECIMAL, "product_markup_price", 2),
    FieldSpec("ProductIsAvailable", BOOLEAN, "product_is_available"),
    FieldSpec("BarcodeNumber", TEXT, "barcode_number"),
    FieldSpec("BarcodeNumber2", TEXT, "barcode_number2"),
    FieldSpec("Color", TEXT, "color"),
    FieldSpec("WholesalerID", INTEGER, "wholesaler_id"),
    FieldSpec("ProductComission", DECIMAL, "product_comission", 4),
    FieldSpec("Product_CategoryID", INTEGER, "product_category_id"),
    FieldSpec("IsFixedPrice", BOOLEAN, "is_fixed_price"),
    FieldSpec("Size", TEXT, "size"),
    FieldSpec("Attr", TEXT, "attr"),
    FieldSpec("IsDiffTaxRate", BOOLEAN, "is_diff_tax_rate"),
    FieldSpec("DiffTaxRate", DECIMAL, "diff_tax_rate", 3),
    FieldSpec("IsLockProductMarkupPrice", BOOLEAN, "is_lock_product_markup_price"),
    FieldSpec("IsTaxIncluded", BOOLEAN, "is_tax_included"),
    FieldSpec("SKU", TEXT, "sku"),
    FieldSpec("LastPurchaseCostPrice", DECIMAL, "last_purchase_cost_price", 2),
    FieldSpec("IsLockProductMinimumPrice", BOOLEAN, "is_lock_product_minimum_price"),
    FieldSpec("CommissionType", TEXT, "commission_type"),
    FieldSpec("Version", INTEGER, "version"),
    FieldSpec("IsTracked", BOOLEAN, "is_tracked"),
    FieldSpec("VariantName1", TEXT, "variant_name1"),
    FieldSpec("VariantName2", TEXT, "variant_name2"),
    FieldSpec("ProductFamilyId", INTEGER, "product_family_id"),
    FieldSpec("CreatedBy", TEXT, "created_by"),
    FieldSpec("CreatedOn", DATETIME, "created_on"),
    FieldSpec("ShopifyId", INTEGER, "shopify_id"),
)

INVENTORY_FIELDS = (
    FieldSpec("InventoryID", INTEGER, "inventory_id"),
    FieldSpec("LocationID", TEXT, "location_id"),
    FieldSpec("ProductID", GUID, "product_id"),
    FieldSpec("SKU", TEXT),
    FieldSpec("Quantity", DECIMAL, "quantity", 2),
    FieldSpec("DesiredQuantity", DECIMAL, "desired_quantity", 2),
    FieldSpec("MinimumQuantity", DECIMAL, "minimum_quantity", 2),
    FieldSpec("Version", INTEGER, "version"),
)

PRODUCTS_SAMPLE = (
    ",".join(spec.column for spec in PRODUCT_FIELDS)
    + "\n"
    + "11111111-1111-1111-1111-111111111111,USB-C Wall Charger 30W,,,25.00,27.50,41.99,TRUE,,,Black,1,0.00,5,"
    "FALSE,,,FALSE,0.00,FALSE,TRUE,A100,25.00,FALSE,Percentage,1,TRUE,,,1,,,\n"
)

INVENTORY_SAMPLE = (
    "LocationID,ProductID,SKU,Quantity,DesiredQuantity,MinimumQuantity,Version\n"
    "MIAMI,11111111-1111-1111-1111-111111111111,A100,12,20,5,3\n"
    "NYC,,B200,8,15,3,1\n"
)

SCHEMAS: dict[str, EntitySchema] = {
    PRODUCTS: EntitySchema(
        name=PRODUCTS,
        label="Products (Nova)",
        key_fields=("ProductID", "SKU"),
        fields=PRODUCT_FIELDS,
        sample=PRODUCTS_SAMPLE,
        warnings=(WarningRule("ProductMinPrice", "Min price exceeds markup price", _min_above_markup),),
    ),
    INVENTORY: EntitySchema(
        name=INVENTORY,
        label="Inventory (Nova)",
        key_fields=("LocationID", "ProductID", "SKU"),
        fields=INVENTORY_FIELDS,
        sample=INVENTORY_SAMPLE,
        warnings=(WarningRule("Quantity", "Quantity below minimum", _quantity_below_minimum),),
    ),
}


def get_schema(entity: str) -> EntitySchema:
    schema = SCHEMAS.get((entity or "").strip().lower())
    if schema is None:
        raise AppError(ErrorCatalog.UNKNOWN_ENTITY, details={"entity": entity, "supported": sorted(SCHEMAS)})
    return schema
