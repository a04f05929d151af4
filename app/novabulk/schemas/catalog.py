from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, PlainSerializer


DecimalValue = Annotated[
    Decimal,
    PlainSerializer(lambda value: format(value, "f"), return_type=str, when_used="json"),
]


class ProductSummary(BaseModel):
    ProductID: UUID
    ProductName: str | None = None
    SKU: str | None = None
    ProductCostPrice: DecimalValue | None = None
    ProductMinPrice: DecimalValue | None = None
    ProductMarkupPrice: DecimalValue | None = None
    ProductIsAvailable: bool | None = None
    BarcodeNumber: str | None = None
    Color: str | None = None
    WholesalerID: int | None = None
    IsTracked: bool | None = None
    Version: int | None = None


class ProductListResponse(BaseModel):
    products: list[ProductSummary]


class ProductDetailResponse(BaseModel):
    product: dict


class InventoryItem(BaseModel):
    InventoryID: int
    LocationID: str
    ProductID: UUID
    Quantity: DecimalValue
    DesiredQuantity: DecimalValue
    MinimumQuantity: DecimalValue
    Version: int
    SKU: str | None = None
    ProductName: str | None = None


class InventoryListResponse(BaseModel):
    inventory: list[InventoryItem]


class InventoryDetailResponse(BaseModel):
    item: InventoryItem


class TransactionItem(BaseModel):
    TransactionID: int
    ProductID: UUID
    Quantity: DecimalValue
    Timestamp: datetime
    SrcLocationID: str | None = None
    DstLocationID: str | None = None
    EmployeeID: int | None = None
    Comment: str | None = None
    TransactionType: str
    TypeReferID: str | None = None
    CostPrice: DecimalValue | None = None
    Version: int | None = None
    SKU: str | None = None
    ProductName: str | None = None


class TransactionListResponse(BaseModel):
    transactions: list[TransactionItem]
