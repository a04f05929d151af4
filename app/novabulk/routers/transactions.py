from fastapi import APIRouter, Depends, Query

from app.novabulk.core.deps import require_account
from app.novabulk.db.session import get_db
from app.novabulk.schemas.catalog import TransactionListResponse
from app.novabulk.services.catalog import CatalogService

router = APIRouter(dependencies=[Depends(require_account)])


@router.get("/api/transactions", response_model=TransactionListResponse)
async def list_transactions(
    product_id: str | None = Query(default=None, alias="productId"),
    limit: int = Query(default=50, ge=1, le=500),
    db=Depends(get_db),
):
    return TransactionListResponse(
        transactions=CatalogService(db).list_transactions(product_id=product_id, limit=limit)
    )


@router.get("/api/transactions/product/{product_id}", response_model=TransactionListResponse)
async def list_product_transactions(
    product_id: str,
    limit: int = Query(default=50, ge=1, le=500),
    db=Depends(get_db),
):
    return TransactionListResponse(
        transactions=CatalogService(db).list_transactions(product_id=product_id, limit=limit)
    )
