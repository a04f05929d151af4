from fastapi import APIRouter, Depends, Query

from app.novabulk.core.deps import require_account
from app.novabulk.db.session import get_db
from app.novabulk.schemas.catalog import InventoryDetailResponse, InventoryListResponse
from app.novabulk.services.catalog import CatalogService

router = APIRouter(dependencies=[Depends(require_account)])


@router.get("/api/inventory", response_model=InventoryListResponse)
async def list_inventory(
    location_id: str | None = Query(default=None, alias="locationId"),
    product_id: str | None = Query(default=None, alias="productId"),
    db=Depends(get_db),
):
    return InventoryListResponse(
        inventory=CatalogService(db).list_inventory(location_id=location_id, product_id=product_id)
    )


@router.get("/api/inventory/{location_id}/{product_id}", response_model=InventoryDetailResponse)
async def get_inventory_item(location_id: str, product_id: str, db=Depends(get_db)):
    return InventoryDetailResponse(item=CatalogService(db).get_inventory(location_id, product_id))
