from fastapi import APIRouter, Depends, Query

from app.novabulk.core.deps import require_account
from app.novabulk.db.session import get_db
from app.novabulk.schemas.catalog import ProductDetailResponse, ProductListResponse
from app.novabulk.services.catalog import CatalogService

router = APIRouter(dependencies=[Depends(require_account)])


@router.get("/api/products", response_model=ProductListResponse)
async def list_products(
    sku: str | None = Query(default=None),
    product_id: str | None = Query(default=None, alias="productId"),
    db=Depends(get_db),
):
    return ProductListResponse(products=CatalogService(db).list_products(sku=sku, product_id=product_id))


@router.get("/api/products/{id_type}/{identifier}", response_model=ProductDetailResponse)
async def get_product(id_type: str, identifier: str, db=Depends(get_db)):
    return ProductDetailResponse(product=CatalogService(db).get_product(id_type, identifier))
