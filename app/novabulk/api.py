from fastapi import APIRouter

from app.novabulk.core.config import settings
from app.novabulk.routers.audit import router as audit_router
from app.novabulk.routers.auth import router as auth_router
from app.novabulk.routers.bulk import router as bulk_router
from app.novabulk.routers.health import router as health_router
from app.novabulk.routers.inventory import router as inventory_router
from app.novabulk.routers.metrics import router as metrics_router
from app.novabulk.routers.products import router as products_router
from app.novabulk.routers.schemas import router as schemas_router
from app.novabulk.routers.transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["ops"])
api_router.include_router(auth_router, prefix="/api/auth", tags=["auth"])
api_router.include_router(schemas_router, tags=["schemas"])
api_router.include_router(products_router, tags=["products"])
api_router.include_router(inventory_router, tags=["inventory"])
api_router.include_router(transactions_router, tags=["transactions"])
api_router.include_router(audit_router, tags=["audit"])
api_router.include_router(bulk_router, tags=["bulk"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
