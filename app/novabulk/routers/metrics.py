from fastapi import APIRouter, Depends, Response

from app.novabulk.core.deps import require_account
from app.novabulk.core.metrics import metrics

router = APIRouter(dependencies=[Depends(require_account)])


@router.get("/api/ops/metrics")
def get_metrics():
    snapshot = metrics.render()
    return Response(content=snapshot.content, media_type=snapshot.content_type)
