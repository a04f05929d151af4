from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.novabulk.core.deps import require_account
from app.novabulk.schemas.bulk import EntitySchemaResponse
from app.novabulk.services.bulk_schemas import get_schema

router = APIRouter(dependencies=[Depends(require_account)])


@router.get("/api/schemas/{entity}", response_model=EntitySchemaResponse)
async def describe_schema(entity: str):
    return EntitySchemaResponse(**get_schema(entity).describe())


@router.get("/api/schemas/{entity}/sample.csv", response_class=PlainTextResponse)
async def sample_csv(entity: str):
    schema = get_schema(entity)
    return PlainTextResponse(
        schema.sample,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{schema.name}-sample.csv"'},
    )
