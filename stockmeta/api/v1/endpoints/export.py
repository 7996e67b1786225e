# stockmeta/api/v1/endpoints/export.py
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from stockmeta.core.deps import get_policy
from stockmeta.schemas.metadata import CsvExportRequest
from stockmeta.services.csv_export import render_adobe_csv
from stockmeta.services.normalizer import NormalizationPolicy

router = APIRouter()

CSV_FILENAME = "adobe_stock_metadata.csv"


@router.post("/", summary="Render Adobe Stock CSV", response_class=Response)
async def export_csv(
    payload: CsvExportRequest,
    policy: NormalizationPolicy = Depends(get_policy),
):
    body = render_adobe_csv(payload.items, policy)
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )
