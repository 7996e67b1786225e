# stockmeta/api/v1/endpoints/analyze.py
import logging

from fastapi import APIRouter, Depends

from stockmeta.core.deps import get_analyzer
from stockmeta.schemas.metadata import AnalyzeRequest, ErrorOut, MetadataRecord
from stockmeta.services.analyzer import MetadataAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analyze"])


@router.post(
    "/analyze",
    response_model=MetadataRecord,
    summary="Generate Adobe Stock metadata for an image",
    responses={
        400: {"model": ErrorOut, "description": "Missing image"},
        413: {"model": ErrorOut, "description": "Image too large"},
        500: {"model": ErrorOut, "description": "Server misconfigured"},
        502: {"model": ErrorOut, "description": "Model call failed or returned unusable output"},
    },
)
async def analyze_image(
    payload: AnalyzeRequest,
    analyzer: MetadataAnalyzer = Depends(get_analyzer),
):
    """
    上傳 base64 影像，回傳 {title, keywords, category}。
    - **imageBase64**: 必填；可含 data:image/...;base64, 前綴
    - **filename**: 選填，只作為提示詞的線索
    """
    record = await analyzer.analyze(payload.image_base64, payload.filename)
    logger.info("Metadata generated: keywords=%d category=%d", len(record.keywords), record.category)
    return record
