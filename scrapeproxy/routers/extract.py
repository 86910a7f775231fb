from fastapi import APIRouter, Depends

from ..dependencies import get_extraction_engine, require_token
from ..extract.engine import ExtractionEngine
from ..models import (
    BatchExtractRequest,
    BatchExtractResponse,
    ExtractionResult,
    ExtractRequest,
)

router = APIRouter(tags=["extract"], dependencies=[Depends(require_token)])


@router.post("/extract", response_model=ExtractionResult)
async def extract(
    body: ExtractRequest,
    engine: ExtractionEngine = Depends(get_extraction_engine),
):
    """Locate an excerpt on one page; falls back to the browser when plain HTTP fails."""
    return await engine.extract(
        body.url,
        body.excerpt,
        body.chars_before,
        body.chars_after,
        body.user_id,
    )


@router.post("/extract-batch", response_model=BatchExtractResponse)
async def extract_batch(
    body: BatchExtractRequest,
    engine: ExtractionEngine = Depends(get_extraction_engine),
):
    """HTTP-only extraction over many pages; failures are left out of the results."""
    results = await engine.extract_batch(body.items, body.chars_before, body.chars_after)
    return BatchExtractResponse(results=results)
