from fastapi import APIRouter, Depends

from ..dependencies import get_search_service, require_token
from ..models import SearchRequest, SearchResponse
from ..search.service import SearchService

router = APIRouter(prefix="/search", tags=["search"], dependencies=[Depends(require_token)])


@router.post("/duckduckgo", response_model=SearchResponse, response_model_exclude_none=True)
async def search_duckduckgo(
    body: SearchRequest,
    service: SearchService = Depends(get_search_service),
):
    """Scraped DuckDuckGo search, cached and throttled."""
    outcome = await service.search_duckduckgo(body.query)
    return SearchResponse(results=outcome.results, cached=outcome.cached or None)


@router.post("/google", response_model=SearchResponse, response_model_exclude_none=True)
async def search_google(
    body: SearchRequest,
    service: SearchService = Depends(get_search_service),
):
    """Google search through the Oxylabs SERP API."""
    outcome = await service.search_google(body.query)
    return SearchResponse(results=outcome.results, cached=outcome.cached or None)
