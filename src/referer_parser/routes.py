"""
HTTP routes for referer classification.

Mount the router in an existing FastAPI app:

    app.include_router(create_classify_router(parser), prefix="/referers")
"""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from .parser import Parser


class ClassifyResponse(BaseModel):
    """Classification result; medium is None when the URL is not a referer."""

    medium: str | None = None
    source: str | None = None
    search_term: str | None = None


def create_classify_router(parser: Parser) -> APIRouter:
    """Create a router exposing GET /classify for the given parser."""
    router = APIRouter()

    @router.get("/classify", response_model=ClassifyResponse)
    async def classify(
        referer: str = Query("", description="Referer URL to classify"),
        page: str | None = Query(None, description="Page host or page URL"),
    ) -> ClassifyResponse:
        result = parser.parse(referer, page)
        if result is None:
            return ClassifyResponse()
        return ClassifyResponse(**result.to_dict())

    return router
