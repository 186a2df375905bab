"""Facebook publishing endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...publishing import PublishResult, Publisher
from ..deps import get_publisher

router = APIRouter()


class PostRequest(BaseModel):
    article_id: Optional[int] = None


class BulkPostRequest(BaseModel):
    article_ids: List[int] = Field(default_factory=list)


def _result_body(result: PublishResult) -> dict:
    body = {"success": result.success, "log_id": result.log_id}
    if result.message:
        body["message"] = result.message
    if result.error:
        body["error"] = result.error
    return body


@router.post("/post-to-facebook")
def post_to_facebook(
    request: Optional[PostRequest] = Body(None),
    publisher: Publisher = Depends(get_publisher),
):
    """Post one article; replays after a success are no-ops."""
    if request is None or request.article_id is None:
        return JSONResponse(status_code=400, content={"error": "article_id is required"})

    result = publisher.publish(request.article_id)
    if not result.success:
        return JSONResponse(status_code=500, content=_result_body(result))
    return _result_body(result)


@router.post("/post-to-facebook/bulk")
def post_many_to_facebook(
    request: BulkPostRequest,
    publisher: Publisher = Depends(get_publisher),
):
    results = publisher.publish_many(request.article_ids)
    return {"results": [{"article_id": r.article_id, **_result_body(r)} for r in results]}
