"""Moderation and view recording endpoints."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel

from ...moderation import ModerationResult, ModerationService
from ..deps import get_moderation

router = APIRouter()


class PublishRequest(BaseModel):
    category_id: Optional[int] = None
    post_to_facebook: bool = True


class ViewRequest(BaseModel):
    ip_hash: Optional[str] = None


def _moderation_body(result: ModerationResult) -> dict:
    article = result.article
    body = {
        "id": article.id,
        "slug": article.slug,
        "status": article.status.value,
        "publish_date": article.publish_date.isoformat() if article.publish_date else None,
        "category_id": article.category_id,
    }
    if result.facebook is not None:
        body["facebook"] = {
            "success": result.facebook.success,
            "log_id": result.facebook.log_id,
            "error": result.facebook.error,
        }
    return body


@router.post("/{article_id}/publish")
def publish_article(
    article_id: int,
    request: Optional[PublishRequest] = Body(None),
    moderation: ModerationService = Depends(get_moderation),
):
    request = request or PublishRequest()
    result = moderation.publish(
        article_id,
        category_id=request.category_id,
        post_to_facebook=request.post_to_facebook,
    )
    return _moderation_body(result)


@router.post("/{article_id}/reject")
def reject_article(article_id: int, moderation: ModerationService = Depends(get_moderation)):
    return _moderation_body(moderation.reject(article_id))


@router.post("/{article_id}/views")
def record_view(
    article_id: int,
    http_request: Request,
    request: Optional[ViewRequest] = Body(None),
    moderation: ModerationService = Depends(get_moderation),
):
    count = moderation.record_view(
        article_id,
        ip_hash=request.ip_hash if request else None,
        user_agent=http_request.headers.get("user-agent"),
    )
    return {"article_id": article_id, "view_count": count}
