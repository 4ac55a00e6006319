"""Fetched media, addressed by the handle returned from video generation."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import Response

from promptforge.api.deps import CurrentUser, Media

router = APIRouter(prefix="/media", tags=["Media"])


@router.get("/{media_id}", summary="Download media", response_class=Response)
async def get_media(media_id: str, media: Media, user: CurrentUser) -> Response:
    blob = media.get(media_id)
    return Response(content=blob.data, media_type=blob.content_type)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Release media")
async def release_media(media_id: str, media: Media, user: CurrentUser) -> None:
    media.release(media_id)
