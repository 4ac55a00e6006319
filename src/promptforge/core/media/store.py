"""
Locally addressable handles for fetched media.

A handle plays the role of a browser object URL: the bytes stay in this
process and the UI fetches them through ``/v1/media/{id}`` until the handle
is released. The store is bounded; the oldest entry is evicted first.
"""

from __future__ import annotations

import uuid
from collections import OrderedDict
from dataclasses import dataclass

import structlog

from promptforge.common.errors import NotFoundError

logger = structlog.stdlib.get_logger()

HANDLE_PREFIX = "media/"


@dataclass(frozen=True)
class MediaBlob:
    data: bytes
    content_type: str


class MediaStore:
    def __init__(self, capacity: int = 32) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._blobs: OrderedDict[str, MediaBlob] = OrderedDict()

    def __len__(self) -> int:
        return len(self._blobs)

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, str) and self._media_id(handle) in self._blobs

    @staticmethod
    def _media_id(handle: str) -> str:
        return handle[len(HANDLE_PREFIX):] if handle.startswith(HANDLE_PREFIX) else handle

    def put(self, data: bytes, content_type: str) -> str:
        media_id = uuid.uuid4().hex
        self._blobs[media_id] = MediaBlob(data=data, content_type=content_type)
        while len(self._blobs) > self.capacity:
            evicted, _ = self._blobs.popitem(last=False)
            logger.debug("media.evicted", media_id=evicted)
        return f"{HANDLE_PREFIX}{media_id}"

    def get(self, handle: str) -> MediaBlob:
        blob = self._blobs.get(self._media_id(handle))
        if blob is None:
            raise NotFoundError(f"Media not found: {handle}")
        return blob

    def release(self, handle: str) -> None:
        if self._blobs.pop(self._media_id(handle), None) is None:
            raise NotFoundError(f"Media not found: {handle}")

    def clear(self) -> None:
        self._blobs.clear()
