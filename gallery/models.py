"""
Domain records for the gallery.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Optional


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ImageRecord:
    id: str
    url: str
    title: str
    description: str = ""
    likes: int = 0
    is_default: bool = False
    uploaded_at: Optional[int] = None

    def as_dict(self) -> dict:
        """Camel-cased form used on the wire and in the local store."""
        payload = {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "likes": self.likes,
            "isDefault": self.is_default,
        }
        if self.uploaded_at is not None:
            payload["uploadedAt"] = self.uploaded_at
        return payload

    @classmethod
    def from_dict(cls, payload: dict) -> "ImageRecord":
        uploaded_at = payload.get("uploadedAt")
        return cls(
            id=str(payload["id"]),
            url=payload.get("url", ""),
            title=payload.get("title", ""),
            description=payload.get("description") or "",
            likes=max(0, int(payload.get("likes") or 0)),
            is_default=bool(payload.get("isDefault", False)),
            uploaded_at=int(uploaded_at) if uploaded_at is not None else None,
        )

    def with_likes(self, likes: int) -> "ImageRecord":
        return replace(self, likes=max(0, likes))


DEFAULT_IMAGES: tuple[ImageRecord, ...] = (
    ImageRecord("1", "/assets/asset.png", "Gallery image 1", "A beautiful piece", 0, True),
    ImageRecord("2", "/assets/asset_1.png", "Gallery image 2", "A wonderful landscape", 0, True),
    ImageRecord("3", "/assets/asset_2.png", "Gallery image 3", "An artistic moment", 0, True),
    ImageRecord("4", "/assets/asset_3.png", "Gallery image 4", "A moving scene", 0, True),
    ImageRecord("5", "/assets/asset_4.png", "Gallery image 5", "A special memory", 0, True),
)


def find_image(images: list[ImageRecord], image_id: str) -> Optional[ImageRecord]:
    for image in images:
        if image.id == image_id:
            return image
    return None
