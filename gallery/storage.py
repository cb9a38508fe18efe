"""
Storage abstraction for gallery images: remote Davinci DB or local key-value store.

Exactly one implementation backs a controller for its whole lifetime; see
``gallery.dependencies`` for how it is chosen.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Iterable, Optional, Protocol

from gallery.errors import LocalStoreError, TransportError
from gallery.gateway import Collection
from gallery.kv import KeyValueStore
from gallery.models import DEFAULT_IMAGES, ImageRecord, now_ms

logger = logging.getLogger(__name__)

IMAGES_KEY = "gallery-images"
LIKES_KEY = "gallery-likes"


class ImageStore(Protocol):
    """
    Operations the controller needs from its authoritative store.

    Mutations receive the controller's current list and return the new one.
    """

    mode: str

    def load_images(self) -> list[ImageRecord]:
        ...

    def load_liked(self) -> set[str]:
        ...

    def add_image(self, images: list[ImageRecord], record: ImageRecord) -> list[ImageRecord]:
        ...

    def set_likes(
        self,
        images: list[ImageRecord],
        image_id: str,
        likes: int,
        liked: set[str],
    ) -> list[ImageRecord]:
        ...

    def delete_image(self, images: list[ImageRecord], image_id: str) -> list[ImageRecord]:
        ...


class RemoteImageStore:
    """Routes every call through a Davinci collection and reloads afterwards."""

    mode = "remote"
    order_options = {"orderBy": "uploadedAt", "orderDirection": "desc"}

    def __init__(self, collection: Collection, defaults: Iterable[ImageRecord] = DEFAULT_IMAGES):
        self.collection = collection
        self.defaults = tuple(defaults)

    def _decode_rows(self, rows: list) -> list[ImageRecord]:
        try:
            return [ImageRecord.from_dict(row) for row in rows]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise TransportError(
                f"Collection {self.collection.name} returned a malformed record"
            ) from exc

    def load_images(self) -> list[ImageRecord]:
        rows = self.collection.find({}, self.order_options)
        if rows:
            return self._decode_rows(rows)

        stamp = now_ms()
        seeded = [replace(image, uploaded_at=stamp) for image in self.defaults]
        self.collection.add_many([image.as_dict() for image in seeded])
        logger.info(
            "Seeded empty collection %s with %d default images",
            self.collection.name,
            len(seeded),
        )
        return seeded

    def load_liked(self) -> set[str]:
        # Likes by this viewer are not stored remotely.
        return set()

    def add_image(self, images: list[ImageRecord], record: ImageRecord) -> list[ImageRecord]:
        self.collection.add(record.as_dict())
        return self.load_images()

    def set_likes(
        self,
        images: list[ImageRecord],
        image_id: str,
        likes: int,
        liked: set[str],
    ) -> list[ImageRecord]:
        self.collection.update_by_id(image_id, {"likes": likes})
        return self.load_images()

    def delete_image(self, images: list[ImageRecord], image_id: str) -> list[ImageRecord]:
        self.collection.delete_by_id(image_id)
        return self.load_images()


class LocalImageStore:
    """
    Keeps the whole list and the liked ids as two JSON strings.

    Every mutation rewrites the affected entries in full.
    """

    mode = "local"

    def __init__(
        self,
        kv: KeyValueStore,
        defaults: Iterable[ImageRecord] = DEFAULT_IMAGES,
        *,
        images_key: str = IMAGES_KEY,
        likes_key: str = LIKES_KEY,
    ):
        self.kv = kv
        self.defaults = tuple(defaults)
        self.images_key = images_key
        self.likes_key = likes_key

    def _read_json(self, key: str) -> Optional[list]:
        raw = self.kv.get(key)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError as exc:
            raise LocalStoreError(f"{key} is not valid JSON") from exc
        if not isinstance(value, list):
            raise LocalStoreError(f"{key} does not hold a JSON array")
        return value

    def _decode_images(self, rows: list) -> list[ImageRecord]:
        try:
            return [ImageRecord.from_dict(row) for row in rows]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise LocalStoreError(f"{self.images_key} holds a malformed record") from exc

    def load_images(self) -> list[ImageRecord]:
        try:
            rows = self._read_json(self.images_key)
            if rows is not None:
                return self._decode_images(rows)
        except LocalStoreError as exc:
            logger.warning("Ignoring stored images: %s", exc)
        return list(self.defaults)

    def load_liked(self) -> set[str]:
        try:
            ids = self._read_json(self.likes_key)
        except LocalStoreError as exc:
            logger.warning("Ignoring stored likes: %s", exc)
            return set()
        return {str(image_id) for image_id in ids or []}

    def save_images(self, images: list[ImageRecord]) -> None:
        payload = json.dumps([image.as_dict() for image in images], ensure_ascii=False)
        self.kv.set(self.images_key, payload)

    def save_liked(self, liked: set[str]) -> None:
        self.kv.set(self.likes_key, json.dumps(sorted(liked)))

    def add_image(self, images: list[ImageRecord], record: ImageRecord) -> list[ImageRecord]:
        updated = [record, *images]
        self.save_images(updated)
        return updated

    def set_likes(
        self,
        images: list[ImageRecord],
        image_id: str,
        likes: int,
        liked: set[str],
    ) -> list[ImageRecord]:
        updated = [
            image.with_likes(likes) if image.id == image_id else image
            for image in images
        ]
        self.save_images(updated)
        try:
            self.save_liked(liked)
        except LocalStoreError:
            # Put the old counts back so disk matches the unchanged liked ids.
            try:
                self.save_images(images)
            except LocalStoreError:
                logger.exception("Could not restore %s", self.images_key)
            raise
        return updated

    def delete_image(self, images: list[ImageRecord], image_id: str) -> list[ImageRecord]:
        updated = [image for image in images if image.id != image_id]
        self.save_images(updated)
        return updated
