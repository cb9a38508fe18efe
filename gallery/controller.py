"""
Gallery state: the current image list, the viewer's liked ids and the four
user actions (load, upload, like toggle, delete).

Store failures never escape an action. They are logged and the action is
abandoned, leaving the previous state in place.
"""

from __future__ import annotations

import logging
import threading
from typing import BinaryIO, Iterable, Optional

from gallery.errors import GalleryError
from gallery.models import DEFAULT_IMAGES, ImageRecord, find_image, now_ms
from gallery.storage import ImageStore
from gallery.uploads import read_as_data_url, title_from_filename

logger = logging.getLogger(__name__)

UPLOADED_DESCRIPTION = "Uploaded image"
LOCAL_MODE_BANNER = (
    "Deploy to enable the database. Images are currently kept in local storage."
)


class GalleryController:
    def __init__(self, store: ImageStore, defaults: Iterable[ImageRecord] = DEFAULT_IMAGES):
        self.store = store
        self.images: list[ImageRecord] = list(defaults)
        self.liked: set[str] = set()
        self.selected_id: Optional[str] = None
        self.is_uploading = False
        self.upload_progress = 0
        self._lock = threading.RLock()

    @property
    def mode(self) -> str:
        return self.store.mode

    @property
    def banner(self) -> Optional[str]:
        return LOCAL_MODE_BANNER if self.mode == "local" else None

    @property
    def selected(self) -> Optional[ImageRecord]:
        if self.selected_id is None:
            return None
        return find_image(self.images, self.selected_id)

    def get(self, image_id: str) -> Optional[ImageRecord]:
        return find_image(self.images, image_id)

    def load(self) -> list[ImageRecord]:
        with self._lock:
            try:
                images = self.store.load_images()
                liked = self.store.load_liked()
            except GalleryError:
                logger.exception("Failed to load images")
                return self.images
            self.images = images
            self.liked = liked
            return self.images

    def _new_id(self) -> str:
        existing = {image.id for image in self.images}
        candidate = now_ms()
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def _set_progress(self, percent: int) -> None:
        self.upload_progress = percent

    def upload(
        self,
        stream: BinaryIO,
        filename: str,
        content_type: Optional[str] = None,
        size: Optional[int] = None,
    ) -> Optional[ImageRecord]:
        """Read ``stream`` into a new record and persist it; None on failure."""
        with self._lock:
            self.is_uploading = True
            self.upload_progress = 0
            try:
                url = read_as_data_url(
                    stream, content_type, size=size, on_progress=self._set_progress
                )
                record = ImageRecord(
                    id=self._new_id(),
                    url=url,
                    title=title_from_filename(filename),
                    description=UPLOADED_DESCRIPTION,
                    likes=0,
                    is_default=False,
                    uploaded_at=now_ms(),
                )
                self.images = self.store.add_image(self.images, record)
                logger.info("Uploaded %s as image %s", filename, record.id)
                return record
            except (GalleryError, OSError):
                logger.exception("Failed to save uploaded image %s", filename)
                return None
            finally:
                self.is_uploading = False
                self.upload_progress = 0

    def toggle_like(self, image_id: str) -> bool:
        """
        Flip the viewer's like on ``image_id`` and move its count by one.

        When the store rejects the new count the liked ids are restored, so
        membership keeps matching the persisted count.
        """
        with self._lock:
            image = find_image(self.images, image_id)
            if image is None:
                logger.warning("Cannot toggle like on unknown image %s", image_id)
                return False

            previous = set(self.liked)
            was_liked = image_id in previous
            liked = set(previous)
            if was_liked:
                liked.discard(image_id)
            else:
                liked.add(image_id)
            likes = max(0, image.likes - 1 if was_liked else image.likes + 1)
            self.liked = liked

            try:
                self.images = self.store.set_likes(self.images, image_id, likes, liked)
            except GalleryError:
                logger.exception("Failed to update likes for image %s", image_id)
                self.liked = previous
                return False
            return True

    def delete(self, image_id: str) -> bool:
        with self._lock:
            image = find_image(self.images, image_id)
            if image is None:
                return False
            if image.is_default:
                logger.info("Refusing to delete default image %s", image_id)
                return False
            try:
                self.images = self.store.delete_image(self.images, image_id)
            except GalleryError:
                logger.exception("Failed to delete image %s", image_id)
                return False
            if self.selected_id == image_id:
                self.selected_id = None
            return True

    def select(self, image_id: str) -> Optional[ImageRecord]:
        image = find_image(self.images, image_id)
        self.selected_id = image.id if image else None
        return image

    def close(self) -> None:
        self.selected_id = None

    def snapshot(self) -> dict:
        # Unlocked so an in-flight upload's progress stays visible.
        selected = self.selected
        return {
            "mode": self.mode,
            "banner": self.banner,
            "images": [image.as_dict() for image in self.images],
            "liked": sorted(self.liked),
            "selected": selected.as_dict() if selected else None,
            "is_uploading": self.is_uploading,
            "upload_progress": self.upload_progress,
        }
