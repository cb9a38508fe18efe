"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from gallery.config import Settings, get_settings
from gallery.controller import GalleryController
from gallery.gateway import DavinciClient
from gallery.kv import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
)
from gallery.storage import ImageStore, LocalImageStore, RemoteImageStore

logger = logging.getLogger(__name__)

_controller: GalleryController | None = None


def build_key_value_store(settings: Settings) -> KeyValueStore:
    if settings.redis_url:
        return RedisKeyValueStore(url=settings.redis_url)
    if settings.local_store_path:
        return JsonFileKeyValueStore(path=settings.local_store_path)
    return InMemoryKeyValueStore()


def build_image_store(settings: Settings) -> ImageStore:
    """
    Pick the authoritative store once from configuration.

    The remote store is used only when an app id is configured; the check
    needs no network round trip.
    """
    client = DavinciClient.from_settings(settings)
    if client.is_configured:
        logger.info("Using remote collection %s at %s", settings.collection, settings.api_url)
        return RemoteImageStore(client.collection(settings.collection))

    kv = build_key_value_store(settings)
    logger.info("No app id configured; using local %s", kv.__class__.__name__)
    return LocalImageStore(kv)


def get_controller() -> GalleryController:
    """
    Return a singleton controller so gallery state persists across requests.
    """
    global _controller
    if _controller:
        return _controller

    controller = GalleryController(build_image_store(get_settings()))
    controller.load()
    _controller = controller
    return _controller


def reset_controller() -> None:
    """Forget the singleton (useful in tests)."""
    global _controller
    _controller = None
