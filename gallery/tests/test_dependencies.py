import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from gallery import dependencies
from gallery.config import Settings
from gallery.kv import InMemoryKeyValueStore, JsonFileKeyValueStore, RedisKeyValueStore
from gallery.storage import LocalImageStore, RemoteImageStore


class BuildImageStoreTests(unittest.TestCase):
    def test_app_id_selects_remote_store(self):
        settings = Settings(app_id="app-1", collection="photos")
        store = dependencies.build_image_store(settings)
        self.assertIsInstance(store, RemoteImageStore)
        self.assertEqual(store.mode, "remote")
        self.assertEqual(store.collection.name, "photos")

    def test_missing_app_id_selects_local_store(self):
        store = dependencies.build_image_store(Settings(app_id=None))
        self.assertIsInstance(store, LocalImageStore)
        self.assertIsInstance(store.kv, InMemoryKeyValueStore)

    def test_local_store_path_uses_json_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = str(Path(tmp) / "gallery.json")
            store = dependencies.build_image_store(
                Settings(app_id="", local_store_path=path)
            )
            self.assertIsInstance(store.kv, JsonFileKeyValueStore)
            self.assertEqual(str(store.kv.path), path)

    @patch("gallery.kv.redis.Redis.from_url")
    def test_redis_url_wins_for_local_store(self, _from_url):
        settings = Settings(app_id=None, redis_url="redis://localhost:6379/0")
        kv = dependencies.build_key_value_store(settings)
        self.assertIsInstance(kv, RedisKeyValueStore)


class GetControllerTests(unittest.TestCase):
    def setUp(self):
        dependencies.reset_controller()
        self.addCleanup(dependencies.reset_controller)

    @patch("gallery.dependencies.get_settings")
    def test_controller_is_built_once_and_loaded(self, mock_settings):
        mock_settings.return_value = Settings(app_id=None)
        first = dependencies.get_controller()
        second = dependencies.get_controller()
        self.assertIs(first, second)
        self.assertEqual(first.mode, "local")
        self.assertEqual(len(first.images), 5)
        mock_settings.assert_called_once()


if __name__ == "__main__":
    unittest.main()
