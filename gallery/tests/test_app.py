import unittest

from fastapi.testclient import TestClient

from gallery.app import create_app
from gallery.controller import GalleryController
from gallery.dependencies import get_controller
from gallery.kv import InMemoryKeyValueStore
from gallery.storage import LocalImageStore


class GalleryApiTests(unittest.TestCase):
    def setUp(self):
        app = create_app()
        self.controller = GalleryController(LocalImageStore(InMemoryKeyValueStore()))
        self.controller.load()
        app.dependency_overrides[get_controller] = lambda: self.controller
        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_gallery_starts_with_defaults(self):
        response = self.client.get("/api/gallery")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["mode"], "local")
        self.assertIsNotNone(payload["banner"])
        self.assertEqual(len(payload["images"]), 5)
        self.assertTrue(all(image["isDefault"] for image in payload["images"]))
        self.assertEqual(payload["liked"], [])

    def test_like_toggle(self):
        payload = self.client.post("/api/images/1/like").json()
        self.assertEqual(payload["images"][0]["likes"], 1)
        self.assertEqual(payload["liked"], ["1"])
        payload = self.client.post("/api/images/1/like").json()
        self.assertEqual(payload["images"][0]["likes"], 0)
        self.assertEqual(payload["liked"], [])

    def test_upload_and_delete(self):
        response = self.client.post(
            "/api/images",
            files={"file": ("sunset.jpg", b"\xff\xd8fake", "image/jpeg")},
        )
        self.assertEqual(response.status_code, 201)
        first = response.json()["images"][0]
        self.assertEqual(first["title"], "sunset")
        self.assertFalse(first["isDefault"])
        self.assertEqual(first["likes"], 0)

        image = self.client.get(f"/api/images/{first['id']}").json()
        self.assertTrue(image["url"].startswith("data:image/jpeg;base64,"))

        payload = self.client.delete(f"/api/images/{first['id']}").json()
        self.assertEqual(len(payload["images"]), 5)

    def test_upload_rejects_non_images(self):
        response = self.client.post(
            "/api/images",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        self.assertEqual(response.status_code, 415)
        self.assertEqual(len(self.controller.images), 5)

    def test_delete_default_is_silent(self):
        response = self.client.delete("/api/images/2")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([image["id"] for image in response.json()["images"]], ["1", "2", "3", "4", "5"])

    def test_unknown_image(self):
        self.assertEqual(self.client.get("/api/images/nope").status_code, 404)
        self.assertEqual(self.client.post("/api/images/nope/select").status_code, 404)

    def test_select_and_close(self):
        payload = self.client.post("/api/images/4/select").json()
        self.assertEqual(payload["selected"]["id"], "4")
        payload = self.client.post("/api/selection/close").json()
        self.assertIsNone(payload["selected"])

    def test_reload(self):
        response = self.client.post("/api/gallery/reload")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["images"]), 5)


if __name__ == "__main__":
    unittest.main()
