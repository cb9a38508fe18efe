import io
import unittest

from gallery.uploads import read_as_data_url, title_from_filename


class UploadHelpersTests(unittest.TestCase):
    def test_title_strips_last_extension(self):
        self.assertEqual(title_from_filename("sunset.jpg"), "sunset")
        self.assertEqual(title_from_filename("archive.tar.gz"), "archive.tar")
        self.assertEqual(title_from_filename("no_extension"), "no_extension")

    def test_data_url(self):
        url = read_as_data_url(io.BytesIO(b"abc"), "image/png")
        self.assertEqual(url, "data:image/png;base64,YWJj")

    def test_missing_content_type(self):
        url = read_as_data_url(io.BytesIO(b""), None)
        self.assertEqual(url, "data:application/octet-stream;base64,")

    def test_progress_in_whole_percent(self):
        seen = []
        read_as_data_url(
            io.BytesIO(b"x" * 10),
            "image/png",
            size=10,
            on_progress=seen.append,
            chunk_size=4,
        )
        self.assertEqual(seen, [40, 80, 100])

    def test_no_progress_without_size(self):
        seen = []
        read_as_data_url(io.BytesIO(b"x" * 10), "image/png", on_progress=seen.append)
        self.assertEqual(seen, [])


if __name__ == "__main__":
    unittest.main()
