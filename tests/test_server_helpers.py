import tempfile
import unittest
from pathlib import Path

from media_preview_mcp.download import DownloadTrigger
from media_preview_mcp.errors import InvalidFormatError
from media_preview_mcp.resolver import MetadataResolver
from media_preview_mcp.server import (
    download_payload,
    error_payload,
    get_metadata_payload,
    list_platform_profiles,
)


class TestErrorPayload(unittest.TestCase):
    def test_invalid_format(self):
        payload = error_payload(InvalidFormatError("x", "youtube"), url="x")
        self.assertEqual(payload["error_type"], "invalid_format")
        self.assertEqual(payload["url"], "x")

    def test_generic(self):
        self.assertEqual(error_payload(ValueError("bad"))["error_type"], "error")


class TestListPlatforms(unittest.TestCase):
    def test_lists_three_platforms(self):
        platforms = list_platform_profiles()["platforms"]
        self.assertEqual(
            [p["platform"] for p in platforms],
            ["youtube", "instagram", "tiktok"],
        )
        tiktok = platforms[2]
        self.assertEqual(
            [q["value"] for q in tiktok["qualities"]],
            ["720p", "480p", "360p"],
        )


class TestGetMetadataPayload(unittest.IsolatedAsyncioTestCase):
    async def test_invalid_url(self):
        payload = await get_metadata_payload(MetadataResolver(), "not a url", "youtube")
        self.assertEqual(payload["error_type"], "invalid_format")

    async def test_unsupported_platform(self):
        payload = await get_metadata_payload(
            MetadataResolver(),
            "https://vimeo.com/1",
            "vimeo",
        )
        self.assertEqual(payload["error_type"], "unsupported_platform")

    async def test_fallback_payload(self):
        payload = await get_metadata_payload(
            MetadataResolver(),
            "https://youtu.be/dQw4w9WgXcQ",
            "youtube",
        )
        self.assertEqual(payload["id"], "dQw4w9WgXcQ")
        self.assertEqual(payload["url"], "https://youtu.be/dQw4w9WgXcQ")
        self.assertIn("dQw4w9WgXcQ", payload["thumbnail"])
        self.assertEqual(
            payload["available_qualities"],
            ["4k", "1080p", "720p", "480p", "360p", "audio"],
        )


class TestDownloadPayload(unittest.TestCase):
    def test_quality_error_and_success(self):
        with tempfile.TemporaryDirectory() as tmp:
            trigger = DownloadTrigger(
                strategy="local",
                download_dir=Path(tmp),
                redirect_templates={},
            )
            url = "https://www.tiktok.com/@user/video/7234567890"

            failed = download_payload(trigger, url, "tiktok", "1080p")
            self.assertEqual(failed["error_type"], "unsupported_quality")

            payload = download_payload(trigger, url, "tiktok", "360p")
            self.assertEqual(payload["id"], "7234567890")
            self.assertEqual(payload["file_name"], "tiktok_7234567890_360p.mp4")
            self.assertEqual(payload["url"], url)
