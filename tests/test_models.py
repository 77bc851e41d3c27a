import unittest

from media_preview_mcp.models import MetadataRecord, format_duration, format_file_size
from media_preview_mcp.platforms import Platform, QualityTier


class TestFormatDuration(unittest.TestCase):
    def test_pads_seconds(self):
        self.assertEqual(format_duration(0), "0:00")
        self.assertEqual(format_duration(65), "1:05")
        self.assertEqual(format_duration(59.9), "0:59")

    def test_minutes_are_not_wrapped(self):
        self.assertEqual(format_duration(3600), "60:00")

    def test_negative_clamped(self):
        self.assertEqual(format_duration(-5), "0:00")


class TestFormatFileSize(unittest.TestCase):
    def test_units(self):
        self.assertEqual(format_file_size(0), "0 Bytes")
        self.assertEqual(format_file_size(512), "512 Bytes")
        self.assertEqual(format_file_size(1536), "1.5 KB")
        self.assertEqual(format_file_size(25 * 1024 * 1024), "25 MB")
        self.assertEqual(format_file_size(1024 ** 3), "1 GB")

    def test_rounds_to_two_places(self):
        self.assertEqual(format_file_size(1234567), "1.18 MB")


class TestMetadataRecord(unittest.TestCase):
    def test_to_dict(self):
        record = MetadataRecord(
            platform=Platform.TIKTOK,
            identifier="123",
            title="Clip",
            thumbnail_url="https://example.com/123.jpg",
            duration="0:15",
            file_size="5 MB",
            available_qualities=(QualityTier.HD_720P, QualityTier.SD_480P),
            author="@123",
        )
        payload = record.to_dict()
        self.assertEqual(payload["platform"], "tiktok")
        self.assertEqual(payload["available_qualities"], ["720p", "480p"])
        self.assertEqual(payload["source"], "fallback")
