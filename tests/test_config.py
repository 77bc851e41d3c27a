import os
import unittest
from unittest import mock

from media_preview_mcp.config import Settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.primary_platforms, ["youtube"])
        self.assertEqual(settings.download_strategy, "local")
        self.assertEqual(settings.synthetic_file_bytes, 1024)
        self.assertEqual(
            set(settings.redirect_templates),
            {"youtube", "instagram", "tiktok"},
        )

    def test_environment_overrides(self):
        env = {
            "MEDIA_PREVIEW_DOWNLOAD_STRATEGY": "redirect",
            "MEDIA_PREVIEW_REQUEST_TIMEOUT": "2.5",
            "MEDIA_PREVIEW_PRIMARY_PLATFORMS": '["youtube", "tiktok"]',
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.download_strategy, "redirect")
        self.assertEqual(settings.request_timeout, 2.5)
        self.assertEqual(settings.primary_platforms, ["youtube", "tiktok"])
