import asyncio
import tempfile
import unittest
from pathlib import Path

from media_preview_mcp.download import DownloadTrigger
from media_preview_mcp.errors import (
    InvalidFormatError,
    StaleResultError,
    UnsupportedQualityError,
)
from media_preview_mcp.platforms import Platform, QualityTier
from media_preview_mcp.resolver import MetadataResolver, MetadataSource, PrimaryMetadata
from media_preview_mcp.session import (
    STATUS_CANCELED,
    STATUS_COMPLETED,
    STATUS_SUPERSEDED,
    Notifier,
    PreviewSession,
)


class RecordingNotifier(Notifier):
    def __init__(self):
        self.successes = []
        self.errors = []

    def success(self, message):
        self.successes.append(message)

    def error(self, message):
        self.errors.append(message)


class GatedSource(MetadataSource):
    """Returns immediately except for ids starting with "slow"."""

    platform = Platform.YOUTUBE

    def __init__(self):
        super().__init__(lambda url, params=None: None)
        self.release = asyncio.Event()
        self.fetched = []

    async def fetch(self, identifier):
        self.fetched.append(identifier)
        if identifier.startswith("slow"):
            await self.release.wait()
        return PrimaryMetadata(
            title=f"Title {identifier}",
            thumbnail_url=f"https://img.test/{identifier}.jpg",
        )


async def settle():
    for _ in range(3):
        await asyncio.sleep(0)


class TestPreviewSession(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.source = GatedSource()
        self.notifier = RecordingNotifier()
        self.session = PreviewSession(
            MetadataResolver([self.source]),
            notifier=self.notifier,
        )

    async def test_submit_resolves_and_selects_default_quality(self):
        record = await self.session.submit("https://youtu.be/fast1")

        self.assertEqual(record.identifier, "fast1")
        self.assertEqual(record.title, "Title fast1")
        self.assertIs(self.session.record, record)
        self.assertEqual(self.session.current.status, STATUS_COMPLETED)
        self.assertIs(self.session.selected_quality, QualityTier.FHD_1080P)
        self.assertEqual(len(self.notifier.successes), 1)

    async def test_invalid_url_never_reaches_resolver(self):
        with self.assertRaises(InvalidFormatError):
            await self.session.submit("not a url")

        self.assertEqual(self.source.fetched, [])
        self.assertIsNone(self.session.current)
        self.assertEqual(len(self.notifier.errors), 1)

    async def test_newer_submission_wins(self):
        first = asyncio.create_task(self.session.submit("https://youtu.be/slow1"))
        await settle()
        first_request = self.session.current

        record = await self.session.submit("https://youtu.be/fast2")
        with self.assertRaises(StaleResultError):
            await first

        self.assertEqual(first_request.status, STATUS_SUPERSEDED)
        self.assertEqual(record.identifier, "fast2")
        self.assertEqual(self.session.record.identifier, "fast2")

    async def test_cancel_discards_in_flight_result(self):
        pending = asyncio.create_task(self.session.submit("https://youtu.be/slow3"))
        await settle()

        self.assertTrue(self.session.cancel())
        with self.assertRaises(StaleResultError):
            await pending

        self.assertEqual(self.session.current.status, STATUS_CANCELED)
        self.assertIsNone(self.session.record)
        self.assertFalse(self.session.cancel())

    async def test_platform_switch_drops_preview(self):
        await self.session.submit("https://youtu.be/fast4")
        self.session.select_platform("tiktok")

        self.assertIs(self.session.platform, Platform.TIKTOK)
        self.assertIsNone(self.session.record)
        self.assertIsNone(self.session.selected_quality)

        record = await self.session.submit(
            "https://www.tiktok.com/@user/video/7234567890"
        )
        self.assertEqual(record.source, "fallback")
        self.assertIs(self.session.selected_quality, QualityTier.HD_720P)

    async def test_select_quality_checks_record(self):
        await self.session.submit("https://youtu.be/fast5")
        self.assertIs(self.session.select_quality("audio"), QualityTier.AUDIO)
        with self.assertRaises(UnsupportedQualityError):
            self.session.select_quality("8k")
        self.assertIs(self.session.selected_quality, QualityTier.AUDIO)

    async def test_select_quality_rejects_tier_platform_lacks(self):
        self.session.select_platform("tiktok")
        await self.session.submit("https://www.tiktok.com/@user/video/7234567890")
        with self.assertRaises(UnsupportedQualityError):
            self.session.select_quality("1080p")
        self.assertIs(self.session.selected_quality, QualityTier.HD_720P)

    async def test_invalid_url_drops_previous_preview(self):
        await self.session.submit("https://youtu.be/fast7")
        self.assertIsNotNone(self.session.record)

        with self.assertRaises(InvalidFormatError):
            await self.session.submit("not a url")

        self.assertIsNone(self.session.record)
        self.assertIsNone(self.session.current)
        self.assertIsNone(self.session.selected_quality)

    async def test_invalid_url_supersedes_in_flight_request(self):
        pending = asyncio.create_task(self.session.submit("https://youtu.be/slow8"))
        await settle()
        in_flight = self.session.current

        with self.assertRaises(InvalidFormatError):
            await self.session.submit("https://example.com/?v=youtu.be/x")
        with self.assertRaises(StaleResultError):
            await pending

        self.assertEqual(in_flight.status, STATUS_SUPERSEDED)
        self.assertIsNone(self.session.record)

    async def test_status_dict(self):
        await self.session.submit("https://youtu.be/fast6")
        status = self.session.current.to_status_dict()
        self.assertTrue(status["is_done"])
        self.assertEqual(status["metadata"]["id"], "fast6")
        self.assertIsNotNone(status["completed_at"])


class TestPreviewSessionDownload(unittest.IsolatedAsyncioTestCase):
    async def test_download_uses_selected_quality(self):
        notifier = RecordingNotifier()
        with tempfile.TemporaryDirectory() as tmp:
            trigger = DownloadTrigger(
                strategy="local",
                download_dir=Path(tmp),
                redirect_templates={},
            )
            session = PreviewSession(
                MetadataResolver(),
                download_trigger=trigger,
                notifier=notifier,
                platform="instagram",
            )
            await session.submit("https://www.instagram.com/p/CxYz123AbC/")
            result = session.download()

            self.assertEqual(result.quality, QualityTier.FHD_1080P)
            self.assertTrue(Path(result.file_path).is_file())
            self.assertIn("Download completed successfully!", notifier.successes)

    async def test_download_requires_preview(self):
        session = PreviewSession(MetadataResolver())
        with self.assertRaises(RuntimeError):
            session.download()


class TestNotifierContract(unittest.TestCase):
    def test_notifier_requires_both_methods(self):
        class SuccessOnly(Notifier):
            def success(self, message):
                pass

        with self.assertRaises(TypeError):
            Notifier()
        with self.assertRaises(TypeError):
            SuccessOnly()
