import tempfile
import unittest
from pathlib import Path

from media_preview_mcp.security import PathValidator, sanitize_filename


class TestPathValidator(unittest.TestCase):
    def test_ensure_within_allowed_allows_child(self):
        base = Path("/tmp/media_preview_mcp_test_base").resolve()
        validator = PathValidator([base])
        child = base / "a" / "b.mp4"
        resolved = validator.ensure_within_allowed(child)
        self.assertTrue(str(resolved).startswith(str(base)))

    def test_ensure_within_allowed_rejects_escape(self):
        base = Path("/tmp/media_preview_mcp_test_base").resolve()
        validator = PathValidator([base])
        with self.assertRaises(ValueError):
            validator.ensure_within_allowed(base / ".." / "elsewhere.mp4")

    def test_rejects_sibling_with_shared_prefix(self):
        base = Path("/tmp/media_preview_mcp_test_base").resolve()
        validator = PathValidator([base])
        with self.assertRaises(ValueError):
            validator.ensure_within_allowed(Path(f"{base}_other/x.mp4"))

    def test_write_bytes_creates_parents(self):
        with tempfile.TemporaryDirectory() as tmp:
            validator = PathValidator([Path(tmp)])
            written = validator.write_bytes(Path(tmp) / "sub" / "f.mp4", b"abc")
            self.assertEqual(written.read_bytes(), b"abc")


class TestSanitizeFilename(unittest.TestCase):
    def test_sanitize_filename_removes_separators(self):
        name = sanitize_filename("../a/b\\c?.mp4")
        self.assertNotIn("/", name)
        self.assertNotIn("\\", name)

    def test_sanitize_filename_fallback(self):
        self.assertEqual(sanitize_filename("///"), "download")

    def test_truncates(self):
        self.assertEqual(len(sanitize_filename("x" * 300, max_length=16)), 16)
