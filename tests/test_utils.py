"""
Tests for utilities and the data model
"""

import os
import tempfile
import time
import unittest
from pathlib import Path

from doc_capture.models import (
    CaptureResult,
    PageImageRef,
    ResultCode,
    ResultFormat,
    ScannerMode,
    ScannerOptions,
    ScanOutcome,
    ScanRequest,
)
from doc_capture.utils import (
    current_millis,
    ensure_directory,
    get_system_info,
    path_to_uri,
    uri_to_path,
)


class TestUtils(unittest.TestCase):
    """Test cases for utility functions"""

    def test_ensure_directory(self):
        """Test the ensure_directory function"""
        with tempfile.TemporaryDirectory() as tmpdir:
            test_dir = os.path.join(tmpdir, "test_dir")

            # Directory should not exist yet
            self.assertFalse(os.path.exists(test_dir))

            # Create the directory
            ensure_directory(test_dir)

            # Directory should now exist
            self.assertTrue(os.path.exists(test_dir))

            # Calling again should not raise an error
            ensure_directory(test_dir)

    def test_get_system_info(self):
        """Test the get_system_info function"""
        info = get_system_info()

        # Verify that the required keys are present
        self.assertIn("platform", info)
        self.assertIn("python_version", info)
        self.assertIn("architecture", info)
        self.assertIn("is_macos", info)

        # Values should be non-empty
        self.assertTrue(info["platform"])
        self.assertTrue(info["python_version"])

    def test_current_millis(self):
        before = int(time.time() * 1000)
        millis = current_millis()
        after = int(time.time() * 1000)

        self.assertLessEqual(before - 1, millis)
        self.assertLessEqual(millis, after + 1)

    def test_file_uri_conversion(self):
        """Paths with spaces and percent signs survive the URI conversion"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "my scan 100%.pdf"
            uri = path_to_uri(path)

            self.assertTrue(uri.startswith("file://"))
            self.assertNotIn(" ", uri)
            self.assertEqual(uri_to_path(uri), path.resolve())

    def test_uri_to_path_rejects_other_schemes(self):
        with self.assertRaises(ValueError):
            uri_to_path("https://example.com/scan.pdf")


class TestModels(unittest.TestCase):
    """Test cases for the data model"""

    def test_default_options(self):
        """Defaults match a full-featured ten page scan with JPEG and PDF output"""
        options = ScannerOptions()

        self.assertIs(options.mode, ScannerMode.FULL)
        self.assertTrue(options.allow_gallery_import)
        self.assertEqual(options.page_limit, 10)
        self.assertEqual(options.result_formats, frozenset({ResultFormat.JPEG, ResultFormat.PDF}))
        self.assertTrue(options.wants(ResultFormat.PDF))

    def test_invalid_options(self):
        for page_limit in (0, -3, 2.5, True):
            with self.assertRaises(ValueError):
                ScannerOptions(page_limit=page_limit)

        with self.assertRaises(ValueError):
            ScannerOptions(result_formats=set())

    def test_result_formats_are_frozen(self):
        options = ScannerOptions(result_formats=[ResultFormat.JPEG])
        self.assertEqual(options.result_formats, frozenset({ResultFormat.JPEG}))
        self.assertFalse(options.wants(ResultFormat.PDF))

    def test_requests_get_unique_ids(self):
        options = ScannerOptions()
        self.assertNotEqual(ScanRequest(options).request_id, ScanRequest(options).request_id)

    def test_capture_result_pages_are_a_tuple(self):
        result = CaptureResult(pages=[PageImageRef("file:///a.jpg")])
        self.assertEqual(result.pages, (PageImageRef("file:///a.jpg"),))
        self.assertIsNone(result.pdf)

    def test_outcome_status(self):
        self.assertFalse(ScanOutcome.canceled("s").is_ok)
        self.assertFalse(ScanOutcome("s", ResultCode.OK).is_ok)
        self.assertTrue(ScanOutcome("s", ResultCode.OK, CaptureResult()).is_ok)

    def test_release_runs_hook_once(self):
        calls = []
        outcome = ScanOutcome("s", ResultCode.OK, CaptureResult(), release_hook=lambda: calls.append(1))

        outcome.release()
        outcome.release()

        self.assertTrue(outcome.released)
        self.assertEqual(calls, [1])


if __name__ == '__main__':
    unittest.main()
