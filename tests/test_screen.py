"""
Tests for the scanner screen (rendering and input handling, no window)
"""

import asyncio
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import cv2
import numpy as np

from doc_capture.exporter import ArtifactExporter
from doc_capture.models import PageImageRef
from doc_capture.notifications import Duration
from doc_capture.screen import (
    MIN_ITEM_SIZE,
    SNACKBAR_COLOR,
    SNACKBAR_HEIGHT,
    TOOLBAR_HEIGHT,
    ScannerScreen,
    fit_text,
    layout_staggered,
)
from doc_capture.utils import path_to_uri
from doc_capture.viewmodel import ScannerViewModel


class FakeLauncher:
    busy = False


class FailingLauncher:
    """Launcher whose session fails with an unexpected error"""

    busy = False

    async def launch(self):
        raise NotADirectoryError("Not a directory: scan.pdf")


class StuckLauncher:
    """Launcher whose session never ends and fails when cancelled"""

    busy = False

    async def launch(self):
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            raise RuntimeError("camera did not shut down")


class TestLayout(unittest.TestCase):
    """Test cases for the staggered grid layout"""

    def test_items_go_to_shortest_column(self):
        rects = layout_staggered([100, 50, 30, 80], columns=2, column_width=100, padding=4)

        self.assertEqual(rects, [
            (4, 4, 100, 100),
            (108, 4, 100, 50),
            (108, 58, 100, 30),
            (108, 92, 100, 80),
        ])

    def test_ties_prefer_first_column(self):
        rects = layout_staggered([10, 10, 10], columns=2, column_width=50, padding=0)
        self.assertEqual([x for x, _, _, _ in rects], [0, 50, 0])

    def test_fit_text(self):
        self.assertEqual(fit_text("short", 500), "short")

        shortened = fit_text("a very long message " * 10, 200)
        self.assertTrue(shortened.endswith("..."))
        width = cv2.getTextSize(shortened, cv2.FONT_HERSHEY_SIMPLEX, 0.6, 1)[0][0]
        self.assertLessEqual(width, 200)


class TestScannerScreen(unittest.TestCase):
    """Test cases for the scanner screen"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)
        self.view_model = ScannerViewModel(ArtifactExporter(self.tmpdir / "files"), verbose=False)
        self.launcher = FakeLauncher()
        self.screen = ScannerScreen(self.view_model, self.launcher, size=(720, 1080))

    def tearDown(self):
        self._tmp.cleanup()

    def add_page(self, name, size=(200, 100), color=(0, 0, 255)):
        image = np.zeros((size[1], size[0], 3), dtype=np.uint8)
        image[:] = color
        path = self.tmpdir / name
        cv2.imwrite(str(path), image)
        return PageImageRef(path_to_uri(path))

    def test_render_empty(self):
        canvas = self.screen.render(now=0.0)
        self.assertEqual(canvas.shape, (1080, 720, 3))

    def test_thumbnails_fill_column_width(self):
        page = self.add_page("page.png")
        thumb = self.screen.thumbnail(page)

        self.assertEqual(self.screen.column_width, 354)
        self.assertEqual(thumb.shape, (177, 354, 3))

    def test_missing_image_placeholder(self):
        thumb = self.screen.thumbnail(PageImageRef("file:///does/not/exist.jpg"))
        self.assertEqual(thumb.shape[0], MIN_ITEM_SIZE)

        thumb = self.screen.thumbnail(PageImageRef("content://scanner/page/1"))
        self.assertEqual(thumb.shape[0], MIN_ITEM_SIZE)

    def test_appended_pages_are_rendered(self):
        """Thumbnails load on append and appear below the toolbar"""
        page = self.add_page("red.png", color=(0, 0, 255))
        self.view_model.collection.append([page])

        self.assertIn(page.uri, self.screen._thumbnails)
        canvas = self.screen.render(now=0.0)
        self.assertEqual(tuple(canvas[TOOLBAR_HEIGHT + 10, 10]), (0, 0, 255))

    def test_layout_follows_collection_order(self):
        pages = [self.add_page(f"p{i}.png", size=(200, 100 + 50 * i)) for i in range(3)]
        self.view_model.collection.append(pages)

        layout = self.screen.layout()
        self.assertEqual([page for page, _ in layout], pages)

    def test_scroll_is_clamped(self):
        self.screen.scroll_by(500)
        self.assertEqual(self.screen.scroll, 0)

        pages = [self.add_page(f"tall{i}.png", size=(100, 400)) for i in range(6)]
        self.view_model.collection.append(pages)
        self.screen.scroll_by(10_000)

        max_scroll = self.screen.content_height() - self.screen.viewport_height
        self.assertEqual(self.screen.scroll, max_scroll)

        self.screen.scroll_by(-10_000)
        self.assertEqual(self.screen.scroll, 0)

    def test_scan_button_hit_test(self):
        x, y, w, h = self.screen.fab_rect()
        self.assertTrue(self.screen.hit_fab(x + w // 2, y + h // 2))
        self.assertFalse(self.screen.hit_fab(0, 0))

    def test_click_requests_scan(self):
        x, y, w, h = self.screen.fab_rect()
        self.screen.on_mouse(cv2.EVENT_LBUTTONDOWN, x + 1, y + 1, 0)
        self.assertTrue(self.screen._scan_requested)

    def test_no_scan_while_busy(self):
        self.launcher.busy = True
        self.screen.handle_key(ord('s'))
        self.assertFalse(self.screen._scan_requested)

    def test_keys(self):
        self.screen.running = True
        self.screen.handle_key(ord('s'))
        self.assertTrue(self.screen._scan_requested)

        self.screen.handle_key(ord('q'))
        self.assertFalse(self.screen.running)

    def test_snackbar(self):
        """The current notification is drawn above the scan button"""
        self.view_model.notifications.notify("File not found", Duration.LONG)
        canvas = self.screen.render(now=0.0)

        _, fab_y, _, _ = self.screen.fab_rect()
        top = fab_y - SNACKBAR_HEIGHT - 12
        self.assertEqual(tuple(canvas[top + 2, 14]), SNACKBAR_COLOR)

        # Gone once the long duration has passed
        canvas = self.screen.render(now=Duration.LONG.value)
        self.assertNotEqual(tuple(canvas[top + 2, 14]), SNACKBAR_COLOR)


@mock.patch("doc_capture.screen.cv2.destroyWindow")
@mock.patch("doc_capture.screen.cv2.imshow")
@mock.patch("doc_capture.screen.cv2.setMouseCallback")
@mock.patch("doc_capture.screen.cv2.namedWindow")
class TestScannerScreenLoop(unittest.IsolatedAsyncioTestCase):
    """Test cases for the screen's window loop"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.view_model = ScannerViewModel(ArtifactExporter(Path(self._tmp.name) / "files"), verbose=False)

    def tearDown(self):
        self._tmp.cleanup()

    async def run_screen(self, launcher, keys):
        screen = ScannerScreen(self.view_model, launcher)
        with mock.patch("doc_capture.screen.cv2.waitKey", side_effect=keys):
            await screen.run()
        return screen

    async def test_failed_scan_is_reported(self, named_window, set_mouse_callback, imshow, destroy_window):
        """An unexpected error from a scan becomes one LONG notification"""
        screen = await self.run_screen(FailingLauncher(), [ord('s'), 255, 255, 255, ord('q')])

        self.assertTrue(screen.scan_task.done())
        notifications = self.view_model.notifications.pending()
        self.assertEqual(len(notifications), 1)
        self.assertIs(notifications[0].duration, Duration.LONG)
        self.assertIn("Not a directory", notifications[0].message)
        destroy_window.assert_called_once()

    async def test_window_closed_when_cancelled_scan_fails(self, named_window, set_mouse_callback,
                                                           imshow, destroy_window):
        """Quitting mid-scan closes the window even if the scan errors while stopping"""
        screen = await self.run_screen(StuckLauncher(), [ord('s'), 255, ord('q')])

        self.assertTrue(screen.scan_task.done())
        destroy_window.assert_called_once()
        self.assertEqual(len(self.view_model.notifications), 1)


if __name__ == '__main__':
    unittest.main()
