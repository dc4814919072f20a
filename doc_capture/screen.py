#!/usr/bin/env python3
"""
Document Scanner screen - Main application module
Toolbar, scan button, staggered page grid and snackbar in one OpenCV window
"""

import argparse
import asyncio
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .camera import CameraDocumentScanner
from .exporter import ArtifactExporter
from .gallery import GalleryImportScanner
from .launcher import ScanSessionLauncher
from .models import PageImageRef, ResultFormat, ScannerMode, ScannerOptions
from .notifications import Duration
from .utils import uri_to_path
from .viewmodel import ScannerViewModel

TITLE = "Document Scanner"
SCAN_LABEL = "click to scan"
TOOLBAR_HEIGHT = 64
PADDING = 4
MIN_ITEM_SIZE = 45
FAB_SIZE = (220, 56)
FAB_MARGIN = 24
SNACKBAR_HEIGHT = 48
SCROLL_STEP = 60
FRAME_DELAY_MS = 30

BACKGROUND = (250, 250, 250)
TOOLBAR_COLOR = (240, 234, 236)
FAB_COLOR = (234, 221, 255)
TEXT_COLOR = (30, 27, 28)
SNACKBAR_COLOR = (50, 48, 49)
PLACEHOLDER_COLOR = (200, 200, 200)

Rect = Tuple[int, int, int, int]


def layout_staggered(heights: Sequence[int], columns: int, column_width: int,
                     padding: int = PADDING) -> List[Rect]:
    """
    Place items into the currently shortest column, in order

    Args:
        heights: Item heights in pixels
        columns: Number of columns
        column_width: Width of a column in pixels
        padding: Gap around and between items

    Returns:
        list: (x, y, width, height) for each item, in content coordinates
    """
    tops = [padding] * columns
    rects = []
    for height in heights:
        column = tops.index(min(tops))
        x = padding + column * (column_width + padding)
        rects.append((x, tops[column], column_width, height))
        tops[column] += height + padding
    return rects


def fit_text(text, max_width, scale=0.6, thickness=1):
    """Shorten text with an ellipsis until it fits max_width pixels"""
    font = cv2.FONT_HERSHEY_SIMPLEX
    if cv2.getTextSize(text, font, scale, thickness)[0][0] <= max_width:
        return text
    while text and cv2.getTextSize(text + "...", font, scale, thickness)[0][0] > max_width:
        text = text[:-1]
    return text + "..."


class ScannerScreen:
    """The single application screen"""

    def __init__(self, view_model: ScannerViewModel, launcher: ScanSessionLauncher,
                 size=(720, 1080), columns=2, clock=time.monotonic):
        """
        Initialize the screen

        Args:
            view_model: Screen state and result handling
            launcher: Starts a capture session on each scan click
            size (tuple): Window size (width, height)
            columns (int): Number of grid columns
            clock: Monotonic clock used for snackbar timing
        """
        self.view_model = view_model
        self.launcher = launcher
        self.width, self.height = size
        self.columns = columns
        self.clock = clock
        self.scroll = 0
        self.running = False
        self.scan_task: Optional[asyncio.Task] = None
        self._scan_requested = False
        self._thumbnails: Dict[str, np.ndarray] = {}
        self.view_model.collection.subscribe(self._on_images_changed)

    @property
    def column_width(self) -> int:
        return (self.width - PADDING * (self.columns + 1)) // self.columns

    @property
    def viewport_height(self) -> int:
        return self.height - TOOLBAR_HEIGHT

    def thumbnail(self, image_ref: PageImageRef) -> np.ndarray:
        """Load a page image scaled to the column width, or a placeholder"""
        cached = self._thumbnails.get(image_ref.uri)
        if cached is not None:
            return cached

        image = None
        try:
            image = cv2.imread(str(uri_to_path(image_ref.uri)))
        except ValueError:
            pass

        width = self.column_width
        if image is None:
            thumb = np.full((MIN_ITEM_SIZE, width, 3), PLACEHOLDER_COLOR, dtype=np.uint8)
        else:
            h, w = image.shape[:2]
            height = max(MIN_ITEM_SIZE, int(round(h * width / w)))
            thumb = cv2.resize(image, (width, height))

        self._thumbnails[image_ref.uri] = thumb
        return thumb

    def layout(self) -> List[Tuple[PageImageRef, Rect]]:
        images = self.view_model.images
        heights = [self.thumbnail(image).shape[0] for image in images]
        return list(zip(images, layout_staggered(heights, self.columns, self.column_width)))

    def content_height(self) -> int:
        bottoms = [y + h for _, (x, y, w, h) in self.layout()]
        return max(bottoms, default=0) + PADDING

    def scroll_by(self, delta: int):
        max_scroll = max(0, self.content_height() - self.viewport_height)
        self.scroll = min(max(0, self.scroll + delta), max_scroll)

    def fab_rect(self) -> Rect:
        w, h = FAB_SIZE
        return ((self.width - w) // 2, self.height - h - FAB_MARGIN, w, h)

    def hit_fab(self, x, y) -> bool:
        fx, fy, fw, fh = self.fab_rect()
        return fx <= x < fx + fw and fy <= y < fy + fh

    def request_scan(self):
        """Ask the run loop to launch a session on its next frame"""
        if self.launcher.busy:
            return
        self._scan_requested = True

    def handle_key(self, key):
        if key in (27, ord('q')):
            self.running = False
        elif key == ord('s'):
            self.request_scan()
        elif key == ord('j'):
            self.scroll_by(SCROLL_STEP)
        elif key == ord('k'):
            self.scroll_by(-SCROLL_STEP)

    def on_mouse(self, event, x, y, flags, param=None):
        if event == cv2.EVENT_LBUTTONDOWN and self.hit_fab(x, y):
            self.request_scan()
        elif event == cv2.EVENT_MOUSEWHEEL:
            self.scroll_by(-SCROLL_STEP if cv2.getMouseWheelDelta(flags) > 0 else SCROLL_STEP)

    def render(self, now=None) -> np.ndarray:
        """Draw the screen for the current state"""
        canvas = np.full((self.height, self.width, 3), BACKGROUND, dtype=np.uint8)

        for image_ref, (x, y, w, h) in self.layout():
            self._paste(canvas, self.thumbnail(image_ref), x, TOOLBAR_HEIGHT + y - self.scroll)

        # Toolbar
        cv2.rectangle(canvas, (0, 0), (self.width, TOOLBAR_HEIGHT), TOOLBAR_COLOR, -1)
        cv2.putText(canvas, TITLE, (16, 42), cv2.FONT_HERSHEY_SIMPLEX, 0.9, TEXT_COLOR, 2)

        # Scan button
        fx, fy, fw, fh = self.fab_rect()
        cv2.rectangle(canvas, (fx, fy), (fx + fw, fy + fh), FAB_COLOR, -1)
        label = "scanning..." if self.launcher.busy else SCAN_LABEL
        (tw, th), _ = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, 0.6, 2)
        cv2.putText(canvas, label, (fx + (fw - tw) // 2, fy + (fh + th) // 2),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, TEXT_COLOR, 2)

        # Snackbar
        notification = self.view_model.notifications.current(self.clock() if now is None else now)
        if notification is not None:
            top = fy - SNACKBAR_HEIGHT - 12
            cv2.rectangle(canvas, (12, top), (self.width - 12, top + SNACKBAR_HEIGHT), SNACKBAR_COLOR, -1)
            message = fit_text(notification.message, self.width - 48)
            cv2.putText(canvas, message, (24, top + 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)

        return canvas

    def _paste(self, canvas, image, x, y):
        top = max(y, TOOLBAR_HEIGHT)
        bottom = min(y + image.shape[0], self.height)
        if top >= bottom:
            return
        canvas[top:bottom, x:x + image.shape[1]] = image[top - y:bottom - y]

    def _on_images_changed(self, snapshot):
        # Load thumbnails for newly appended pages before the next frame
        for image in snapshot:
            self.thumbnail(image)

    def _on_scan_done(self, task: asyncio.Task):
        """Report a scan task that ended with an unexpected error"""
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        print(f"Error during scan: {error}")
        self.view_model.notifications.notify(str(error), Duration.LONG)

    async def run(self):
        """Run the screen until the user quits"""
        cv2.namedWindow(TITLE)
        cv2.setMouseCallback(TITLE, self.on_mouse)
        self.running = True

        print(f"\n{TITLE} Running")
        print("--------------------------------")
        print("Click the button or press 's' to scan")
        print("Scroll with the mouse wheel or 'j'/'k'")
        print("Press 'q' to quit")

        try:
            while self.running:
                if self._scan_requested:
                    self._scan_requested = False
                    self.scan_task = asyncio.create_task(self.launcher.launch())
                    self.scan_task.add_done_callback(self._on_scan_done)

                cv2.imshow(TITLE, self.render())

                if self.launcher.busy:
                    # The capture window reads the keyboard while a session runs
                    await asyncio.sleep(FRAME_DELAY_MS / 1000)
                    continue

                key = cv2.waitKey(FRAME_DELAY_MS) & 0xFF
                self.handle_key(key)
                await asyncio.sleep(0)
        finally:
            if self.scan_task is not None and not self.scan_task.done():
                self.scan_task.cancel()
                # Errors raised while cancelling are reported by _on_scan_done
                await asyncio.wait([self.scan_task])
            cv2.destroyWindow(TITLE)
            print(f"{TITLE} closed")


def build_capability(args, cache_dir):
    if args.source == "gallery":
        if not args.gallery:
            raise SystemExit("--gallery is required with --source gallery")
        return GalleryImportScanner(args.gallery, cache_dir)
    return CameraDocumentScanner(
        cache_dir,
        camera_id=args.camera,
        resolution=(args.width, args.height),
        gallery_dir=args.gallery,
    )


def main():
    """Entry point function when script is run directly"""
    parser = argparse.ArgumentParser(description="Document Scanner Application")
    parser.add_argument("--output", "-o", type=str, default="scans",
                        help="Directory exported PDFs are saved to")
    parser.add_argument("--source", choices=["camera", "gallery"], default="camera",
                        help="Where scanned pages come from")
    parser.add_argument("--camera", "-c", type=int, default=0,
                        help="Camera index (usually 0 for built-in)")
    parser.add_argument("--width", "-W", type=int, default=1280,
                        help="Camera width resolution")
    parser.add_argument("--height", "-H", type=int, default=720,
                        help="Camera height resolution")
    parser.add_argument("--gallery", "-g", type=str, default=None,
                        help="Folder of photos to import as pages")
    parser.add_argument("--page-limit", type=int, default=10,
                        help="Maximum pages per scan")
    parser.add_argument("--mode", choices=[mode.value for mode in ScannerMode], default="full",
                        help="Scanner feature set")
    parser.add_argument("--no-gallery-import", action="store_true",
                        help="Disallow importing pages from the gallery")
    parser.add_argument("--formats", nargs="+", choices=[fmt.value for fmt in ResultFormat],
                        default=["jpeg", "pdf"], help="Result formats to request")

    args = parser.parse_args()

    output_dir = Path(args.output)
    try:
        options = ScannerOptions(
            mode=ScannerMode(args.mode),
            allow_gallery_import=not args.no_gallery_import,
            page_limit=args.page_limit,
            result_formats=frozenset(ResultFormat(fmt) for fmt in args.formats),
        )
    except ValueError as e:
        parser.error(str(e))

    view_model = ScannerViewModel(ArtifactExporter(output_dir))
    launcher = ScanSessionLauncher(
        build_capability(args, output_dir / ".cache"),
        options,
        on_result=view_model.on_scan_result,
        notifications=view_model.notifications,
    )

    asyncio.run(ScannerScreen(view_model, launcher).run())


if __name__ == "__main__":
    main()
