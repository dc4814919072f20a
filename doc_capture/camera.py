"""
Camera capture capability
Multi-shot page capture with OpenCV, one window per session
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

import cv2
import numpy as np

from .capability import ScanningCapability
from .errors import CapabilityStartError, ScanSessionError
from .gallery import import_image, list_gallery_images
from .models import ScannerMode, ScanOutcome, ScannerOptions, ScanRequest
from .utils import display_macos_camera_permission_help

KEY_ENTER = (10, 13)
KEY_ESCAPE = 27


def apply_filter(frame: np.ndarray) -> np.ndarray:
    """Greyscale page filter, kept as 3 channels for display and saving"""
    gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


class CameraDocumentScanner(ScanningCapability):
    """Capability that captures pages from a camera"""

    WINDOW_NAME = "Scan Document"

    def __init__(self, cache_dir, camera_id=0, resolution=(1280, 720),
                 gallery_dir=None, capture_factory=cv2.VideoCapture):
        """
        Initialize the camera capability

        Args:
            cache_dir (str): Directory holding session pages
            camera_id (int): Camera index (usually 0 for built-in)
            resolution (tuple): Desired camera resolution (width, height)
            gallery_dir (str): Folder imported with 'g' when gallery import is allowed
            capture_factory: Callable opening a camera by index
        """
        super().__init__(cache_dir)
        self.camera_id = camera_id
        self.resolution = resolution
        self.gallery_dir = Path(gallery_dir) if gallery_dir else None
        self.capture_factory = capture_factory
        self._cameras: Dict[str, object] = {}

    async def start_scan_request(self, options: ScannerOptions) -> ScanRequest:
        camera = self.capture_factory(self.camera_id)
        camera.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
        camera.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])

        if not camera.isOpened():
            camera.release()
            display_macos_camera_permission_help()
            raise CapabilityStartError(f"Could not open camera {self.camera_id}")

        request = ScanRequest(options=options)
        self._cameras[request.request_id] = camera
        return request

    async def run_session(self, request: ScanRequest) -> ScanOutcome:
        camera = self._cameras.pop(request.request_id, None)
        if camera is None:
            raise ScanSessionError(f"No camera prepared for session {request.request_id}")

        options = request.options
        pages: List[Path] = []
        filter_on = False
        status_message = ""

        try:
            while len(pages) < options.page_limit:
                ret, frame = camera.read()
                if not ret or frame is None:
                    raise ScanSessionError("Could not read frame from camera")

                if filter_on:
                    frame = apply_filter(frame)

                cv2.imshow(self.WINDOW_NAME, self.draw_overlay(frame, len(pages), options, status_message))
                key = cv2.waitKey(1) & 0xFF

                if key == ord(' '):
                    path = self.page_path(request, len(pages))
                    if cv2.imwrite(str(path), frame):
                        pages.append(path)
                        status_message = f"Page {len(pages)} captured"
                    else:
                        print(f"Error: Could not save page to {path}")
                        status_message = "Could not save page"
                elif key == ord('g'):
                    status_message = self.import_from_gallery(request, pages)
                elif key == ord('f'):
                    if options.mode is ScannerMode.BASE:
                        status_message = "Filters are not available in base mode"
                    else:
                        filter_on = not filter_on
                        status_message = f"Filter: {'greyscale' if filter_on else 'none'}"
                elif key in KEY_ENTER or key == ord('d'):
                    break
                elif key in (KEY_ESCAPE, ord('q')):
                    self.discard_session(request)
                    print("Scan cancelled by user")
                    return ScanOutcome.canceled(request.request_id)

                await asyncio.sleep(0)

            return self.build_outcome(request, pages)
        except (ScanSessionError, asyncio.CancelledError):
            self.discard_session(request)
            raise
        finally:
            camera.release()
            cv2.destroyWindow(self.WINDOW_NAME)

    def import_from_gallery(self, request: ScanRequest, pages: List[Path]) -> str:
        """Append gallery images to the session until the page limit is reached"""
        options = request.options
        if not options.allow_gallery_import:
            return "Gallery import is not allowed"
        if self.gallery_dir is None or not self.gallery_dir.is_dir():
            return "No gallery folder configured"

        count = 0
        for source in list_gallery_images(self.gallery_dir):
            if len(pages) >= options.page_limit:
                break
            try:
                pages.append(import_image(source, self.page_path(request, len(pages))))
                count += 1
            except OSError as e:
                print(f"Skipping {source.name}: {e}")
        return f"Imported {count} page(s) from gallery"

    def draw_overlay(self, frame: np.ndarray, page_count: int,
                     options: ScannerOptions, status_message: Optional[str]) -> np.ndarray:
        display_frame = frame.copy()

        cv2.putText(
            display_frame,
            f"Pages: {page_count}/{options.page_limit}",
            (10, 30),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.7,
            (0, 255, 0),
            2
        )

        hints = "SPACE capture  ENTER done  Q cancel"
        if options.allow_gallery_import:
            hints += "  G gallery"
        if options.mode is not ScannerMode.BASE:
            hints += "  F filter"
        cv2.putText(
            display_frame,
            hints,
            (10, display_frame.shape[0] - 20),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            (255, 255, 255),
            1
        )

        if status_message:
            cv2.putText(
                display_frame,
                status_message,
                (10, 60),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.6,
                (0, 165, 255),
                2
            )
        return display_frame
