"""
Gallery import capability
Imports existing photos from a folder as scanned pages
"""

import asyncio
from pathlib import Path
from typing import List

from PIL import Image, ImageOps

from .capability import ScanningCapability
from .errors import CapabilityStartError
from .models import ScanOutcome, ScannerOptions, ScanRequest

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"}


def list_gallery_images(folder) -> List[Path]:
    """Image files in a folder, sorted by name"""
    folder = Path(folder)
    return sorted(
        path for path in folder.iterdir()
        if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
    )


def import_image(source, destination) -> Path:
    """
    Copy a gallery photo into the session as an upright RGB JPEG

    Args:
        source: Path of the gallery image
        destination: Path of the JPEG to write
    """
    with Image.open(source) as image:
        upright = ImageOps.exif_transpose(image)
        upright.convert("RGB").save(destination, "JPEG", quality=90)
    return Path(destination)


class GalleryImportScanner(ScanningCapability):
    """Capability that takes its pages from a gallery folder"""

    def __init__(self, gallery_dir, cache_dir):
        super().__init__(cache_dir)
        self.gallery_dir = Path(gallery_dir)

    async def start_scan_request(self, options: ScannerOptions) -> ScanRequest:
        if not options.allow_gallery_import:
            raise CapabilityStartError("Gallery import is not allowed")
        if not self.gallery_dir.is_dir():
            raise CapabilityStartError(f"Gallery folder not found: {self.gallery_dir}")
        return ScanRequest(options=options)

    async def run_session(self, request: ScanRequest) -> ScanOutcome:
        sources = list_gallery_images(self.gallery_dir)[:request.options.page_limit]
        pages = []
        for source in sources:
            try:
                pages.append(import_image(source, self.page_path(request, len(pages))))
            except OSError as e:
                print(f"Skipping {source.name}: {e}")
            await asyncio.sleep(0)

        print(f"Imported {len(pages)} page(s) from {self.gallery_dir}")
        return self.build_outcome(request, pages)
