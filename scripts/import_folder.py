#!/usr/bin/env python3
"""
Headless document import.
Runs one gallery import session through the regular scan workflow and
reports the collected pages and the exported PDF.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from doc_capture.exporter import ArtifactExporter
from doc_capture.gallery import GalleryImportScanner
from doc_capture.launcher import ScanSessionLauncher
from doc_capture.models import ResultFormat, ScannerOptions
from doc_capture.viewmodel import ScannerViewModel


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description="Import a folder of photos as a scanned document")
    parser.add_argument("folder", type=str, help="Folder of page photos")
    parser.add_argument("--output", "-o", type=str, default="scans", help="Output directory")
    parser.add_argument("--page-limit", type=int, default=10, help="Maximum pages to import")
    parser.add_argument("--no-pdf", action="store_true", help="Only import page images")
    return parser.parse_args()


async def import_folder(folder, output_dir, page_limit=10, with_pdf=True):
    """
    Import a folder and return the view model holding the result

    Args:
        folder: Folder of page photos
        output_dir: Directory the PDF is exported to
        page_limit: Maximum pages to import
        with_pdf: Whether to request the combined PDF
    """
    output_dir = Path(output_dir)
    formats = {ResultFormat.JPEG, ResultFormat.PDF} if with_pdf else {ResultFormat.JPEG}
    options = ScannerOptions(page_limit=page_limit, result_formats=frozenset(formats))

    view_model = ScannerViewModel(ArtifactExporter(output_dir))
    launcher = ScanSessionLauncher(
        GalleryImportScanner(folder, output_dir / ".cache"),
        options,
        on_result=view_model.on_scan_result,
        notifications=view_model.notifications,
    )
    await launcher.launch()
    return view_model


def main():
    args = parse_arguments()
    view_model = asyncio.run(import_folder(
        args.folder, args.output, page_limit=args.page_limit, with_pdf=not args.no_pdf))

    print("\nPages:")
    for image in view_model.images:
        print(f"  {image.uri}")
    print("Exported files:")
    for path in view_model.exported_files:
        print(f"  {path}")

    errors = view_model.notifications.pending()
    for notification in errors:
        print(f"Error: {notification.message}")
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
