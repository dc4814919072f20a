"""
Scanning capability contract

A capability hands out a start request for a set of options and later
runs the capture flow for that request, producing exactly one outcome.
"""

import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from .errors import ScanSessionError
from .models import (
    ArtifactRef,
    CaptureResult,
    PageImageRef,
    ResultCode,
    ResultFormat,
    ScanOutcome,
    ScannerOptions,
    ScanRequest,
)
from .pdf import assemble_pdf
from .utils import ensure_directory, path_to_uri

PDF_NAME = "scan.pdf"


class ScanningCapability(ABC):
    """Base class for capture flows that store their output in a cache folder"""

    def __init__(self, cache_dir):
        self.cache_dir = Path(cache_dir)

    @abstractmethod
    async def start_scan_request(self, options: ScannerOptions) -> ScanRequest:
        """
        Prepare a capture session

        Raises:
            CapabilityStartError: if the capability cannot start
        """

    @abstractmethod
    async def run_session(self, request: ScanRequest) -> ScanOutcome:
        """
        Run the capture flow until the user finishes or cancels

        Raises:
            ScanSessionError: if the flow fails part way
        """

    def session_dir(self, request: ScanRequest) -> Path:
        path = self.cache_dir / request.request_id
        ensure_directory(path)
        return path

    def page_path(self, request: ScanRequest, index: int) -> Path:
        return self.session_dir(request) / f"page_{index + 1:03d}.jpg"

    def discard_session(self, request: ScanRequest):
        shutil.rmtree(self.cache_dir / request.request_id, ignore_errors=True)

    def build_outcome(self, request: ScanRequest, page_paths: Sequence[Path]) -> ScanOutcome:
        """
        Turn saved page files into an outcome in the requested formats

        No pages means the user finished without capturing anything,
        which is reported as a cancellation.
        """
        if not page_paths:
            self.discard_session(request)
            return ScanOutcome.canceled(request.request_id)

        options = request.options
        pages = ()
        if options.wants(ResultFormat.JPEG):
            pages = tuple(PageImageRef(path_to_uri(path)) for path in page_paths)

        pdf = None
        release_hook = None
        if options.wants(ResultFormat.PDF):
            try:
                pdf_path = assemble_pdf(page_paths, self.session_dir(request) / PDF_NAME)
            except OSError as e:
                self.discard_session(request)
                raise ScanSessionError(f"Could not build PDF: {e}") from e
            pdf = ArtifactRef(uri=path_to_uri(pdf_path), page_count=len(page_paths))

            def release_hook():
                if pages:
                    pdf_path.unlink(missing_ok=True)
                else:
                    # Nothing references the page files once the PDF is exported
                    self.discard_session(request)

        return ScanOutcome(
            request_id=request.request_id,
            result_code=ResultCode.OK,
            data=CaptureResult(pages=pages, pdf=pdf),
            release_hook=release_hook,
        )
