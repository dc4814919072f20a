"""
Screen state and capture result handling
"""

from pathlib import Path
from typing import List, Optional, Tuple

from .collection import ImageCollection
from .errors import ScanError
from .exporter import ArtifactExporter
from .models import PageImageRef, ScanOutcome
from .notifications import Duration, NotificationQueue


class ScannerViewModel:
    """Owns the image collection and reacts to capture outcomes"""

    def __init__(self, exporter: ArtifactExporter,
                 collection: Optional[ImageCollection] = None,
                 notifications: Optional[NotificationQueue] = None,
                 verbose: bool = True):
        self.exporter = exporter
        self.collection = collection if collection is not None else ImageCollection()
        self.notifications = notifications if notifications is not None else NotificationQueue()
        self.exported_files: List[Path] = []
        self.verbose = verbose

    @property
    def images(self) -> Tuple[PageImageRef, ...]:
        return self.collection.snapshot()

    def on_scan_result(self, outcome: ScanOutcome):
        """Append returned pages and export the combined PDF, if any"""
        if not outcome.is_ok:
            self._status("Scan cancelled")
            return

        result = outcome.data
        self.collection.append(result.pages)
        if result.pages:
            self._status(f"Added {len(result.pages)} page(s), {len(self.collection)} total")

        if result.pdf is not None:
            try:
                exported = self.exporter.export(result.pdf)
            except ScanError as e:
                self._status(f"Export failed: {e}")
                self.notifications.notify(e.user_message(), Duration.LONG)
            else:
                self.exported_files.append(exported)
                self._status(f"Document exported: {exported.name}")

    def _status(self, message):
        if self.verbose:
            print(message)
