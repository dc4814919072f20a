"""
Document Capture - scan pages, collect them in a grid and export the combined PDF
"""

__version__ = "0.1.0"

from .collection import ImageCollection
from .errors import (
    ArtifactExportError,
    ArtifactNotFoundError,
    CapabilityStartError,
    ReceiverCompletedError,
    ScanError,
    ScanSessionError,
)
from .exporter import ArtifactExporter
from .launcher import ScanSessionLauncher
from .models import (
    ArtifactRef,
    CaptureResult,
    PageImageRef,
    ResultCode,
    ResultFormat,
    ScannerMode,
    ScannerOptions,
    ScanOutcome,
    ScanRequest,
)
from .notifications import Duration, NotificationQueue
from .receiver import ReceiverState, ResultReceiver
from .storage import ContentResolver
from .viewmodel import ScannerViewModel

__all__ = [
    'ArtifactExportError',
    'ArtifactExporter',
    'ArtifactNotFoundError',
    'ArtifactRef',
    'CapabilityStartError',
    'CaptureResult',
    'ContentResolver',
    'Duration',
    'ImageCollection',
    'NotificationQueue',
    'PageImageRef',
    'ReceiverCompletedError',
    'ReceiverState',
    'ResultCode',
    'ResultFormat',
    'ResultReceiver',
    'ScanError',
    'ScanOutcome',
    'ScanRequest',
    'ScanSessionError',
    'ScanSessionLauncher',
    'ScannerMode',
    'ScannerOptions',
    'ScannerViewModel',
]
