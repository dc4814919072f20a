"""
Data model for capture sessions
Page and artifact references, scanner options and session outcomes
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, Optional, Tuple


class ScannerMode(Enum):
    """Feature set requested from the scanning capability"""
    BASE = "base"
    BASE_WITH_FILTER = "base_with_filter"
    FULL = "full"


class ResultFormat(Enum):
    """Output formats a capture session can produce"""
    JPEG = "jpeg"
    PDF = "pdf"


class ResultCode(Enum):
    OK = "ok"
    CANCELED = "canceled"


@dataclass(frozen=True)
class ScannerOptions:
    """
    Configuration for one capture session

    Args:
        mode: Scanner feature set
        allow_gallery_import: Whether pages may be imported from the gallery
        page_limit: Maximum number of pages per session
        result_formats: Formats the session should return
    """
    mode: ScannerMode = ScannerMode.FULL
    allow_gallery_import: bool = True
    page_limit: int = 10
    result_formats: FrozenSet[ResultFormat] = frozenset({ResultFormat.JPEG, ResultFormat.PDF})

    def __post_init__(self):
        if isinstance(self.page_limit, bool) or not isinstance(self.page_limit, int) or self.page_limit < 1:
            raise ValueError(f"page_limit must be a positive integer, got {self.page_limit!r}")
        if not self.result_formats:
            raise ValueError("At least one result format is required")
        # Accept any iterable of formats but store a frozenset
        object.__setattr__(self, "result_formats", frozenset(self.result_formats))

    def wants(self, result_format: ResultFormat) -> bool:
        return result_format in self.result_formats


@dataclass(frozen=True)
class PageImageRef:
    """Reference to one captured page image, owned by the capability"""
    uri: str


@dataclass(frozen=True)
class ArtifactRef:
    """Reference to the combined document produced by a session"""
    uri: str
    page_count: int = 0


@dataclass(frozen=True)
class CaptureResult:
    pages: Tuple[PageImageRef, ...] = ()
    pdf: Optional[ArtifactRef] = None

    def __post_init__(self):
        object.__setattr__(self, "pages", tuple(self.pages))


@dataclass(frozen=True)
class ScanRequest:
    """Start token handed out by a capability for a single session"""
    options: ScannerOptions
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass
class ScanOutcome:
    """
    Result delivered once when a capture session ends

    The release hook lets the capability invalidate the artifact once the
    receiver callback has returned.
    """
    request_id: str
    result_code: ResultCode
    data: Optional[CaptureResult] = None
    release_hook: Optional[Callable[[], None]] = field(default=None, repr=False, compare=False)
    released: bool = field(default=False, compare=False)

    @classmethod
    def canceled(cls, request_id: str) -> "ScanOutcome":
        return cls(request_id=request_id, result_code=ResultCode.CANCELED)

    @property
    def is_ok(self) -> bool:
        return self.result_code is ResultCode.OK and self.data is not None

    def release(self):
        """Invalidate the artifact; safe to call more than once"""
        if self.released:
            return
        self.released = True
        if self.release_hook is not None:
            self.release_hook()
