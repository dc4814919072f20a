"""
Error types for the capture workflow
"""


class ScanError(Exception):
    """Base class for capture workflow errors"""

    def user_message(self) -> str:
        return str(self) or "Error"


class ArtifactNotFoundError(ScanError, FileNotFoundError):
    """The artifact stream could not be opened"""

    def __init__(self, uri, reason="No such file or directory"):
        self.uri = uri
        super().__init__(f"{uri}: open failed ({reason})")


class ArtifactExportError(ScanError):
    """Copying an opened artifact into local storage failed"""


class CapabilityStartError(ScanError):
    """The scanning capability could not start a session"""


class ScanSessionError(ScanError):
    """The scanning capability failed while a session was running"""


class ReceiverCompletedError(ScanError):
    """A result receiver was handed a second outcome"""
