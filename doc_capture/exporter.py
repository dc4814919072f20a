"""
Export of combined documents into local storage
"""

import shutil
from pathlib import Path
from typing import Callable, Optional

from .errors import ArtifactExportError
from .models import ArtifactRef
from .storage import ContentResolver
from .utils import current_millis, ensure_directory


class ArtifactExporter:
    """Copies a returned PDF stream to File_<epoch-millis>.pdf"""

    def __init__(self, files_dir, resolver: Optional[ContentResolver] = None,
                 clock: Callable[[], int] = current_millis):
        """
        Initialize the exporter

        Args:
            files_dir: Directory exported files are written to
            resolver: Opens artifact URIs for reading
            clock: Returns the current time in epoch milliseconds
        """
        self.files_dir = Path(files_dir)
        self.resolver = resolver or ContentResolver()
        self.clock = clock
        ensure_directory(self.files_dir)

    def target_path(self) -> Path:
        return self.files_dir / f"File_{self.clock()}.pdf"

    def export(self, artifact: ArtifactRef) -> Path:
        """
        Copy the artifact into a new local file

        Raises:
            ArtifactNotFoundError: the artifact stream could not be opened
            ArtifactExportError: the copy failed after the stream was opened
        """
        # Opened first so a missing artifact never leaves an empty file
        with self.resolver.open_input_stream(artifact.uri) as source:
            target = self.target_path()
            try:
                with open(target, "wb") as output:
                    shutil.copyfileobj(source, output)
            except OSError as e:
                target.unlink(missing_ok=True)
                raise ArtifactExportError(f"Could not export {artifact.uri}: {e}") from e
        return target
