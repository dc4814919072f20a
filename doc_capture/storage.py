"""
Content resolution for artifact and page URIs
"""

from typing import BinaryIO

from .errors import ArtifactNotFoundError
from .utils import uri_to_path


class ContentResolver:
    """Opens readable byte streams for content URIs"""

    def open_input_stream(self, uri: str) -> BinaryIO:
        """
        Open the content behind a URI for reading

        Args:
            uri: A file:// URI

        Returns:
            An open binary stream; the caller closes it

        Raises:
            ArtifactNotFoundError: if the URI cannot be opened
        """
        try:
            path = uri_to_path(uri)
        except ValueError:
            raise ArtifactNotFoundError(uri, "No content provider for this URI")

        try:
            return open(path, "rb")
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(uri) from e
        except (OSError, ValueError) as e:
            # Anything else that stops the open (not a directory, name too
            # long, symlink loop, embedded NUL) is reported as Not-Found too
            raise ArtifactNotFoundError(uri, getattr(e, "strerror", None) or str(e)) from e
