"""File handling shared by the transport integrations."""

import logging
import os
import pathlib
import tempfile
from typing import BinaryIO, Iterator, Optional

from hattip.body import FileBody

logger = logging.getLogger(__name__)

# Size of the chunks read from, or written to, files holding message bodies.
CHUNK_SIZE = 64 * 1024


class Download:
    """Context manager writing a response body to a file.

    The body is written to a temporary file. When a destination is set, the
    temporary file is created next to it and moved into place once the body
    has been received completely, so that the destination never holds a
    partial body. Otherwise the temporary file is the result, and belongs to
    the caller. On error, the temporary file is removed.
    """

    def __init__(self, destination: Optional[pathlib.Path] = None):
        self.destination = destination
        self._file: Optional[BinaryIO] = None
        self._path: Optional[pathlib.Path] = None

    def __enter__(self):
        if self.destination is None:
            fd, name = tempfile.mkstemp(prefix="hattip-")
        else:
            fd, name = tempfile.mkstemp(
                prefix=f".{self.destination.name}.",
                suffix=".part",
                dir=self.destination.parent,
            )
        self._path = pathlib.Path(name)
        self._file = os.fdopen(fd, "wb")
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        assert self._file is not None and self._path is not None
        self._file.close()
        if exc_type is not None:
            self._path.unlink(missing_ok=True)
            return
        if self.destination is not None:
            os.replace(self._path, self.destination)
            self._path = self.destination
        logger.debug("downloaded response body to %s", self._path)

    def write(self, chunk: bytes):
        assert self._file is not None
        self._file.write(chunk)

    @property
    def body(self) -> FileBody:
        """The body of the completed download."""
        assert self._path is not None
        return FileBody(self._path)


def iter_file(path: pathlib.Path) -> Iterator[bytes]:
    """Yields the content of a file in chunks."""
    with open(path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            yield chunk
