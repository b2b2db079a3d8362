"""HTTP message bodies.

A body is either held in memory (DataBody) or stored in a file (FileBody).
File bodies are locators only: the file belongs to whoever created it,
typically the client that downloaded a response or the caller uploading a
file, and nothing here opens, moves or deletes it except to read it on
request.
"""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DataBody:
    """Body stored in memory."""

    data: bytes

    def read(self) -> bytes:
        return self.data

    def __len__(self):
        return len(self.data)


@dataclass(frozen=True)
class FileBody:
    """Body stored on disk at the given path."""

    path: pathlib.Path

    def __init__(self, path: Union[str, os.PathLike]):
        object.__setattr__(self, "path", pathlib.Path(path))

    def read(self) -> bytes:
        """Returns the content of the file.

        Raises:
            OSError: the file could not be read.
        """
        return self.path.read_bytes()


MessageBody = Union[DataBody, FileBody]


def is_empty(body: MessageBody | None) -> bool:
    """Returns true when there is no body or when it is an empty in-memory
    body. A file body is never considered empty, since telling would require
    opening it."""
    match body:
        case None:
            return True
        case DataBody(data=data):
            return not data
        case FileBody():
            return False
    raise TypeError(f"not a message body: {body!r}")
