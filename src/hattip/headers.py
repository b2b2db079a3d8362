from __future__ import annotations

import base64
import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union, overload


@dataclass(frozen=True)
class Header:
    """A single header field, as a name and a value."""

    name: str
    value: str

    def __str__(self):
        return f"{self.name}: {self.value}"


def _same_name(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


class Headers:
    """An ordered collection of HTTP header fields.

    Several fields may share the same name. All name comparisons are
    case-insensitive, the original case of names is preserved in the
    collection.

    A Headers instance belongs to a single message: requests and responses
    copy the headers they are constructed with.
    """

    __slots__ = ("_headers",)

    def __init__(
        self, headers: Iterable[Union[Header, Tuple[str, str]]] = ()
    ):
        self._headers: List[Header] = [
            h if isinstance(h, Header) else Header(*h) for h in headers
        ]

    @overload
    def append(self, header: Header) -> None: ...

    @overload
    def append(self, name: str, value: str) -> None: ...

    def append(self, header, value=None):
        """Append a header field, keeping existing fields with the same name."""
        if not isinstance(header, Header):
            if value is None:
                raise TypeError("append() requires a Header or a name and a value")
            header = Header(header, value)
        self._headers.append(header)

    @overload
    def replace_or_append(self, header: Header) -> None: ...

    @overload
    def replace_or_append(self, name: str, value: str) -> None: ...

    def replace_or_append(self, header, value=None):
        """Remove all the fields with the name of the header, then append it."""
        if not isinstance(header, Header):
            if value is None:
                raise TypeError(
                    "replace_or_append() requires a Header or a name and a value"
                )
            header = Header(header, value)
        self.remove_all(header.name)
        self._headers.append(header)

    def remove_all(self, name: str):
        """Remove all the fields with the given name."""
        self._headers = [h for h in self._headers if not _same_name(h.name, name)]

    def headers_with_name(self, name: str) -> List[Header]:
        return [h for h in self._headers if _same_name(h.name, name)]

    def values(self, name: str) -> List[str]:
        """Returns the values of all the fields with the given name, in order."""
        return [h.value for h in self.headers_with_name(name)]

    def first_value(self, name: str) -> Optional[str]:
        for h in self._headers:
            if _same_name(h.name, name):
                return h.value
        return None

    def copy(self) -> Headers:
        return Headers(self._headers)

    def appending(self, header, value=None) -> Headers:
        """Returns a copy of the headers with a field appended."""
        result = self.copy()
        result.append(header, value)
        return result

    def removing_all(self, name: str) -> Headers:
        """Returns a copy of the headers without the fields with the given name."""
        result = self.copy()
        result.remove_all(name)
        return result

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.first_value(name) is not None

    def __iter__(self) -> Iterator[Header]:
        return iter(list(self._headers))

    def __len__(self):
        return len(self._headers)

    def __eq__(self, other):
        if not isinstance(other, Headers):
            return NotImplemented
        return self._headers == other._headers

    def __repr__(self):
        return f"Headers({self._headers!r})"


class ContentType(str, enum.Enum):
    """Values of the Content-Type header field used by message bodies."""

    JSON = "application/json"
    OCTET_STREAM = "application/octet-stream"

    @property
    def header(self) -> Header:
        return Header("Content-Type", self.value)


def authorization_basic(username: str, password: str) -> Header:
    """Returns an Authorization header field for HTTP basic authentication."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return Header("Authorization", f"Basic {token}")


def authorization_bearer(token: str) -> Header:
    """Returns an Authorization header field carrying a bearer token."""
    return Header("Authorization", f"Bearer {token}")
