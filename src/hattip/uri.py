"""Structured URIs.

A URI is kept as its components (scheme, user info, host, port, path and
query) rather than as a string, so that callers can build and extend request
targets without string manipulation. The string form is produced on demand
and parsing it back yields an equal URI:

    >>> uri = URI(host="api.example.com", path=Path(["posts", "1"]))
    >>> str(uri)
    'https://api.example.com/posts/1'
    >>> URI.parse(str(uri)) == uri
    True

Path components, query names and query values hold decoded text; they are
percent-encoded when rendered and decoded when parsed.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, unquote, urlsplit

from hattip.error import MalformedURIError

# Characters left as-is in the encoded form of each component, on top of the
# unreserved ones which quote() never escapes. See RFC 3986 section 3.
_PATH_SAFE = "!$&'()*+,;=:@"
_QUERY_SAFE = "!$'()*,:@/?"
_USERINFO_SAFE = "!$&'()*+,;="

_INVALID_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_INVALID_HOST_CHARS = frozenset("/?#@[]")


def _decode(raw: str, what: str) -> str:
    if _INVALID_ESCAPE.search(raw):
        raise MalformedURIError(f"invalid percent-encoding in {what}: {raw!r}")
    return unquote(raw)


@enum.unique
class Scheme(str, enum.Enum):
    """URI schemes supported by requests."""

    HTTP = "http"
    HTTPS = "https"

    def __str__(self):
        return self.value

    @property
    def default_port(self) -> int:
        return 80 if self is Scheme.HTTP else 443


PathElement = Union[str, "Path", Iterable[str]]


@dataclass(frozen=True)
class Path:
    """Path of a URI, as a sequence of components.

    Empty components are dropped, so the path always renders as a string
    starting with a single slash, and parsing that string gives back the same
    components.
    """

    components: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "components", tuple(c for c in self.components if c)
        )

    @classmethod
    def parse(cls, raw: str) -> Path:
        """Parse a percent-encoded path such as "/posts/1"."""
        return cls(_decode(c, "path") for c in raw.split("/"))

    def append(self, *elements: PathElement) -> Path:
        """Returns a new path with the elements appended.

        Strings are split on slashes before being appended, so that
        append("a/b") and append(["a", "b"]) produce the same path.
        """
        components = list(self.components)
        for element in elements:
            components.extend(_split_path_element(element))
        return Path(components)

    def __truediv__(self, other: PathElement) -> Path:
        return self.append(other)

    def __iter__(self) -> Iterator[str]:
        return iter(self.components)

    def __str__(self):
        return "/" + "/".join(quote(c, safe=_PATH_SAFE) for c in self.components)


def _split_path_element(element: PathElement) -> List[str]:
    if isinstance(element, Path):
        return list(element.components)
    if isinstance(element, str):
        return element.split("/")
    return [c for e in element for c in _split_path_element(e)]


@dataclass(frozen=True)
class QueryItem:
    name: str
    value: str

    @classmethod
    def parse(cls, raw: str) -> QueryItem:
        # An item without "=" is a name with an empty value.
        name, _, value = raw.partition("=")
        return cls(_decode(name, "query"), _decode(value, "query"))

    def __str__(self):
        name = quote(self.name, safe=_QUERY_SAFE)
        value = quote(self.value, safe=_QUERY_SAFE)
        return f"{name}={value}"


@dataclass(frozen=True)
class Query:
    """Query of a URI, as an ordered sequence of name/value items.

    Names may repeat. Equality is order-sensitive.
    """

    DELIMITER = "&"

    items: Tuple[QueryItem, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self,
            "items",
            tuple(i if isinstance(i, QueryItem) else QueryItem(*i) for i in self.items),
        )

    @classmethod
    def parse(cls, raw: str) -> Query:
        """Parse a percent-encoded query string, without the leading "?"."""
        return cls(
            tuple(QueryItem.parse(item) for item in raw.split(cls.DELIMITER) if item)
        )

    @classmethod
    def from_pairs(
        cls, pairs: Union[Mapping[str, str], Iterable[Tuple[str, str]]]
    ) -> Query:
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        return cls(tuple(QueryItem(name, value) for name, value in pairs))

    def append(self, name: str, value: str) -> Query:
        """Returns a new query with an item appended."""
        return Query(self.items + (QueryItem(name, value),))

    def values(self, name: str) -> List[str]:
        return [item.value for item in self.items if item.name == name]

    def first_value(self, name: str) -> Optional[str]:
        for item in self.items:
            if item.name == name:
                return item.value
        return None

    def __iter__(self) -> Iterator[QueryItem]:
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __str__(self):
        return self.DELIMITER.join(str(item) for item in self.items)


@dataclass(frozen=True)
class URI:
    """A structured http or https URI.

    The user, password and port are only meaningful along with a host, and a
    password requires a user. An empty query is stored as None.
    """

    scheme: Scheme = Scheme.HTTPS
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    path: Path = field(default_factory=Path)
    query: Optional[Query] = None

    def __post_init__(self):
        if not isinstance(self.scheme, Scheme):
            raise MalformedURIError(f"unsupported scheme: {self.scheme!r}")
        if self.host is None:
            if self.user is not None or self.port is not None:
                raise MalformedURIError("user and port require a host")
        elif not self.host:
            raise MalformedURIError("empty host, use None for a URI without one")
        elif _INVALID_HOST_CHARS.intersection(self.host):
            raise MalformedURIError(f"invalid host: {self.host!r}")
        if self.password is not None and self.user is None:
            raise MalformedURIError("password requires a user")
        if self.port is not None and not 0 <= self.port <= 65535:
            raise MalformedURIError(f"port out of range: {self.port}")
        if self.query is not None and not self.query:
            object.__setattr__(self, "query", None)

    @classmethod
    def parse(cls, raw: str) -> URI:
        """Parse a URI string.

        Raises:
            MalformedURIError: the scheme is missing or is neither http nor
                https, or the string cannot be split into components.
        """
        try:
            parts = urlsplit(raw)
        except ValueError as e:
            raise MalformedURIError(f"invalid URI {raw!r}: {e}", e) from e

        if not parts.scheme:
            raise MalformedURIError(f"missing scheme in URI {raw!r}")
        try:
            scheme = Scheme(parts.scheme.lower())
        except ValueError:
            raise MalformedURIError(
                f"unsupported scheme {parts.scheme!r} in URI {raw!r}"
            ) from None

        user, password, host, port = _split_authority(parts.netloc)
        return cls(
            scheme=scheme,
            user=user,
            password=password,
            host=host,
            port=port,
            path=Path.parse(parts.path),
            query=Query.parse(parts.query) if parts.query else None,
        )

    @property
    def origin(self) -> str:
        """The scheme, host and port, e.g. "https://example.com:8443"."""
        origin = f"{self.scheme.value}://"
        if self.host is not None:
            origin += _format_host(self.host)
            if self.port is not None:
                origin += f":{self.port}"
        return origin

    @property
    def target(self) -> str:
        """The path and query, as used in an HTTP request line."""
        if self.query:
            return f"{self.path}?{self.query}"
        return str(self.path)

    def with_path(self, path: Path) -> URI:
        return replace(self, path=path)

    def with_query(self, query: Optional[Query]) -> URI:
        return replace(self, query=query)

    def appending_path(self, *elements: PathElement) -> URI:
        return replace(self, path=self.path.append(*elements))

    def __str__(self):
        uri = f"{self.scheme.value}://"
        if self.host is not None:
            if self.user is not None:
                uri += quote(self.user, safe=_USERINFO_SAFE)
                if self.password is not None:
                    uri += ":" + quote(self.password, safe=_USERINFO_SAFE)
                uri += "@"
            uri += _format_host(self.host)
            if self.port is not None:
                uri += f":{self.port}"
        return uri + self.target


def parse_uri(raw: str) -> URI:
    """Parse a URI string. See URI.parse."""
    return URI.parse(raw)


def _format_host(host: str) -> str:
    return f"[{host}]" if ":" in host else host


def _split_authority(
    netloc: str,
) -> Tuple[Optional[str], Optional[str], Optional[str], Optional[int]]:
    user = password = None
    userinfo, at, hostport = netloc.rpartition("@")
    if at:
        raw_user, colon, raw_password = userinfo.partition(":")
        user = _decode(raw_user, "user")
        if colon:
            password = _decode(raw_password, "password")

    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise MalformedURIError(f"unterminated IPv6 address: {netloc!r}")
        host, rest = hostport[1:end], hostport[end + 1 :]
        if rest and not rest.startswith(":"):
            raise MalformedURIError(f"invalid authority: {netloc!r}")
        raw_port = rest[1:]
    else:
        host, _, raw_port = hostport.partition(":")

    port = None
    if raw_port:
        if not (raw_port.isascii() and raw_port.isdigit()) or int(raw_port) > 65535:
            raise MalformedURIError(f"invalid port: {raw_port!r}")
        port = int(raw_port)

    if not host:
        if user is not None or port is not None:
            raise MalformedURIError(f"authority without host: {netloc!r}")
        return None, None, None, None
    return user, password, host, port
