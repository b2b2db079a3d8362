from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar, Union

from hattip import decoding as response_bodies
from hattip import encoding as request_bodies
from hattip.body import DataBody, FileBody, MessageBody
from hattip.headers import Headers
from hattip.method import Method
from hattip.uri import URI

if TYPE_CHECKING:
    from hattip.codec import Codec

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class DataHint:
    """The response body should be kept in memory."""


@dataclass(frozen=True)
class FileHint:
    """The response body should be written to a file.

    When no path is given, the client picks a temporary file.
    """

    path: Optional[pathlib.Path] = None

    def __init__(self, path: Union[str, os.PathLike, None] = None):
        object.__setattr__(self, "path", None if path is None else pathlib.Path(path))


# Clients are free to ignore the hint.
ResponseBodyHint = Union[DataHint, FileHint]


@dataclass
class Request:
    """An HTTP request message."""

    NoBody = request_bodies.NoBody
    FileUpload = request_bodies.FileUpload

    uri: URI
    method: Method = Method.GET
    headers: Headers = field(default_factory=Headers)
    body: Optional[MessageBody] = None
    response_body_hint: ResponseBodyHint = field(default_factory=DataHint)

    def __post_init__(self):
        self.headers = Headers(self.headers)

    def encoding(self, payload: Any, codec: Optional[Codec] = None) -> Request:
        """Returns a copy of the request with the payload encoded as its body
        and the Content-Type header set accordingly.

        Raises:
            RequestError: the payload could not be encoded.
        """
        return request_bodies.encode_request(self, payload, codec)

    @property
    def message(self) -> str:
        """Textual representation of the request, in the style of HTTP/1.1."""
        lines = [f"{self.method.value} {self.uri.target} HTTP/1.1"]
        lines.extend(str(h) for h in self.headers)
        if isinstance(self.body, DataBody):
            try:
                text = self.body.data.decode("utf-8")
            except UnicodeDecodeError:
                pass
            else:
                lines.append("")
                lines.append(text)
        elif isinstance(self.body, FileBody):
            lines.append("")
            lines.append(f"<{self.body.path}>")
        return "\n".join(lines)

    def __str__(self):
        return self.message


@dataclass
class Response:
    """An HTTP response message, as returned by a client."""

    NoBody = response_bodies.NoBody
    IgnoreBody = response_bodies.IgnoreBody
    FileDownload = response_bodies.FileDownload

    status_code: int
    headers: Headers = field(default_factory=Headers)
    body: Optional[MessageBody] = None

    def __post_init__(self):
        self.headers = Headers(self.headers)

    def decoded(self, body: T) -> DecodedResponse[T]:
        """Returns a response with the raw body replaced by its decoded form."""
        return DecodedResponse(self.status_code, self.headers.copy(), body)

    def decode(
        self,
        body_type: Any,
        error_type: Any = None,
        codec: Optional[Codec] = None,
    ) -> DecodedResponse[Any]:
        """Decode the response body.

        The status code decides which type is used: error_type when it is 400
        or above, body_type otherwise. The error type defaults to IgnoreBody.

        Raises:
            ResponseError: the status code is 400 or above and the error body
                was decoded.
            DecodingError: the body, success or error, could not be decoded.
        """
        return response_bodies.decode_response(self, body_type, error_type, codec)

    @property
    def ok(self) -> bool:
        return self.status_code < 400


@dataclass
class DecodedResponse(Generic[T]):
    """A response whose body has been decoded into a value."""

    status_code: int
    headers: Headers
    body: T

    def map(self, transform: Callable[[T], U]) -> DecodedResponse[U]:
        return DecodedResponse(self.status_code, self.headers, transform(self.body))
