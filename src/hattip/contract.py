"""Declarative descriptions of API operations.

A contract describes one operation of an HTTP API: its method, target URI,
headers, request payload, and the types its success and error responses
decode into. Contracts are usually small dataclasses:

    @dataclass
    class GetPost(GetContract[Post]):
        response_body = Post

        id: int

        @property
        def uri(self) -> URI:
            return API.appending_path("posts", str(self.id))

and are executed with hattip.client.send, which returns a Result.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Iterable, Optional, TypeVar, Union

from hattip.codec import DEFAULT_CODEC, Codec
from hattip.decoding import FileDownload, IgnoreBody
from hattip.decoding import NoBody as NoResponseBody
from hattip.encoding import NoBody as NoRequestBody
from hattip.error import MessageError
from hattip.headers import Header, Headers
from hattip.message import (
    DataHint,
    DecodedResponse,
    FileHint,
    Request,
    Response,
    ResponseBodyHint,
)
from hattip.method import Method
from hattip.uri import URI

T = TypeVar("T")


class Contract(Generic[T]):
    """Base class of API operations.

    Subclasses must provide a uri, as an attribute or a property. Every other
    attribute has a default:

        method              the HTTP method, GET
        headers             header fields of the request, none
        request_body        payload encoded as the request body, NoBody()
        response_body       type of the success payload, NoBody
        error_body          type of the error payload, IgnoreBody
        response_body_hint  where clients should store the response body
        codec               codec of JSON payloads, ISO 8601 dates
    """

    method: ClassVar[Method] = Method.GET
    response_body: ClassVar[Any] = NoResponseBody
    error_body: ClassVar[Any] = IgnoreBody
    codec: ClassVar[Codec] = DEFAULT_CODEC

    uri: URI
    headers: Union[Headers, Iterable[Header]] = ()
    request_body: Any = NoRequestBody()
    response_body_hint: ResponseBodyHint = DataHint()

    def make_request(self) -> Request:
        """Build the request of the operation, encoding its payload.

        Raises:
            RequestError: the request payload could not be encoded.
        """
        request = Request(
            uri=self.uri,
            method=self.method,
            headers=Headers(self.headers),
            response_body_hint=self.response_body_hint,
        )
        return request.encoding(self.request_body, self.codec)

    def decode(self, response: Response) -> DecodedResponse[T]:
        """Decode a response received for the operation.

        Raises:
            ResponseError: the status code is 400 or above and the error
                payload was decoded.
            DecodingError: the success or error payload could not be decoded.
        """
        return response.decode(self.response_body, self.error_body, self.codec)

    def did_receive_response(self, response: Response, request: Request):
        """Called with each response before it is decoded. Does nothing by
        default."""


class GetContract(Contract[T]):
    method = Method.GET


class PostContract(Contract[T]):
    method = Method.POST


class PutContract(Contract[T]):
    method = Method.PUT


class PatchContract(Contract[T]):
    method = Method.PATCH


class DeleteContract(Contract[T]):
    method = Method.DELETE


class DownloadContract(GetContract[FileDownload]):
    """GET operation whose response body is stored in a file.

    The file is written at download_path when set, to a temporary file picked
    by the client otherwise.
    """

    response_body = FileDownload

    download_path: Optional[Union[str, os.PathLike]] = None

    @property
    def response_body_hint(self) -> ResponseBodyHint:
        return FileHint(self.download_path)


@dataclass
class Result(Generic[T]):
    """Outcome of sending a contract: either a decoded response, or the
    error that ended the exchange."""

    response: Optional[DecodedResponse[T]] = None
    error: Optional[MessageError] = None

    def __post_init__(self):
        if (self.response is None) == (self.error is None):
            raise ValueError("a result holds either a response or an error")

    @classmethod
    def from_response(cls, response: DecodedResponse[T]) -> Result[T]:
        return cls(response=response)

    @classmethod
    def from_error(cls, error: MessageError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> Optional[int]:
        """Status code of the response, None when none was received."""
        if self.response is not None:
            return self.response.status_code
        return getattr(self.error, "status_code", None)

    @property
    def headers(self) -> Optional[Headers]:
        if self.response is not None:
            return self.response.headers
        return getattr(self.error, "headers", None)

    @property
    def value(self) -> T:
        """The decoded success payload.

        Raises:
            MessageError: the result is an error.
        """
        return self.unwrap().body

    def unwrap(self) -> DecodedResponse[T]:
        """Returns the decoded response, or raises the error."""
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response
