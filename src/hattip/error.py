from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from hattip.integrations.http import http_response_code_status
from hattip.status import Status, register_error_type, status_for_error

if TYPE_CHECKING:
    from hattip.headers import Headers


class HatTipError(Exception):
    """Base class for HatTip exceptions."""

    _status = Status.PERMANENT_ERROR

    def __init__(self, reason: str, underlying_error: Optional[BaseException] = None):
        super().__init__(reason)
        self.reason = reason
        self.underlying_error = underlying_error

    def __str__(self):
        if self.underlying_error is None:
            return self.reason
        return f"[{type(self.underlying_error).__name__}] {self.reason}"


class MalformedURIError(HatTipError, ValueError):
    """A string could not be parsed into a URI."""

    _status = Status.INVALID_ARGUMENT


class EncodingError(HatTipError, ValueError):
    """A payload could not be encoded into a message body."""

    _status = Status.INVALID_ARGUMENT


class MessageError(HatTipError):
    """Base class of the errors a contract invocation can end with."""


class RequestError(MessageError):
    """The request could not be built. Nothing was sent over the network."""

    _status = Status.INVALID_ARGUMENT

    @classmethod
    def from_encoding_error(cls, error: EncodingError) -> RequestError:
        return cls(f"request body encoding failed: {error.reason}", error)


class ClientError(MessageError):
    """The client failed to send the request or to receive its response.

    The underlying error is whatever the transport raised; it is never
    interpreted, only classified for information through the status property.
    """

    @classmethod
    def wrap(cls, error: BaseException) -> ClientError:
        return cls(str(error) or type(error).__name__, error)

    @property
    def status(self) -> Status:
        if self.underlying_error is None:
            return Status.TEMPORARY_ERROR
        return status_for_error(self.underlying_error)


class ResponseError(MessageError):
    """The server answered with an error status code and an error body that
    was decoded successfully."""

    def __init__(
        self,
        status_code: int,
        headers: Headers,
        description: str,
        body: Any = None,
    ):
        type_name = type(body).__name__ if body is not None else "ResponseError"
        super().__init__(f"[{type_name}] {description}")
        self.status_code = status_code
        self.headers = headers
        self.description = description
        self.body = body

    @property
    def status(self) -> Status:
        return http_response_code_status(self.status_code)


class DecodingError(MessageError, ValueError):
    """A response body, either success or error, could not be decoded.

    The status code and headers are set when the error comes out of a
    response; they are None when a body was decoded on its own.
    """

    _status = Status.INVALID_RESPONSE

    def __init__(
        self,
        reason: str,
        underlying_error: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        headers: Optional[Headers] = None,
    ):
        super().__init__(reason, underlying_error)
        self.status_code = status_code
        self.headers = headers

    def with_response(self, status_code: int, headers: Headers) -> DecodingError:
        """Returns a copy of the error carrying a response envelope."""
        return DecodingError(self.reason, self.underlying_error, status_code, headers)


def hattip_error_status(error: Exception) -> Status:
    if isinstance(error, ResponseError):
        return error.status
    if isinstance(error, ClientError):
        return error.status
    assert isinstance(error, HatTipError)
    return error._status


register_error_type(HatTipError, hattip_error_status)
