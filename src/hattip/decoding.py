"""Decoding of response bodies into payloads.

A payload type takes part in response decoding either by implementing the
MessageBodyDecodable protocol, or by being a type the codec knows how to
decode (dataclass, list[...], dict[str, ...], ...) from a JSON body.
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Optional,
    Protocol,
    Type,
    TypeVar,
    runtime_checkable,
)

from hattip.body import DataBody, FileBody, MessageBody, is_empty
from hattip.codec import DEFAULT_CODEC, Codec
from hattip.error import DecodingError, ResponseError

if TYPE_CHECKING:
    from hattip.message import DecodedResponse, Response

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class MessageBodyDecodable(Protocol):
    """Protocol for payload types that decode themselves from a message body."""

    @classmethod
    def decode_body(cls, body: Optional[MessageBody], codec: Codec) -> Any:
        """Decode an instance from a body, None when the message has none.

        Raises:
            DecodingError: the body is missing, unexpected or malformed.
        """
        ...


@runtime_checkable
class ErrorMessageBodyDecodable(MessageBodyDecodable, Protocol):
    """Protocol for payloads representing errors reported by a server. The
    description is used in the message of the resulting ResponseError."""

    @property
    def description(self) -> str: ...


def _type_name(type_: Any) -> str:
    return getattr(type_, "__name__", None) or repr(type_)


def decode_json(type_: Any, body: Optional[MessageBody], codec: Codec) -> Any:
    """Decode a value of the given type from a JSON body with the codec."""
    if body is None:
        raise DecodingError(f"expected response body to decode {_type_name(type_)}")
    try:
        data = body.read()
    except OSError as e:
        raise DecodingError(f"reading response body failed: {e}", e) from e
    try:
        return codec.decode(type_, data)
    except DecodingError:
        raise
    except (TypeError, ValueError) as e:
        # Raised by codecs other than JSONCodec.
        raise DecodingError(str(e), e) from e


class JSONDecodable:
    """Mixin for payload types decoded from JSON by the codec.

    Plain dataclasses get the same treatment without the mixin.
    """

    @classmethod
    def decode_body(cls, body: Optional[MessageBody], codec: Codec) -> Any:
        return decode_json(cls, body, codec)


@dataclass(frozen=True)
class NoBody:
    """Payload of responses expected to come without a body.

    Decoding fails when the response carries a non-empty body, use IgnoreBody
    to accept and discard one.
    """

    @classmethod
    def decode_body(cls, body: Optional[MessageBody], codec: Codec) -> NoBody:
        if is_empty(body):
            return cls()
        match body:
            case DataBody(data=data):
                try:
                    text = data.decode("utf-8")
                except UnicodeDecodeError:
                    raise DecodingError("unexpected response body for NoBody") from None
                raise DecodingError(f"unexpected response body for NoBody: {text}")
            case FileBody(path=path):
                raise DecodingError(f"unexpected response body for NoBody at {path}")
        raise TypeError(f"not a message body: {body!r}")


@dataclass(frozen=True)
class IgnoreBody:
    """Payload keeping the raw body of a response without interpreting it.

    Decoding fails when the response has no body, use NoBody for those.
    IgnoreBody is the default error payload of contracts: its description is
    the body text, or the path of the file holding it.
    """

    body: MessageBody

    @classmethod
    def decode_body(cls, body: Optional[MessageBody], codec: Codec) -> IgnoreBody:
        if body is None:
            raise DecodingError("expected response body to decode IgnoreBody")
        return cls(body)

    @property
    def description(self) -> str:
        match self.body:
            case DataBody(data=data):
                return data.decode("utf-8", errors="replace")
            case FileBody(path=path):
                return path.as_uri() if path.is_absolute() else str(path)
        raise TypeError(f"not a message body: {self.body!r}")


@dataclass(frozen=True)
class FileDownload:
    """Payload of responses whose body was stored in a file by the client."""

    path: pathlib.Path

    @classmethod
    def decode_body(cls, body: Optional[MessageBody], codec: Codec) -> FileDownload:
        match body:
            case None:
                raise DecodingError("expected response body for FileDownload")
            case FileBody(path=path):
                return cls(path)
        raise DecodingError("expected file download for FileDownload")


def decode_body(
    type_: Type[T], body: Optional[MessageBody], codec: Optional[Codec] = None
) -> T:
    """Decode a payload of the given type from a body.

    Raises:
        DecodingError: the body could not be decoded.
    """
    if codec is None:
        codec = DEFAULT_CODEC
    decode = getattr(type_, "decode_body", None)
    if callable(decode):
        return decode(body, codec)
    return decode_json(type_, body, codec)


def describe_error(error: Any) -> str:
    """Returns the description of a decoded error payload."""
    description = getattr(error, "description", None)
    if isinstance(description, str):
        return description
    return str(error)


def decode_response(
    response: Response,
    body_type: Any,
    error_type: Any = None,
    codec: Optional[Codec] = None,
) -> DecodedResponse[Any]:
    """Decode the body of a response, choosing between the success and error
    payload types by status code alone.

    Raises:
        ResponseError: the status code is 400 or above and the error payload
            was decoded.
        DecodingError: the payload could not be decoded, whichever it was.
    """
    if error_type is None:
        error_type = IgnoreBody

    if response.status_code >= 400:
        try:
            error = decode_body(error_type, response.body, codec)
        except DecodingError as e:
            logger.debug(
                "decoding %s from %d response failed: %s",
                _type_name(error_type),
                response.status_code,
                e,
            )
            raise e.with_response(response.status_code, response.headers.copy()) from e
        description = describe_error(error)
        logger.debug(
            "decoded %s from %d response: %s",
            _type_name(error_type),
            response.status_code,
            description,
        )
        raise ResponseError(
            response.status_code, response.headers.copy(), description, error
        )

    try:
        value = decode_body(body_type, response.body, codec)
    except DecodingError as e:
        logger.debug(
            "decoding %s from %d response failed: %s",
            _type_name(body_type),
            response.status_code,
            e,
        )
        raise e.with_response(response.status_code, response.headers.copy()) from e
    return response.decoded(value)
