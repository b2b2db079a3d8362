"""Encoding of request payloads into message bodies.

A payload takes part in request encoding either by implementing the
MessageBodyEncodable protocol, or by being a value the codec knows how to
encode (dataclass, list, dict, ...), in which case it becomes a JSON body.
"""

from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass, replace
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from hattip.body import DataBody, FileBody, MessageBody
from hattip.codec import DEFAULT_CODEC, Codec
from hattip.error import EncodingError, RequestError
from hattip.headers import ContentType

if TYPE_CHECKING:
    from hattip.message import Request

logger = logging.getLogger(__name__)


@runtime_checkable
class MessageBodyEncodable(Protocol):
    """Protocol for payloads that encode themselves into a message body.

    The content_type attribute is the value of the Content-Type header set
    on requests carrying the encoded body, None to leave the header alone.
    """

    content_type: Optional[str]

    def encode_body(self, codec: Codec) -> Optional[MessageBody]:
        """Encode the payload.

        Returns:
            The body, or None for a request without body.

        Raises:
            EncodingError: the payload could not be encoded.
        """
        ...


def encode_json(payload: Any, codec: Codec) -> DataBody:
    """Encode a payload as a JSON body with the codec."""
    try:
        return DataBody(codec.encode(payload))
    except EncodingError:
        raise
    except (TypeError, ValueError) as e:
        # Raised by codecs other than JSONCodec.
        raise EncodingError(str(e), e) from e


class JSONEncodable:
    """Mixin for payloads encoded as JSON by the codec.

    Plain dataclasses get the same treatment without the mixin, it is only
    needed for classes that want to be recognized as MessageBodyEncodable.
    """

    content_type: ClassVar[Optional[str]] = ContentType.JSON.value

    def encode_body(self, codec: Codec) -> Optional[MessageBody]:
        return encode_json(self, codec)


@dataclass(frozen=True)
class NoBody:
    """Payload of requests without a body."""

    content_type: ClassVar[Optional[str]] = None

    def encode_body(self, codec: Codec) -> Optional[MessageBody]:
        return None


@dataclass(frozen=True)
class FileUpload:
    """Payload uploading the content of a file.

    The file is not read here, the request carries a file body that clients
    stream from disk.
    """

    path: pathlib.Path
    content_type: Optional[str] = None

    def __init__(
        self, path: Union[str, os.PathLike], content_type: Optional[str] = None
    ):
        object.__setattr__(self, "path", pathlib.Path(path))
        object.__setattr__(self, "content_type", content_type)

    def encode_body(self, codec: Codec) -> Optional[MessageBody]:
        return FileBody(self.path)


def encode_body(
    payload: Any, codec: Optional[Codec] = None
) -> tuple[Optional[MessageBody], Optional[str]]:
    """Encode a request payload.

    Returns:
        The body, or None for no body, and the content type to set.

    Raises:
        EncodingError: the payload could not be encoded.
    """
    if codec is None:
        codec = DEFAULT_CODEC
    if isinstance(payload, MessageBodyEncodable):
        return payload.encode_body(codec), payload.content_type
    return encode_json(payload, codec), ContentType.JSON.value


def encode_request(
    request: Request, payload: Any, codec: Optional[Codec] = None
) -> Request:
    """Returns a copy of the request carrying the encoded payload.

    The Content-Type header of the copy replaces the existing ones when the
    payload produced a body with a content type.

    Raises:
        RequestError: the payload could not be encoded.
    """
    try:
        body, content_type = encode_body(payload, codec)
    except EncodingError as e:
        logger.debug("encoding %s failed: %s", type(payload).__name__, e)
        raise RequestError.from_encoding_error(e) from e

    result = replace(request, body=body)
    if body is not None and content_type is not None:
        result.headers.replace_or_append("Content-Type", content_type)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "encoded %s into %s", type(payload).__name__, type(body).__name__
        )
    return result
