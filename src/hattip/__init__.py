"""HatTip: declarative HTTP API contracts for Python."""

from hattip.body import DataBody, FileBody, MessageBody
from hattip.client import Client, send, send_with_completion
from hattip.codec import (
    DateStrategy,
    JSONCodec,
    JSONDecodingOptions,
    JSONEncodingOptions,
    KeyCase,
)
from hattip.contract import (
    Contract,
    DeleteContract,
    DownloadContract,
    GetContract,
    PatchContract,
    PostContract,
    PutContract,
    Result,
)
from hattip.decoding import FileDownload, IgnoreBody, JSONDecodable
from hattip.encoding import FileUpload, JSONEncodable
from hattip.error import (
    ClientError,
    DecodingError,
    EncodingError,
    HatTipError,
    MalformedURIError,
    MessageError,
    RequestError,
    ResponseError,
)
from hattip.headers import ContentType, Header, Headers
from hattip.message import DataHint, DecodedResponse, FileHint, Request, Response
from hattip.method import Method
from hattip.status import Status
from hattip.uri import URI, Path, Query, QueryItem, Scheme, parse_uri

__all__ = [
    "ClientError",
    "Client",
    "ContentType",
    "Contract",
    "DataBody",
    "DataHint",
    "DateStrategy",
    "DecodedResponse",
    "DecodingError",
    "DeleteContract",
    "DownloadContract",
    "EncodingError",
    "FileBody",
    "FileDownload",
    "FileHint",
    "FileUpload",
    "GetContract",
    "HatTipError",
    "Header",
    "Headers",
    "IgnoreBody",
    "JSONCodec",
    "JSONDecodable",
    "JSONDecodingOptions",
    "JSONEncodable",
    "JSONEncodingOptions",
    "KeyCase",
    "MalformedURIError",
    "MessageBody",
    "MessageError",
    "Method",
    "PatchContract",
    "Path",
    "PostContract",
    "PutContract",
    "Query",
    "QueryItem",
    "Request",
    "RequestError",
    "Response",
    "ResponseError",
    "Result",
    "Scheme",
    "Status",
    "URI",
    "parse_uri",
    "send",
    "send_with_completion",
]
