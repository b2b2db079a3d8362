from dataclasses import dataclass

import pytest

from hattip.body import DataBody, FileBody
from hattip.decoding import (
    ErrorMessageBodyDecodable,
    FileDownload,
    IgnoreBody,
    JSONDecodable,
    NoBody,
    decode_body,
)
from hattip.error import DecodingError, ResponseError
from hattip.headers import Headers
from hattip.message import DecodedResponse, Response


@dataclass
class Post:
    id: int
    title: str


@dataclass
class APIError(JSONDecodable):
    message: str

    @property
    def description(self) -> str:
        return self.message


@dataclass
class PlainError:
    code: int


class Text:
    def __init__(self, text):
        self.text = text

    @classmethod
    def decode_body(cls, body, codec):
        if body is None:
            raise DecodingError("expected text")
        return cls(body.read().decode())


def test_no_body_accepts_absent_or_empty_body():
    assert decode_body(NoBody, None) == NoBody()
    assert decode_body(NoBody, DataBody(b"")) == NoBody()


def test_no_body_rejects_body():
    with pytest.raises(DecodingError, match="unexpected response body for NoBody: hi"):
        decode_body(NoBody, DataBody(b"hi"))


def test_no_body_rejects_file(tmp_path):
    with pytest.raises(DecodingError):
        decode_body(NoBody, FileBody(tmp_path / "body"))


def test_ignore_body_keeps_raw_body():
    decoded = decode_body(IgnoreBody, DataBody(b"oops"))
    assert decoded.body == DataBody(b"oops")
    assert decoded.description == "oops"


def test_ignore_body_rejects_absent_body():
    with pytest.raises(DecodingError):
        decode_body(IgnoreBody, None)


def test_ignore_body_describes_file(tmp_path):
    path = tmp_path / "body"
    assert IgnoreBody(FileBody(path)).description == path.as_uri()


def test_file_download(tmp_path):
    path = tmp_path / "download"
    assert decode_body(FileDownload, FileBody(path)) == FileDownload(path)
    with pytest.raises(DecodingError):
        decode_body(FileDownload, DataBody(b"data"))
    with pytest.raises(DecodingError):
        decode_body(FileDownload, None)


def test_dataclass_decodes_from_json():
    assert decode_body(Post, DataBody(b'{"id": 1, "title": "t"}')) == Post(1, "t")


def test_json_decodes_from_file(tmp_path):
    path = tmp_path / "post.json"
    path.write_bytes(b'{"id": 1, "title": "t"}')
    assert decode_body(Post, FileBody(path)) == Post(1, "t")


def test_json_from_unreadable_file(tmp_path):
    with pytest.raises(DecodingError, match="reading response body failed"):
        decode_body(Post, FileBody(tmp_path / "missing.json"))


def test_json_requires_body():
    with pytest.raises(DecodingError):
        decode_body(Post, None)


def test_custom_decodable():
    assert decode_body(Text, DataBody(b"hello")).text == "hello"


def test_error_decodable():
    assert isinstance(APIError("x"), ErrorMessageBodyDecodable)


def test_decode_success_response():
    response = Response(
        200, Headers([("X-Test", "1")]), DataBody(b'{"id": 1, "title": "t"}')
    )
    decoded = response.decode(Post)
    assert decoded == DecodedResponse(200, Headers([("X-Test", "1")]), Post(1, "t"))
    assert decoded.map(lambda post: post.title).body == "t"


def test_decode_error_response_with_description():
    response = Response(404, body=DataBody(b'{"message": "not found"}'))
    with pytest.raises(ResponseError) as exc_info:
        response.decode(Post, APIError)
    error = exc_info.value
    assert error.status_code == 404
    assert error.description == "not found"
    assert error.body == APIError("not found")
    assert str(error) == "[APIError] not found"


def test_decode_error_response_without_description():
    response = Response(400, body=DataBody(b'{"code": 7}'))
    with pytest.raises(ResponseError) as exc_info:
        response.decode(Post, PlainError)
    assert exc_info.value.description == "PlainError(code=7)"


def test_decode_error_response_defaults_to_ignore_body():
    response = Response(500, body=DataBody(b"Internal Server Error"))
    with pytest.raises(ResponseError) as exc_info:
        response.decode(Post)
    assert exc_info.value.description == "Internal Server Error"
    assert isinstance(exc_info.value.body, IgnoreBody)


def test_decode_error_response_failure():
    headers = Headers([("X-Test", "1")])
    response = Response(503, headers, DataBody(b"<html>"))
    with pytest.raises(DecodingError) as exc_info:
        response.decode(Post, APIError)
    error = exc_info.value
    assert error.status_code == 503
    assert error.headers == headers
    assert error.headers is not response.headers


def test_decoding_error_headers_are_not_shared():
    headers = Headers([("X-Test", "1")])
    response = Response(200, headers, DataBody(b"[]"))
    with pytest.raises(DecodingError) as exc_info:
        response.decode(Post)
    error = exc_info.value
    assert error.headers == headers
    assert error.headers is not response.headers
    response.headers.append("X-Other", "2")
    assert "X-Other" not in error.headers


def test_decode_error_response_without_body():
    with pytest.raises(DecodingError):
        Response(404).decode(Post)


def test_decode_success_response_failure():
    with pytest.raises(DecodingError) as exc_info:
        Response(200, body=DataBody(b'{"id": "one", "title": "t"}')).decode(Post)
    assert exc_info.value.status_code == 200
    assert exc_info.value.reason.startswith("[ id ]: Input should be a valid integer")


def test_status_decides_body_type():
    # A 3xx response is decoded with the success type.
    assert Response(304).decode(NoBody).body == NoBody()
    assert Response(204).ok
    assert not Response(400).ok
