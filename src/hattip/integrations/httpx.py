"""Client sending requests with httpx.

    async with HttpxClient() as client:
        result = await send(client, GetPost(id=1))
"""

from typing import AsyncIterator, Optional, Union

import httpx

from hattip.body import DataBody, FileBody, MessageBody
from hattip.config import load_timeout
from hattip.headers import Headers
from hattip.integrations.files import CHUNK_SIZE, Download, iter_file
from hattip.integrations.http import http_response_code_status
from hattip.message import FileHint, Request, Response
from hattip.status import Status, register_error_type


class HttpxClient:
    """Client built on an httpx.AsyncClient.

    When no AsyncClient is passed, one is created and closed along with this
    client. The timeout applies to each request; it is read from the
    HATTIP_TIMEOUT environment variable when omitted.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.timeout = load_timeout(timeout)
        self._owned = client is None
        self.client = client if client is not None else httpx.AsyncClient()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.aclose()

    async def aclose(self):
        if self._owned:
            await self.client.aclose()

    async def send(self, request: Request) -> Response:
        headers = [(h.name, h.value) for h in request.headers]
        content: Union[bytes, AsyncIterator[bytes], None] = None
        match request.body:
            case DataBody(data=data):
                content = data
            case FileBody(path=path):
                if "Content-Length" not in request.headers:
                    headers.append(("Content-Length", str(path.stat().st_size)))
                content = _aiter_file(request.body)

        http_request = self.client.build_request(
            request.method.value,
            str(request.uri),
            headers=headers,
            content=content,
            timeout=self.timeout,
        )
        http_response = await self.client.send(http_request, stream=True)
        try:
            response_headers = Headers(http_response.headers.multi_items())
            body: Optional[MessageBody]
            match request.response_body_hint:
                case FileHint(path=path):
                    with Download(path) as download:
                        async for chunk in http_response.aiter_bytes(CHUNK_SIZE):
                            download.write(chunk)
                    body = download.body
                case _:
                    data = await http_response.aread()
                    body = DataBody(data) if data else None
        finally:
            await http_response.aclose()

        return Response(http_response.status_code, response_headers, body)


async def _aiter_file(body: FileBody) -> AsyncIterator[bytes]:
    for chunk in iter_file(body.path):
        yield chunk


def httpx_error_status(error: Exception) -> Status:
    # See https://www.python-httpx.org/exceptions/
    match error:
        case httpx.HTTPStatusError():
            return http_response_code_status(error.response.status_code)
        case httpx.InvalidURL():
            return Status.INVALID_ARGUMENT
        case httpx.UnsupportedProtocol():
            return Status.INVALID_ARGUMENT
        case httpx.TimeoutException():
            return Status.TIMEOUT
        case httpx.ConnectError():
            return Status.TCP_ERROR

    return Status.TEMPORARY_ERROR


# Register base exceptions.
register_error_type(httpx.HTTPError, httpx_error_status)
register_error_type(httpx.StreamError, httpx_error_status)
register_error_type(httpx.InvalidURL, httpx_error_status)
register_error_type(httpx.CookieConflict, httpx_error_status)
