"""Client sending requests with aiohttp.

    async with AiohttpClient() as client:
        result = await send(client, GetPost(id=1))
"""

import contextlib
from typing import Any, Optional

import aiohttp

from hattip.body import DataBody, FileBody, MessageBody
from hattip.config import load_timeout
from hattip.headers import Headers
from hattip.integrations.files import CHUNK_SIZE, Download
from hattip.integrations.http import http_response_code_status
from hattip.message import FileHint, Request, Response
from hattip.status import Status, register_error_type


class AiohttpClient:
    """Client built on an aiohttp.ClientSession.

    When no session is passed, one is created on first use, since aiohttp
    sessions must be created in the event loop they run in, and closed along
    with this client. The timeout applies to each request; it is read from
    the HATTIP_TIMEOUT environment variable when omitted.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None,
    ):
        self.timeout = aiohttp.ClientTimeout(total=load_timeout(timeout))
        self._owned = session is None
        self._session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.aclose()

    async def aclose(self):
        if self._owned and self._session is not None:
            await self._session.close()
            self._session = None

    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def send(self, request: Request) -> Response:
        with contextlib.ExitStack() as stack:
            data: Any = None
            match request.body:
                case DataBody(data=content):
                    data = content
                case FileBody(path=path):
                    data = stack.enter_context(open(path, "rb"))

            async with self.session().request(
                request.method.value,
                str(request.uri),
                headers=[(h.name, h.value) for h in request.headers],
                data=data,
                timeout=self.timeout,
            ) as http_response:
                headers = Headers(http_response.headers.items())
                body: Optional[MessageBody]
                match request.response_body_hint:
                    case FileHint(path=path):
                        with Download(path) as download:
                            async for chunk in http_response.content.iter_chunked(
                                CHUNK_SIZE
                            ):
                                download.write(chunk)
                        body = download.body
                    case _:
                        content = await http_response.read()
                        body = DataBody(content) if content else None

                return Response(http_response.status, headers, body)


def aiohttp_error_status(error: Exception) -> Status:
    # See https://docs.aiohttp.org/en/stable/client_reference.html#client-exceptions
    match error:
        case aiohttp.InvalidURL():
            return Status.INVALID_ARGUMENT
        case aiohttp.ClientSSLError():
            return Status.TLS_ERROR
        case aiohttp.ServerTimeoutError():
            return Status.TIMEOUT
        case aiohttp.ClientConnectionError():
            return Status.TCP_ERROR
        case aiohttp.ClientPayloadError():
            return Status.HTTP_ERROR
        case aiohttp.ClientResponseError():
            return http_response_code_status(error.status)

    return Status.TEMPORARY_ERROR


# Register base exception.
register_error_type(aiohttp.ClientError, aiohttp_error_status)
