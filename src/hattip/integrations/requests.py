"""Client sending requests with requests.

requests is a blocking library: each request runs in a worker thread, so
that the event loop is never blocked.

    with requests.Session() as session:
        result = await send(RequestsClient(session), GetPost(id=1))
"""

import asyncio
import contextlib
from typing import Any, Optional

import requests
from requests.structures import CaseInsensitiveDict

from hattip.body import DataBody, FileBody, MessageBody
from hattip.config import load_timeout
from hattip.headers import Headers
from hattip.integrations.files import CHUNK_SIZE, Download
from hattip.integrations.http import http_response_code_status
from hattip.message import FileHint, Request, Response
from hattip.status import Status, register_error_type


class RequestsClient:
    """Client built on a requests.Session.

    When no session is passed, one is created and closed along with this
    client. The timeout applies to each request; it is read from the
    HATTIP_TIMEOUT environment variable when omitted.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.timeout = load_timeout(timeout)
        self._owned = session is None
        self.session = session if session is not None else requests.Session()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.aclose()

    async def aclose(self):
        if self._owned:
            self.session.close()

    async def send(self, request: Request) -> Response:
        return await asyncio.to_thread(self._send, request)

    def _send(self, request: Request) -> Response:
        # requests takes a single value per header name.
        headers: CaseInsensitiveDict = CaseInsensitiveDict()
        for h in request.headers:
            if h.name in headers:
                headers[h.name] = f"{headers[h.name]}, {h.value}"
            else:
                headers[h.name] = h.value

        stream = isinstance(request.response_body_hint, FileHint)
        with contextlib.ExitStack() as stack:
            data: Any = None
            match request.body:
                case DataBody(data=content):
                    data = content
                case FileBody(path=path):
                    data = stack.enter_context(open(path, "rb"))

            http_response = self.session.request(
                request.method.value,
                str(request.uri),
                headers=headers,
                data=data,
                timeout=self.timeout,
                stream=stream,
            )
            with http_response:
                response_headers = Headers(http_response.headers.items())
                body: Optional[MessageBody]
                match request.response_body_hint:
                    case FileHint(path=path):
                        with Download(path) as download:
                            for chunk in http_response.iter_content(CHUNK_SIZE):
                                download.write(chunk)
                        body = download.body
                    case _:
                        content = http_response.content
                        body = DataBody(content) if content else None

            return Response(http_response.status_code, response_headers, body)


def requests_error_status(error: Exception) -> Status:
    # See https://requests.readthedocs.io/en/latest/api/#exceptions
    # and https://requests.readthedocs.io/en/latest/_modules/requests/exceptions/
    match error:
        case requests.HTTPError():
            if error.response is not None:
                return http_response_code_status(error.response.status_code)
        case requests.Timeout():
            return Status.TIMEOUT
        case requests.exceptions.SSLError():
            return Status.TLS_ERROR
        case requests.ConnectionError():
            return Status.TCP_ERROR
        case ValueError():  # base class of things like requests.InvalidURL, etc.
            return Status.INVALID_ARGUMENT

    return Status.TEMPORARY_ERROR


# Register base exception.
register_error_type(requests.RequestException, requests_error_status)
