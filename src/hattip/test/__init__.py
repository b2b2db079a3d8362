"""Test doubles for code built on hattip contracts.

StubClient implements the client protocol without any network access, so
that contracts and the code invoking them can be tested against canned
responses:

    client = StubClient(json_response(200, {"id": 1}))
    result = await send(client, GetPost(id=1))
    assert client.requests[0].uri.target == "/posts/1"
"""

import inspect
from typing import Any, Callable, Iterable, List, Optional, Union

from hattip.body import DataBody
from hattip.codec import DEFAULT_CODEC, Codec
from hattip.headers import ContentType, Header, Headers
from hattip.message import Request, Response

__all__ = ["StubClient", "json_response"]

Outcome = Union[Response, BaseException, Callable[[Request], Any]]


class StubClient:
    """Client returning canned outcomes, in order.

    Each outcome is a Response to return, an exception to raise, or a
    function called with the request and returning either (it may be a
    coroutine function). The last outcome is reused once the others are
    exhausted. Every request sent is recorded in the requests list.
    """

    def __init__(self, *outcomes: Outcome):
        if not outcomes:
            raise ValueError("StubClient requires at least one outcome")
        self._outcomes: List[Outcome] = list(outcomes)
        self.requests: List[Request] = []

    async def send(self, request: Request) -> Response:
        self.requests.append(request)
        if len(self._outcomes) > 1:
            outcome = self._outcomes.pop(0)
        else:
            outcome = self._outcomes[0]

        if isinstance(outcome, BaseException):
            raise outcome
        if not isinstance(outcome, Response):
            outcome = outcome(request)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if isinstance(outcome, BaseException):
                raise outcome
        return outcome


def json_response(
    status_code: int,
    value: Any,
    headers: Iterable[Header] = (),
    codec: Optional[Codec] = None,
) -> Response:
    """Returns a response carrying the value encoded as a JSON body."""
    if codec is None:
        codec = DEFAULT_CODEC
    return Response(
        status_code,
        Headers([ContentType.JSON.header, *headers]),
        DataBody(codec.encode(value)),
    )
