"""Sending contracts through a client.

A client is anything with an asynchronous send method turning a Request into
a Response; the integrations package provides clients built on httpx, aiohttp
and requests. The functions of this module run the three steps of an
invocation in order: build the request, send it, decode the response. Each
step failure ends the invocation with the matching MessageError subclass in
the Result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol, TypeVar

from hattip.contract import Contract, Result
from hattip.error import ClientError, DecodingError, RequestError, ResponseError
from hattip.message import Request, Response

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Client(Protocol):
    """Protocol for transports sending requests.

    Implementations send exactly one request per call, with no retries. Any
    exception they raise is reported to the caller as a ClientError.
    """

    async def send(self, request: Request) -> Response: ...


async def send(client: Client, contract: Contract[T]) -> Result[T]:
    """Send the request of a contract and decode the response.

    Errors are reported through the result rather than raised, except for
    the cancellation of the calling task which propagates.
    """
    try:
        request = contract.make_request()
    except RequestError as e:
        logger.debug("building request of %s failed: %s", type(contract).__name__, e)
        return Result.from_error(e)

    if logger.isEnabledFor(logging.DEBUG):
        # The full URI may carry credentials.
        logger.debug(
            "sending %s %s%s",
            request.method.value,
            request.uri.origin,
            request.uri.target,
        )

    try:
        response = await client.send(request)
    except ClientError as e:
        logger.debug("sending request failed: %s", e)
        return Result.from_error(e)
    except Exception as e:
        logger.debug("sending request failed: %s", e)
        return Result.from_error(ClientError.wrap(e))

    logger.debug(
        "received response to %s %s: %d",
        request.method.value,
        request.uri.target,
        response.status_code,
    )
    contract.did_receive_response(response, request)

    try:
        decoded = contract.decode(response)
    except (ResponseError, DecodingError) as e:
        return Result.from_error(e)
    return Result.from_response(decoded)


def send_with_completion(
    client: Client,
    contract: Contract[T],
    completion: Callable[[Result[T]], None],
) -> asyncio.Task:
    """Schedule the invocation of a contract on the running event loop, and
    call completion with its result once it is done.

    The completion is not called when the task is cancelled. Must be called
    from a coroutine or a callback running in the event loop.
    """
    task = asyncio.get_running_loop().create_task(send(client, contract))

    def done(task: asyncio.Task):
        if task.cancelled():
            logger.debug("invocation of %s cancelled", type(contract).__name__)
            return
        error = task.exception()
        if error is not None:
            # Only raised by a faulty hook or decoder, results carry the rest.
            logger.error(
                "invocation of %s failed",
                type(contract).__name__,
                exc_info=error,
            )
            return
        completion(task.result())

    task.add_done_callback(done)
    return task
