import asyncio
import enum
import ssl
from typing import Callable, Dict, Type, Union


@enum.unique
class Status(int, enum.Enum):
    """Enumeration of the categories that errors raised while sending a
    request, or HTTP status codes received in responses, fall into.

    The classification is informative: nothing in the request pipeline acts
    on it, callers can use it to decide whether an operation is worth
    attempting again.
    """

    UNSPECIFIED = 0
    OK = 1
    TIMEOUT = 2
    THROTTLED = 3
    INVALID_ARGUMENT = 4
    INVALID_RESPONSE = 5
    TEMPORARY_ERROR = 6
    PERMANENT_ERROR = 7
    CANCELLED = 8
    DNS_ERROR = 9
    TCP_ERROR = 10
    TLS_ERROR = 11
    HTTP_ERROR = 12
    UNAUTHENTICATED = 13
    PERMISSION_DENIED = 14
    NOT_FOUND = 15

    def __repr__(self):
        return self.name

    def __str__(self):
        return self.name

    @property
    def temporary(self) -> bool:
        return self in {
            Status.TIMEOUT,
            Status.THROTTLED,
            Status.TEMPORARY_ERROR,
            Status.DNS_ERROR,
            Status.TCP_ERROR,
            Status.TLS_ERROR,
            Status.HTTP_ERROR,
        }


_ERROR_TYPES: Dict[
    Type[BaseException], Union[Status, Callable[[BaseException], Status]]
] = {}


def status_for_error(error: BaseException) -> Status:
    """Returns a Status that corresponds to the specified error."""
    # See if the error matches one of the registered types.
    status_or_handler = _find_status_or_handler(error, _ERROR_TYPES)
    if status_or_handler is not None:
        if isinstance(status_or_handler, Status):
            return status_or_handler
        return status_or_handler(error)
    # If not, resort to standard error categorization.
    #
    # See https://docs.python.org/3/library/exceptions.html
    if isinstance(error, asyncio.CancelledError):
        return Status.CANCELLED
    elif isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return Status.TIMEOUT
    elif isinstance(error, ssl.SSLError) or isinstance(error, ssl.CertificateError):
        # Checked before OSError, which SSLError derives from.
        return Status.TLS_ERROR
    elif isinstance(error, TypeError) or isinstance(error, ValueError):
        return Status.INVALID_ARGUMENT
    elif isinstance(error, ConnectionError):
        return Status.TCP_ERROR
    elif isinstance(error, PermissionError):
        return Status.PERMISSION_DENIED
    elif isinstance(error, FileNotFoundError):
        return Status.NOT_FOUND
    elif isinstance(error, EOFError) or isinstance(error, OSError):
        return Status.TEMPORARY_ERROR
    return Status.PERMANENT_ERROR


def register_error_type(
    error_type: Type[BaseException],
    status_or_handler: Union[Status, Callable[[BaseException], Status]],
):
    """Register an error type to Status mapping.

    The caller can either register a base exception and a handler, which
    derives a Status from errors of this type. Or, if there's only one
    exception to Status mapping to register, the caller can simply pass
    the exception class and the associated Status.
    """
    _ERROR_TYPES[error_type] = status_or_handler


def _find_status_or_handler(obj, types):
    for cls in type(obj).__mro__:
        try:
            return types[cls]
        except KeyError:
            pass

    return None  # not found
