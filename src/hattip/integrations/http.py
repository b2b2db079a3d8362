from typing import Dict

from hattip.status import Status

# Codes whose meaning is specific enough to deserve their own status. Every
# other code is classified by its category.
_SPECIFIC_CODES: Dict[int, Status] = {
    400: Status.INVALID_ARGUMENT,  # Bad Request
    401: Status.UNAUTHENTICATED,  # Unauthorized
    403: Status.PERMISSION_DENIED,  # Forbidden
    404: Status.NOT_FOUND,  # Not Found
    408: Status.TIMEOUT,  # Request Timeout
    410: Status.NOT_FOUND,  # Gone
    422: Status.INVALID_ARGUMENT,  # Unprocessable Content
    429: Status.THROTTLED,  # Too Many Requests
    501: Status.PERMANENT_ERROR,  # Not Implemented
    504: Status.TIMEOUT,  # Gateway Timeout
}

_CATEGORIES: Dict[int, Status] = {
    1: Status.PERMANENT_ERROR,  # 1xx informational
    2: Status.OK,  # 2xx success
    3: Status.PERMANENT_ERROR,  # 3xx redirection
    4: Status.PERMANENT_ERROR,  # 4xx client error
    5: Status.TEMPORARY_ERROR,  # 5xx server error
}


def http_response_code_status(code: int) -> Status:
    """Returns a Status that's broadly equivalent to an HTTP response
    status code."""
    try:
        return _SPECIFIC_CODES[code]
    except KeyError:
        return _CATEGORIES.get(code // 100, Status.UNSPECIFIED)


def http_response_status(response) -> Status:
    """Returns the Status of any response object exposing a status_code
    attribute, such as hattip.message.Response or DecodedResponse."""
    return http_response_code_status(response.status_code)
