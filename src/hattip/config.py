import os
from typing import Optional

DEFAULT_TIMEOUT = 60.0


class NamedValueFromEnvironment:
    """A setting passed explicitly or, when omitted, read from an environment
    variable.

    The name of the setting is the name of the argument when the value was
    passed, or the name of the environment variable otherwise, so that error
    messages point at where the value came from.
    """

    __slots__ = ("_envvar", "_name", "_value", "_from_envvar")

    def __init__(
        self,
        envvar: str,
        name: str,
        value: Optional[str] = None,
        default: str = "",
    ):
        self._envvar = envvar
        self._name = name
        if value is None:
            self._value = os.environ.get(envvar) or default
            self._from_envvar = envvar in os.environ
        else:
            self._value = value
            self._from_envvar = False

    def __str__(self):
        return self.value

    def __repr__(self):
        return f"NamedValueFromEnvironment({self.name}={self.value!r})"

    @property
    def name(self) -> str:
        return self._envvar if self._from_envvar else self._name

    @property
    def value(self) -> str:
        return self._value


def load_timeout(timeout: Optional[float] = None) -> float:
    """Returns the timeout, in seconds, of the requests sent by clients.

    Uses the value of the HATTIP_TIMEOUT environment variable when no timeout
    is passed, DEFAULT_TIMEOUT if the variable is not set either.

    Raises:
        ValueError: the timeout is not a positive number.
    """
    setting = NamedValueFromEnvironment(
        "HATTIP_TIMEOUT",
        "timeout",
        None if timeout is None else str(timeout),
        default=str(DEFAULT_TIMEOUT),
    )
    try:
        seconds = float(setting.value)
    except ValueError:
        raise ValueError(
            f"invalid {setting.name}: {setting.value!r} is not a number of seconds"
        ) from None
    if seconds <= 0:
        raise ValueError(f"invalid {setting.name}: {setting.value!r} is not positive")
    return seconds
