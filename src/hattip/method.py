import enum


@enum.unique
class Method(str, enum.Enum):
    """HTTP request methods."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"

    def __repr__(self):
        return self.name

    def __str__(self):
        return self.value
