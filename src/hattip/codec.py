"""JSON codec used to encode request payloads and decode response payloads.

Payloads are plain Python values: dataclasses, pydantic models, lists, dicts,
strings, numbers, booleans, None, enums and datetimes. Decoding is driven by
the type the caller expects, so that a dataclass annotated with list[Post]
comes back as a list of Post instances rather than as dictionaries.

Validation and serialization are delegated to pydantic. Any object
implementing the Codec protocol can be used in place of JSONCodec.
"""

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, Type, Union

import pydantic
from pydantic import ConfigDict, RootModel, ValidationError
from pydantic.alias_generators import to_camel

from hattip.error import DecodingError, EncodingError


@enum.unique
class KeyCase(enum.Enum):
    """Casing of the keys of JSON objects.

    DEFAULT uses field names unchanged. CAMEL_CASE maps snake_case field names
    to camelCase keys, e.g. user_id to userId.
    """

    DEFAULT = "default"
    CAMEL_CASE = "camelCase"


@enum.unique
class DateStrategy(enum.Enum):
    """Representation of datetime values in JSON documents."""

    ISO8601 = "iso8601"
    SECONDS_SINCE_EPOCH = "seconds"
    MILLISECONDS_SINCE_EPOCH = "milliseconds"


@dataclass(frozen=True)
class JSONEncodingOptions:
    key_case: KeyCase = KeyCase.DEFAULT
    date_strategy: DateStrategy = DateStrategy.ISO8601


@dataclass(frozen=True)
class JSONDecodingOptions:
    key_case: KeyCase = KeyCase.DEFAULT
    date_strategy: DateStrategy = DateStrategy.ISO8601


class Codec(Protocol):
    """Protocol for codecs turning payloads into bytes and back."""

    def encode(self, value: Any) -> bytes:
        """Encode a value.

        Raises:
            EncodingError: the value cannot be represented.
        """
        ...

    def decode(self, type_: Any, data: bytes) -> Any:
        """Decode a value of the given type.

        Raises:
            DecodingError: the data is malformed or does not match the type.
        """
        ...


def _model_config(key_case: KeyCase, date_strategy: DateStrategy) -> ConfigDict:
    config = ConfigDict(ser_json_temporal=date_strategy.value)
    if date_strategy is not DateStrategy.ISO8601:
        config["val_temporal_unit"] = date_strategy.value
    if key_case is KeyCase.CAMEL_CASE:
        config["alias_generator"] = to_camel
        config["validate_by_name"] = True
        config["validate_by_alias"] = True
    return config


@functools.lru_cache(maxsize=None)
def _document_model(
    type_: Any, key_case: KeyCase, date_strategy: DateStrategy
) -> Type[RootModel]:
    # TypeAdapter refuses a config for dataclass types, so the options are
    # carried by a root model instead. Plain dataclasses nested in it inherit
    # its config.
    class Document(RootModel[type_]):
        model_config = _model_config(key_case, date_strategy)

    return Document


def coding_path_reason(loc: Sequence[Union[str, int]], message: str) -> str:
    """Format a message about the value found at loc, e.g.
    "[ author > name ]: Field required"."""
    if not loc:
        return message
    return f"[ {' > '.join(str(p) for p in loc)} ]: {message}"


def _validation_reason(error: ValidationError) -> str:
    details = error.errors(include_url=False)
    if not details:
        return str(error)
    first = details[0]
    if first["type"] == "json_invalid":
        return f"the given data was not valid JSON: {first['msg']}"
    return coding_path_reason(first["loc"], first["msg"])


def _type_name(type_: Any) -> str:
    return getattr(type_, "__qualname__", None) or repr(type_)


@dataclass
class JSONCodec:
    """Codec for JSON documents, built on pydantic."""

    encoding: JSONEncodingOptions = field(default_factory=JSONEncodingOptions)
    decoding: JSONDecodingOptions = field(default_factory=JSONDecodingOptions)

    def encode(self, value: Any) -> bytes:
        options = self.encoding
        try:
            model = _document_model(
                type(value), options.key_case, options.date_strategy
            )
            text = model.model_construct(value).model_dump_json(by_alias=True)
        except (pydantic.PydanticUserError, NameError) as e:
            raise EncodingError(
                f"cannot encode values of type {_type_name(type(value))}: {e}", e
            ) from e
        except (TypeError, ValueError, OverflowError) as e:
            # PydanticSerializationError is a ValueError.
            raise EncodingError(str(e), e) from e
        return text.encode("utf-8")

    def decode(self, type_: Any, data: bytes) -> Any:
        options = self.decoding
        try:
            model = _document_model(type_, options.key_case, options.date_strategy)
            return model.model_validate_json(data).root
        except ValidationError as e:
            raise DecodingError(_validation_reason(e), e) from e
        except (pydantic.PydanticUserError, NameError) as e:
            raise DecodingError(
                f"cannot decode values of type {_type_name(type_)}: {e}", e
            ) from e
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise DecodingError(str(e), e) from e


# Dates are exchanged as ISO 8601 strings unless a contract says otherwise.
DEFAULT_CODEC = JSONCodec()
