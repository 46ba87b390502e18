"""
Typed value codec.

Converts domain values to the text of a token/string atom and back.

Supported out of the box:
    str, bool, int, UInt, Color, pydantic.AnyUrl, datetime.datetime, uuid.UUID

Any other type takes part by implementing the :class:`Serializable` protocol::

    class Layer:
        NULL_REPRESENTATION = "none"   # only needed for Optional[Layer]

        def serialize_to_string(self) -> str: ...

        @classmethod
        def deserialize_from_string(cls, text: str) -> "Layer": ...

    serialize(layer)                          -> "top_cu"
    serialize(None, Optional[Layer])          -> "none"
    deserialize("none", Optional[Layer])      -> None

Third-party types that cannot be given these methods are taught with
:func:`register_codec`.
"""

from __future__ import annotations

import re
import types
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import (
    Any,
    Callable,
    Optional,
    Protocol,
    Union,
    get_args,
    get_origin,
)

from pydantic import AnyUrl, TypeAdapter

from ..exceptions import FormatError
from ..types import Color, UInt

__all__ = [
    "Serializable",
    "serialize",
    "deserialize",
    "register_codec",
    "null_representation",
]

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")

# Characters allowed unencoded in a URL (RFC 3986 reserved, unreserved and "%")
_URL_RE = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+")

_url_adapter = TypeAdapter(AnyUrl)


class Serializable(Protocol):
    """Protocol for domain types stored as a single atom."""

    def serialize_to_string(self) -> str: ...

    @classmethod
    def deserialize_from_string(cls, text: str) -> Any: ...


@dataclass(frozen=True)
class _Codec:
    serializer: Callable[[Any], str]
    deserializer: Callable[[str], Any]
    null_representation: Optional[str] = None


_codecs: dict[type, _Codec] = {}


def register_codec(
    value_type: type,
    serializer: Callable[[Any], str],
    deserializer: Callable[[str], Any],
    null_representation: Optional[str] = None,
) -> None:
    """
    Teach the codec a type that does not implement :class:`Serializable`.

    Args:
        value_type: The type to register
        serializer: Converts a value to atom text
        deserializer: Converts atom text to a value; raises ``ValueError``
            or :class:`FormatError` on invalid text
        null_representation: Text standing for ``None`` in ``Optional[value_type]``
    """
    _codecs[value_type] = _Codec(serializer, deserializer, null_representation)


# =============================================================================
# Built-in codecs
# =============================================================================


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise FormatError("Not a valid boolean.", context={"text": repr(text)})


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise FormatError("Not a valid integer.", context={"text": repr(text)})
    return int(text)


def _parse_uint(text: str) -> UInt:
    if not _UINT_RE.fullmatch(text):
        raise FormatError("Not a valid unsigned integer.", context={"text": repr(text)})
    return UInt(int(text))


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _parse_timestamp(text: str) -> datetime:
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        value = datetime.fromisoformat(iso)
    except ValueError as e:
        raise FormatError("Not a valid datetime.", context={"text": repr(text)}) from e
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_color(value: Color) -> str:
    return value.name() if value.is_valid else ""


def _parse_color(text: str) -> Color:
    try:
        return Color.from_string(text)
    except ValueError as e:
        raise FormatError("Not a valid color.", context={"text": repr(text)}) from e


def _parse_url(text: str) -> AnyUrl:
    if not _URL_RE.fullmatch(text):
        raise FormatError("Not a valid URL.", context={"text": repr(text)})
    try:
        return _url_adapter.validate_python(text)
    except ValueError as e:
        raise FormatError("Not a valid URL.", context={"text": repr(text)}) from e


def _parse_uuid(text: str) -> uuid.UUID:
    try:
        return uuid.UUID(text)
    except ValueError as e:
        raise FormatError("Not a valid UUID.", context={"text": repr(text)}) from e


register_codec(str, str, str)
register_codec(bool, lambda v: "true" if v else "false", _parse_bool)
register_codec(int, lambda v: str(int(v)), _parse_int)
register_codec(UInt, lambda v: str(int(v)), _parse_uint)
register_codec(datetime, _format_timestamp, _parse_timestamp, null_representation="none")
register_codec(Color, _format_color, _parse_color, null_representation="")
register_codec(AnyUrl, str, _parse_url, null_representation="")
register_codec(uuid.UUID, str, _parse_uuid, null_representation="none")


# =============================================================================
# Dispatch
# =============================================================================


def _optional_inner(value_type: Any) -> Optional[type]:
    """Return ``X`` for ``Optional[X]`` / ``X | None``, else None."""
    if get_origin(value_type) not in (Union, types.UnionType):
        return None
    args = [a for a in get_args(value_type) if a is not type(None)]
    if len(args) != 1 or len(get_args(value_type)) != 2:
        return None
    return args[0]


def _lookup(value_type: type) -> Optional[_Codec]:
    for base in value_type.__mro__:
        codec = _codecs.get(base)
        if codec is not None:
            return codec
    return None


def null_representation(value_type: type) -> str:
    """
    Return the text standing for an absent ``value_type``.

    Raises:
        TypeError: If the type has no null representation
    """
    sentinel = getattr(value_type, "NULL_REPRESENTATION", None)
    if sentinel is None:
        codec = _lookup(value_type)
        sentinel = codec.null_representation if codec else None
    if sentinel is None:
        raise TypeError(f"{value_type.__name__} has no null representation")
    return sentinel


def serialize(value: Any, value_type: Any = None) -> str:
    """
    Convert ``value`` to atom text.

    Args:
        value: The value to convert
        value_type: Static type of the value; required to serialize ``None``
            as ``Optional[X]``

    Raises:
        TypeError: If the type of ``value`` cannot be serialized
    """
    inner = _optional_inner(value_type)
    if inner is not None:
        if value is None:
            return null_representation(inner)
    elif value is None:
        raise TypeError("Cannot serialize None without an Optional[...] value type")

    codec = _codecs.get(type(value))
    if codec is not None:
        return codec.serializer(value)
    if hasattr(value, "serialize_to_string"):
        return value.serialize_to_string()
    codec = _lookup(type(value))
    if codec is not None:
        return codec.serializer(value)
    raise TypeError(f"Cannot serialize value of type {type(value).__name__}")


def deserialize(text: str, target_type: Any) -> Any:
    """
    Convert atom text to a value of ``target_type``.

    Args:
        text: Raw atom text (already unescaped)
        target_type: Type to produce, e.g. ``int`` or ``Optional[Color]``

    Raises:
        FormatError: If the text does not match the grammar of the type
        TypeError: If the type cannot be deserialized
    """
    inner = _optional_inner(target_type)
    if inner is not None:
        if text == null_representation(inner):
            return None
        target_type = inner

    codec = _codecs.get(target_type)
    if codec is None and hasattr(target_type, "deserialize_from_string"):
        try:
            return target_type.deserialize_from_string(text)
        except FormatError:
            raise
        except ValueError as e:
            raise FormatError(
                f"Not a valid {target_type.__name__}.", context={"text": repr(text)}
            ) from e

    if codec is None and isinstance(target_type, type):
        codec = _lookup(target_type)
    if codec is None:
        raise TypeError(f"Cannot deserialize type {target_type!r}")
    return codec.deserializer(text)
