"""diskmemcache.core.codec

Serialization is injected. The cache only needs bytes in and values out.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError
from pydantic_core import from_json, to_json

from diskmemcache.core.exceptions import CacheTypeError, DeserializationError


@runtime_checkable
class Codec(Protocol):
    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes, value_type: Any = None) -> Any: ...

    def check(self, value: Any, value_type: Any) -> Any: ...


@lru_cache(maxsize=256)
def _adapter(value_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(value_type)


class JsonCodec:
    """JSON via pydantic-core.

    Models, dataclasses, datetimes and the usual containers serialize without
    custom encoders. Reads without a ``value_type`` yield plain JSON values.
    """

    def __init__(self, *, indent: int | None = None) -> None:
        self.indent = indent

    def encode(self, value: Any) -> bytes:
        return to_json(value, indent=self.indent)

    def decode(self, data: bytes, value_type: Any = None) -> Any:
        try:
            raw = from_json(data)
        except ValueError as e:
            raise DeserializationError(f"invalid JSON: {e}") from e

        if value_type is None:
            return raw

        try:
            return _adapter(value_type).validate_python(raw)
        except ValidationError as e:
            raise CacheTypeError(f"cached value is not a valid {_type_name(value_type)}: {e}") from e

    def check(self, value: Any, value_type: Any) -> Any:
        """Strictly validate an in-memory value. No coercion."""

        try:
            return _adapter(value_type).validate_python(value, strict=True)
        except ValidationError as e:
            raise CacheTypeError(f"cached value is not a {_type_name(value_type)}: {e}") from e


def _type_name(value_type: Any) -> str:
    return getattr(value_type, "__name__", None) or repr(value_type)
