"""Typed JSON codec built on :class:`pydantic.TypeAdapter`.

Any type pydantic can validate is a valid target: ``BaseModel``
subclasses, dataclasses, ``TypedDict``, primitives, and
``list``/``dict``/``tuple`` compositions of these.  Fields are encoded
under their aliases, the same names decoding expects.

Decoding is strict by default: missing required fields and type mismatches
raise :class:`~fetchcache.exceptions.DecodeError` instead of being
defaulted or coerced.  Unknown extra object fields are ignored, so
re-encoding a decoded value may drop them.

.. note::
   JSON has no representation for ``NaN`` or infinite floats.  pydantic
   serialises them as ``null``, which does not decode back into a
   ``float`` field.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from fetchcache.exceptions import DecodeError, EncodeError
from fetchcache.models import CodecConfig

T = TypeVar("T")

_MAX_REPORTED_ERRORS = 3


def _summarize(exc: ValidationError) -> str:
    """Condense a :class:`ValidationError` into one line."""
    parts = []
    for err in exc.errors()[:_MAX_REPORTED_ERRORS]:
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    remaining = exc.error_count() - len(parts)
    if remaining > 0:
        parts.append(f"... and {remaining} more")
    return "; ".join(parts)


class JSONCodec:
    """Encode typed values to JSON bytes and decode them back.

    Args:
        config: Codec settings.  ``strict`` disables type coercion on decode.

    Example::

        codec = JSONCodec()
        data = codec.encode(User(id=1, name="Ada"))
        user = codec.decode(data, User)
    """

    def __init__(self, config: Optional[CodecConfig] = None) -> None:
        self._config = config or CodecConfig()
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    @property
    def strict(self) -> bool:
        return self._config.strict

    def encode(self, value: Any, value_type: Optional[Any] = None) -> bytes:
        """Serialise *value* to compact UTF-8 JSON.

        Args:
            value: The value to encode.
            value_type: Type used to pick the serializer.  Defaults to
                ``type(value)``; pass it explicitly for generic containers
                such as ``list[User]``.

        Raises:
            EncodeError: If the value (or ``value_type``) has no JSON
                representation.
        """
        target = value_type if value_type is not None else type(value)
        try:
            return self._adapter(target).dump_json(value, by_alias=True)
        except (PydanticSerializationError, PydanticSchemaGenerationError) as exc:
            raise EncodeError(str(exc)) from exc

    def decode(self, data: bytes, target_type: type[T]) -> T:
        """Parse JSON *data* and validate it as *target_type*.

        Raises:
            DecodeError: If *data* is not valid JSON or does not match the
                structure of *target_type*.
        """
        adapter = self._adapter(target_type)
        try:
            # None defers to the target's own ConfigDict(strict=...).
            return adapter.validate_json(data, strict=True if self._config.strict else None)
        except ValidationError as exc:
            raise DecodeError(_summarize(exc), target_type) from exc

    def _adapter(self, target: Any) -> TypeAdapter[Any]:
        """Return a cached :class:`TypeAdapter` for *target*."""
        try:
            adapter = self._adapters.get(target)
        except TypeError:
            # Unhashable annotation; build a fresh adapter every time.
            return TypeAdapter(target)
        if adapter is None:
            adapter = TypeAdapter(target)
            self._adapters[target] = adapter
        return adapter
