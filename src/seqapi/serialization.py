"""
JSON encoding and decoding for request and response bodies.

Built on pydantic ``TypeAdapter`` so any target works: entity models, lists
of models, plain dicts, or builtin scalars. Link tables keep their
``{"Name": "template"}`` shape.

Enums are written by value, so wire enums are declared as ``str`` enums
whose values are the server's member names (``class Level(str, Enum)`` with
``ERROR = "Error"``). An enum with non-string values goes out as that value.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def serialize(content: Any) -> bytes:
    """Encode ``content`` as UTF-8 JSON, using wire (PascalCase) field names."""
    if content is None:
        return b"null"
    return _adapter(type(content)).dump_json(content, by_alias=True)


def decode(data: bytes | str, target: type[T]) -> T:
    """
    Decode a JSON document into ``target``.

    Raises:
        pydantic.ValidationError: If the body is not valid JSON or doesn't fit
            the target type.
    """
    return _adapter(target).validate_json(data)
