import json
from typing import Any

from pydantic import BaseModel


def _ordered(value: Any) -> Any:
    # Sort by the key's string form so mixed int/str keys stay comparable.
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda item: str(item[0]))
        return {key: _ordered(item) for key, item in items}
    if isinstance(value, (list, tuple)):
        return [_ordered(item) for item in value]
    return value


def serialize(value: Any) -> bytes:
    """Canonical byte form used for size accounting.

    Strings and raw bytes are stored as-is; structured values are JSON with
    sorted keys and no whitespace.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    return json.dumps(_ordered(value), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def serialized_size(value: Any) -> int:
    return len(serialize(value))
