"""Insertion-ordered map with a JSON serializer that keeps declaration order."""

from __future__ import annotations

import json
import threading
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_jsonable_python


def encode_json(value: Any) -> str:
    """
    Compact JSON for a single value.

    OrderedMaps keep their insertion order and pydantic models their field
    order; plain dicts are emitted with sorted keys so repeated
    serializations are byte-identical.
    """
    if isinstance(value, OrderedMap):
        return value.serialize()
    if isinstance(value, BaseModel):
        # Unset (None) fields are omitted, as with model_dump(exclude_none=True).
        parts = []
        for name in type(value).model_fields:
            field_value = getattr(value, name)
            if field_value is not None:
                parts.append(f"{_encode_key(name)}:{encode_json(field_value)}")
        return "{" + ",".join(parts) + "}"
    if isinstance(value, dict):
        items = sorted(((str(k), v) for k, v in value.items()), key=lambda kv: kv[0])
        return "{" + ",".join(f"{_encode_key(k)}:{encode_json(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(encode_json(v) for v in value) + "]"
    return json.dumps(to_jsonable_python(value), ensure_ascii=False)


def _encode_key(key: str) -> str:
    return json.dumps(key, ensure_ascii=False)


class OrderedMap:
    """
    Append-only key/value container.

    `add` never updates in place: a repeated key is appended to the order
    again and `serialize` emits it once per `add`, each time with the most
    recently written value.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._keys: list[str] = []
        self._values: dict[str, Any] = {}

    def add(self, key: str, value: Any) -> None:
        with self._lock:
            self._keys.append(key)
            self._values[key] = value

    def serialize(self) -> str:
        with self._lock:
            parts = [f"{_encode_key(k)}:{encode_json(self._values[k])}" for k in self._keys]
        return "{" + ",".join(parts) + "}"

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._keys)

    def items(self) -> list[tuple[str, Any]]:
        with self._lock:
            return [(k, self._values[k]) for k in self._keys]

    def __getitem__(self, key: str) -> Any:
        with self._lock:
            return self._values[key]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def __repr__(self) -> str:
        return f"OrderedMap({self.serialize()})"
