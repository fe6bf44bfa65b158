# tavno/infra/serialization.py
from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from types import UnionType
from typing import Any, Union, get_args, get_origin, get_type_hints


def to_document(x: Any) -> Any:
    """Flatten a model into JSON- and BSON-friendly values.

    Enums become their value, datetimes an ISO-8601 UTC string, dataclasses
    and dicts a ``str``-keyed dict.
    """
    if isinstance(x, Enum):
        return x.value
    if isinstance(x, datetime):
        if x.tzinfo is None:
            x = x.replace(tzinfo=timezone.utc)
        return x.astimezone(timezone.utc).isoformat()
    if is_dataclass(x):
        return {f.name: to_document(getattr(x, f.name)) for f in fields(x)}
    if isinstance(x, dict):
        return {str(k): to_document(v) for k, v in x.items()}
    if isinstance(x, list):
        return [to_document(v) for v in x]
    return x


def from_document(cls: type, doc: Any) -> Any:
    """Rebuild ``cls`` from a stored document; unknown keys such as ``_id`` are ignored."""
    if doc is None:
        return None
    if not is_dataclass(cls):
        return _decode(cls, doc)

    hints = get_type_hints(cls)
    kwargs = {
        f.name: _decode(hints.get(f.name, f.type), doc[f.name])
        for f in fields(cls)
        if f.name in doc
    }
    return cls(**kwargs)


def _decode(expected: Any, value: Any) -> Any:
    if value is None:
        return None

    origin = get_origin(expected)
    args = get_args(expected)
    if origin in (Union, UnionType):
        # Optional[T] and T | None
        inner = next((a for a in args if a is not type(None)), Any)
        return _decode(inner, value)
    if origin is list:
        inner = args[0] if args else Any
        return [_decode(inner, v) for v in value]
    if origin is dict:
        inner = args[1] if len(args) == 2 else Any
        return {str(k): _decode(inner, v) for k, v in value.items()}

    if isinstance(expected, type):
        if is_dataclass(expected):
            return from_document(expected, value)
        if issubclass(expected, Enum):
            return expected(value)
        if expected is datetime:
            return _decode_datetime(value)
    return value


def _decode_datetime(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
