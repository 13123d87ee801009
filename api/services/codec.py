"""Persisted text encoding of tag and topic lists."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import TypeAdapter, ValidationError

_string_list = TypeAdapter(list[str])


def encode_string_list(values: Iterable[str] | None) -> str:
    """Encode a sequence of strings as a JSON array string.

    ``None`` encodes as the empty array.
    """
    return _string_list.dump_json(list(values or [])).decode("utf-8")


def decode_string_list(raw: object) -> list[str]:
    """Decode a persisted tag/topic value.

    Accepts the JSON text written by :func:`encode_string_list` as well as
    an already-decoded list. Anything that is not an array of strings
    (invalid JSON, wrong type, ``None``) decodes to an empty list.
    """
    if raw is None:
        return []

    try:
        if isinstance(raw, str | bytes):
            return _string_list.validate_json(raw, strict=True)
        if isinstance(raw, list):
            return _string_list.validate_python(raw, strict=True)
    except ValidationError:
        return []

    return []
