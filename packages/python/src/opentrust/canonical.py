"""
Canonical JSON serialization and hashing.

Seals and judgment ids are SHA-256 digests of a JSON text, so two
implementations only agree on a digest when they agree on every byte of
that text.  This module pins the three places where JSON encoders
usually differ:

Key order:
    Mappings are emitted in insertion order.  The builders in
    :mod:`opentrust.judgment` insert the defined fields in a fixed order
    (``T, I, F, provenance_chain`` and ``source_id, timestamp,
    description, metadata``).  Free-form metadata keeps the order its
    keys were inserted in, as ``JSON.stringify`` does, so a digest
    depends on that order.

Numbers:
    ECMAScript ``Number::toString`` rules, the format produced by
    ``JSON.stringify``.  ``1.0`` is written ``1``, ``1.5e-05`` is written
    ``0.000015`` and ``1e-07`` is written ``1e-7``.  Digits are the
    shortest string that round-trips, which is what ``repr(float)``
    already yields.

Strings:
    Minimal escaping (quote, backslash, control characters), non-ASCII
    emitted as-is, matching ``JSON.stringify``.

No whitespace is emitted between tokens.
"""

from __future__ import annotations

import hashlib
import json
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any


def format_number(value: int | float) -> str:
    """Format a number the way ``JSON.stringify`` does.

    Raises:
        ValueError: If *value* is NaN or infinite (not representable
            in JSON).
    """
    if isinstance(value, bool):
        raise TypeError("format_number does not accept bool")
    if isinstance(value, int):
        return str(value)

    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"Cannot canonicalize non-finite number: {value}")
    if value == 0.0:
        # Covers -0.0 as well: JSON.stringify(-0) === "0"
        return "0"

    sign = "-" if value < 0 else ""
    # repr() gives the shortest round-tripping digits; Decimal splits
    # them into a digit tuple and an exponent without re-rounding.
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent  # position of the decimal point relative to digits

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        exp_sign = "+" if e >= 0 else "-"
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        body = f"{mantissa}e{exp_sign}{abs(e)}"

    return sign + body


def canonical_metadata(value: Any) -> Any:
    """Return a plain copy of a metadata value, key order preserved.

    Read-only mappings become dicts and tuples become lists, so frozen
    provenance metadata serializes identically to the dict it was
    built from.
    """
    if isinstance(value, Mapping):
        return {key: canonical_metadata(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [canonical_metadata(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """Serialize *value* to canonical JSON text.

    Supports ``None``, ``bool``, ``int``, ``float``, ``str``, mappings
    (string keys, insertion order) and lists / tuples.

    Raises:
        TypeError: If *value* contains an unsupported type.
        ValueError: If *value* contains a non-finite float.
    """
    parts: list[str] = []
    _encode(value, parts)
    return "".join(parts)


def _encode(value: Any, out: list[str]) -> None:
    if value is None:
        out.append("null")
    elif value is True:
        out.append("true")
    elif value is False:
        out.append("false")
    elif isinstance(value, (int, float)):
        out.append(format_number(value))
    elif isinstance(value, str):
        out.append(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, Mapping):
        out.append("{")
        first = True
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(
                    f"Mapping keys must be strings, got: {type(key).__name__}"
                )
            if not first:
                out.append(",")
            first = False
            out.append(json.dumps(key, ensure_ascii=False))
            out.append(":")
            _encode(item, out)
        out.append("}")
    elif isinstance(value, (list, tuple)):
        out.append("[")
        for i, item in enumerate(value):
            if i:
                out.append(",")
            _encode(item, out)
        out.append("]")
    else:
        raise TypeError(
            f"Value of type {type(value).__name__} is not JSON-serializable"
        )


def sha256_hex(text: str) -> str:
    """SHA-256 of the UTF-8 bytes of *text*, as 64 lowercase hex chars."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
