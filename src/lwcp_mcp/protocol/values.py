"""Recursive-descent parser for LWCP values.

Alternatives are tried in a fixed order: array, double-quoted string,
single-quoted string, enum, number, encapsulated block. Text matching none
of them is consumed up to the next whitespace or comma and yields an
INVALID value. Parsing is best-effort: a failure is reported on the result
and the caller carries on with the remaining text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..errors import ErrorCode
from ..models.value import ENCAP_BEGIN, ENCAP_END, Value, ValueType, unescape_string

logger = logging.getLogger(__name__)

_DQUOTE_RE = re.compile(r'"((?:\\.|[^"\\])*)"', re.DOTALL)
_SQUOTE_RE = re.compile(r"'((?:\\.|[^'\\])*)'", re.DOTALL)
_ENUM_RE = re.compile(r"[A-Za-z]\w*", re.ASCII)
_NUMBER_RE = re.compile(r"[0-9a-fA-Fx.+\-]+")
_ENCAP_RE = re.compile(re.escape(ENCAP_BEGIN) + r"(.*?)" + re.escape(ENCAP_END), re.DOTALL)
_JUNK_RE = re.compile(r"[^\s,]*")

MAX_ARRAY_DEPTH = 64


@dataclass
class ParsedValue:
    """Result of :func:`parse_value`."""

    value: Value
    rest: str
    error: ErrorCode | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_number(text: str) -> int | float | None:
    """Convert a numeric literal, or return ``None`` if it is malformed.

    Literals with ``.`` (or a decimal exponent) are floats. Integers take an
    optional sign and an optional ``0x`` prefix.
    """
    body = text.lstrip("+-")
    is_hex = body[:2].lower() == "0x"
    try:
        if "." in text or (not is_hex and "e" in text.lower()):
            return float(text)
        if len(text) - len(body) > 1:
            return None
        sign = -1 if text.startswith("-") else 1
        if is_hex:
            return sign * int(body[2:], 16)
        return sign * int(body, 10)
    except ValueError:
        return None


def parse_value(text: str, depth: int = 0) -> ParsedValue:
    """Parse one value from the start of ``text``.

    Arrays nested deeper than ``MAX_ARRAY_DEPTH`` are INVALID.

    Returns:
        A ``ParsedValue`` holding the value and the unconsumed text. The
        offending token is consumed even when the value is INVALID.
    """
    text = text.lstrip()

    if text.startswith("["):
        if depth >= MAX_ARRAY_DEPTH:
            match = _JUNK_RE.match(text)
            logger.debug("Array nesting deeper than %d", MAX_ARRAY_DEPTH)
            return ParsedValue(Value.invalid(), text[match.end():], ErrorCode.MSG_INVVAL)
        return _parse_array(text[1:], depth)

    match = _DQUOTE_RE.match(text) or _SQUOTE_RE.match(text)
    if match:
        return ParsedValue(Value(unescape_string(match.group(1))), text[match.end():])

    match = _ENUM_RE.match(text)
    if match:
        return ParsedValue(Value(match.group(0), ValueType.ENUM), text[match.end():])

    match = _NUMBER_RE.match(text)
    if match:
        num = parse_number(match.group(0))
        rest = text[match.end():]
        if num is None:
            logger.debug("Malformed number %r", match.group(0))
            return ParsedValue(Value.invalid(), rest, ErrorCode.MSG_INVVAL)
        return ParsedValue(Value(num), rest)

    match = _ENCAP_RE.match(text)
    if match:
        return ParsedValue(Value(match.group(1), ValueType.ENCAP), text[match.end():])

    match = _JUNK_RE.match(text)
    logger.debug("Cannot parse %r into value", match.group(0))
    return ParsedValue(Value.invalid(), text[match.end():], ErrorCode.MSG_INVVAL)


def _parse_array(text: str, depth: int) -> ParsedValue:
    """Parse array elements after the opening ``[``.

    On a bad element the partial array is kept and the error reported.
    """
    items: list[Value] = []
    error = None
    while True:
        text = text.lstrip()
        if text.startswith("]"):
            text = text[1:]
            break
        if text.startswith(","):
            text = text[1:]
            continue
        parsed = parse_value(text, depth + 1)
        text = parsed.rest
        if not parsed.value.valid:
            logger.debug("Illegal element in array near %r", text[:20])
            error = ErrorCode.MSG_INVVAL
            break
        items.append(parsed.value)
        if parsed.error is not None:
            # A nested array that ended early
            error = parsed.error
            break
    return ParsedValue(Value(items), text, error)
