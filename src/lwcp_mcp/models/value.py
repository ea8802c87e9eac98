"""LWCP property values.

A :class:`Value` is a tagged union. The tag is a :class:`ValueType` and the
payload is a native Python object::

    +---------+----------------------+---------------------------------+
    | Type    | Payload              | Wire form                       |
    +---------+----------------------+---------------------------------+
    | NONE    | None                 | (empty, ``name`` only)          |
    | NUMBER  | int or float         | ``100``, ``-3.5``               |
    | STRING  | str (escape-decoded) | ``"text"``                      |
    | ENUM    | str                  | ``IDLE``                        |
    | ARRAY   | list[Value]          | ``[1,"a",[]]``                  |
    | ENCAP   | str (verbatim)       | ``%BeginEncap%...%EndEncap%``   |
    | OTHER   | any caller object    | ``str(payload)``                |
    | INVALID | None                 | (empty)                         |
    +---------+----------------------+---------------------------------+

Only STRING, ENUM and ENCAP may be retagged into one another. An ENCAP
payload never contains ``%EndEncap%``.
"""

from __future__ import annotations

import functools
import re
import types
from enum import Enum
from typing import Any

from ..errors import BadType

ENCAP_BEGIN = "%BeginEncap%"
ENCAP_END = "%EndEncap%"

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t"}
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPED_BEGIN = "%\\" + ENCAP_BEGIN[1:]

_PRODUCER_TYPES = (
    types.FunctionType,
    types.MethodType,
    types.BuiltinFunctionType,
    functools.partial,
)


class ValueType(Enum):
    """LWCP data types (not Python types)."""

    INVALID = "INVALID"
    NONE = "NONE"
    NUMBER = "NUMBER"
    STRING = "STRING"
    ARRAY = "ARRAY"
    ENUM = "ENUM"
    ENCAP = "ENCAP"
    OTHER = "OTHER"


TEXT_TYPES = frozenset({ValueType.STRING, ValueType.ENUM, ValueType.ENCAP})


class _Unset:
    """Sentinel for an input that was never assigned."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


def escape_string(text: str) -> str:
    """Escape text for use inside a double-quoted wire string.

    The begin marker is written as ``%\\BeginEncap%`` so the framer does not
    mistake it for an encapsulated block.
    """
    escaped = "".join(_ESCAPES.get(c, c) for c in text)
    return escaped.replace(ENCAP_BEGIN, _ESCAPED_BEGIN)


def unescape_string(text: str) -> str:
    """Decode backslash escapes from a quoted wire string."""
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), text)


class Value:
    """A single LWCP value.

    Args:
        val: Native input. ``None`` gives a NONE value, ``UNSET`` gives
            INVALID. A function, method or ``functools.partial`` is called
            once with no arguments and its result stored; other callables
            such as classes are stored as OTHER.
        type: Optional tag to apply after construction (see :meth:`retag`).
    """

    __slots__ = ("_type", "_val")

    def __init__(self, val: Any = None, type: ValueType | None = None) -> None:
        self._type = ValueType.INVALID
        self._val: Any = None
        self._assign(val)
        if type is not None:
            self.retag(type)

    @classmethod
    def from_native(cls, val: Any) -> Value:
        """Wrap a native input, passing existing ``Value`` objects through."""
        if isinstance(val, Value):
            return val
        return cls(val)

    @classmethod
    def invalid(cls) -> Value:
        return cls(UNSET)

    def _assign(self, val: Any, evaluate: bool = True) -> None:
        if val is UNSET:
            self._type, self._val = ValueType.INVALID, None
        elif val is None:
            self._type, self._val = ValueType.NONE, None
        elif isinstance(val, bool):
            self._type, self._val = ValueType.OTHER, val
        elif isinstance(val, (int, float)):
            self._type, self._val = ValueType.NUMBER, val
        elif isinstance(val, str):
            self._type, self._val = ValueType.STRING, val
        elif isinstance(val, (list, tuple)):
            self._type = ValueType.ARRAY
            self._val = [Value.from_native(v) for v in val]
        elif isinstance(val, _PRODUCER_TYPES):
            if not evaluate:
                # A producer returning another producer is never stored
                self._type, self._val = ValueType.INVALID, None
                return
            self._assign(val(), evaluate=False)
        else:
            self._type, self._val = ValueType.OTHER, val

    @property
    def type(self) -> ValueType:
        return self._type

    @property
    def val(self) -> Any:
        return self._val

    @property
    def valid(self) -> bool:
        return self._type is not ValueType.INVALID

    def retag(self, type: ValueType) -> Value:
        """Change the tag between STRING, ENUM and ENCAP.

        Raises:
            BadType: If either the current or the target tag is not textual,
                or an ENCAP payload would contain the end marker.
        """
        if self._type not in TEXT_TYPES or type not in TEXT_TYPES:
            raise BadType(f"Cannot set type of {self._type.value} to {type.value}")
        if type is ValueType.ENCAP and ENCAP_END in self._val:
            raise BadType(f"Encapsulated data cannot contain {ENCAP_END}")
        self._type = type
        return self

    def to_native(self) -> Any:
        """Unwrap to native Python objects (arrays recursively)."""
        if self._type is ValueType.ARRAY:
            return [v.to_native() for v in self._val]
        return self._val

    def equals(self, other: Any) -> bool:
        """Structural comparison against a native value."""
        if self._type is ValueType.ARRAY:
            if not isinstance(other, (list, tuple)) or len(other) != len(self._val):
                return False
            return all(v.equals(o) for v, o in zip(self._val, other))
        if isinstance(other, (list, tuple)):
            return False
        return self._val == other

    def render(self) -> str:
        """Wire text for this value."""
        t = self._type
        if t in (ValueType.NONE, ValueType.INVALID):
            return ""
        if t is ValueType.NUMBER:
            return repr(self._val) if isinstance(self._val, float) else str(self._val)
        if t is ValueType.STRING:
            return f'"{escape_string(self._val)}"'
        if t is ValueType.ENCAP:
            return f"{ENCAP_BEGIN}{self._val}{ENCAP_END}"
        if t is ValueType.ARRAY:
            return "[" + ",".join(v.render() for v in self._val) + "]"
        return str(self._val)

    def __str__(self) -> str:
        return self.render()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._type is other._type and self._val == other._val

    def __repr__(self) -> str:
        return f"Value({self._type.value}, {self._val!r})"
