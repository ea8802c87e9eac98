"""LWCP message model.

Wire layout (sections separated by spaces, empty sections omitted)::

    +-----+----------------------+---------------------+-------------------+
    | op  | objects              | properties          | system properties |
    | get | studio#1.line#3      | number="101",state  | $ack $seq=4       |
    +-----+----------------------+---------------------+-------------------+

Fields are only changed through the ``add_*``/``set_*`` methods, which
validate every op, object and property name against the wire grammar.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping

from ..errors import ErrorCode, InvalidOperation, InvalidProperty, PropertyNotFound
from .objref import NAME_RE, ObjectRef
from .value import Value

PROP_NAME_RE = re.compile(r"\$?[A-Za-z]\w*", re.ASCII)
SYSTEM_PREFIX = "$"
MESSAGE_TERMINATOR = "\n"


class PropertyMap(dict):
    """Ordered ``name -> Value`` mapping."""

    def pairs(self) -> list[list[str]]:
        """``[['flag'], ['name', 'value'], ...]``"""
        result = []
        for name, value in self.items():
            text = value.render()
            result.append([name, text] if text else [name])
        return result

    def entries(self) -> list[str]:
        """``['flag', 'name=value', ...]``"""
        return ["=".join(pair) for pair in self.pairs()]


class Message:
    """An operation applied to a path of objects, with properties."""

    def __init__(self, op: str) -> None:
        if not isinstance(op, str) or not NAME_RE.fullmatch(op):
            raise InvalidOperation(f"Invalid operation {op!r}")
        self._op = op
        self._objects: list[ObjectRef] = []
        self._props = PropertyMap()
        self._sys_props = PropertyMap()

    @property
    def op(self) -> str:
        return self._op

    @property
    def objects(self) -> tuple[ObjectRef, ...]:
        return tuple(self._objects)

    @property
    def properties(self) -> Mapping[str, Value]:
        return MappingProxyType(self._props)

    @property
    def system_properties(self) -> Mapping[str, Value]:
        return MappingProxyType(self._sys_props)

    def add_object(self, obj: ObjectRef | str, id: str | None = None) -> Message:
        """Append an object selector; returns ``self`` for chaining."""
        if not isinstance(obj, ObjectRef):
            obj = ObjectRef(obj, id)
        self._objects.append(obj)
        return self

    def set_property(self, name: str, value: Any = None) -> Message:
        """Set (or overwrite) a property.

        Names starting with ``$`` go to the system properties. ``value`` may
        be a :class:`Value` or any native input accepted by ``Value``; when
        omitted the property is a flag with no payload.
        """
        if not isinstance(name, str) or not PROP_NAME_RE.fullmatch(name):
            raise InvalidProperty(
                f"Invalid property name {name!r}",
                ErrorCode.MSG_INVSPROP
                if isinstance(name, str) and name.startswith(SYSTEM_PREFIX)
                else None,
            )
        target = self._sys_props if name.startswith(SYSTEM_PREFIX) else self._props
        target[name] = Value.from_native(value)
        return self

    def get_property_value(self, name: str) -> Value:
        """Look up a property (ordinary first, then system) as a ``Value``."""
        if name in self._props:
            return self._props[name]
        if name in self._sys_props:
            return self._sys_props[name]
        raise PropertyNotFound(f"Property {name!r} not found in '{self._op}' message")

    def get_property(self, name: str) -> Any:
        """Look up a property as a native value."""
        return self.get_property_value(name).to_native()

    def has_property(self, name: str) -> bool:
        return name in self._props or name in self._sys_props

    def render(self) -> str:
        sections = [
            self._op,
            ".".join(o.render() for o in self._objects),
            ",".join(self._props.entries()),
            " ".join(self._sys_props.entries()),
        ]
        return " ".join(s for s in sections if s)

    def render_line(self) -> str:
        """Render with the message terminator appended."""
        return self.render() + MESSAGE_TERMINATOR

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "op": self._op,
            "objects": [{"name": o.name, "id": o.id} for o in self._objects],
            "properties": {k: v.to_native() for k, v in self._props.items()},
            "system_properties": {k: v.to_native() for k, v in self._sys_props.items()},
            "text": self.render(),
        }

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Message({self.render()!r})"
