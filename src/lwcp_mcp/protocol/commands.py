"""High-level helpers for building, rendering and parsing LWCP messages."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..models.message import Message
from ..models.objref import ObjectRef
from .framing import StreamFramer


def build_message(
    op: str,
    objects: Iterable[ObjectRef | str] = (),
    properties: Mapping[str, Any] | None = None,
) -> Message:
    """Build a message in one call.

    Args:
        op: Operation name, e.g. ``"call"``.
        objects: ``ObjectRef`` instances or ``"name"`` / ``"name#id"`` selectors.
        properties: Property values keyed by name; ``$``-prefixed names become
            system properties and ``None`` values become flags.

    Example::

        build_message("call", ["studio#1", "line#3"], {"number": "101", "$ack": None})
        # call studio#1.line#3 number="101" $ack
    """
    msg = Message(op)
    for obj in objects:
        if isinstance(obj, str):
            obj = ObjectRef.from_selector(obj)
        msg.add_object(obj)
    for name, value in (properties or {}).items():
        msg.set_property(name, value)
    return msg


def render(message: Message) -> str:
    """Wire text for a message, without terminator."""
    return message.render()


def render_line(message: Message) -> str:
    """Wire text for a message, with terminator."""
    return message.render_line()


def parse(text: str) -> list[Message]:
    """Parse every complete message in ``text``.

    A final message without a terminator is parsed too, since the text is
    known to be complete.
    """
    framer = StreamFramer()
    framer.feed(text)
    if framer.pending.strip():
        framer.feed("\n")
    return framer.dequeue_all()
