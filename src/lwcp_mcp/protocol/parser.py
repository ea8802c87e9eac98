"""Message parsing: one message's text into a :class:`Message`.

Layout of a message::

    op  objects                properties and system properties
    |   |                      |
    call studio#room700.line#3 number="555-1234", hybrid=false $ack

Separators in the property list are lenient: spaces and commas are
interchangeable and system properties may appear anywhere in it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..errors import ErrorCode, LWCPError
from ..models.message import Message
from ..models.objref import ObjectRef
from .values import parse_value

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\S+")
_SEPARATOR_RE = re.compile(r"[\s,]*")
_PROP_NAME_RE = re.compile(r"\$?[A-Za-z]\w*", re.ASCII)


@dataclass
class ParseIssue:
    """A non-fatal problem found while parsing a message."""

    code: ErrorCode
    detail: str


@dataclass
class ParseResult:
    """Outcome of :func:`parse_message`.

    ``message`` is ``None`` when the text was dropped; ``error`` then says why.
    """

    message: Message | None
    error: ErrorCode | None = None
    detail: str = ""
    issues: list[ParseIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.message is not None


def parse_message(text: str) -> ParseResult:
    """Parse the text of a single message (terminator optional)."""
    text = text.strip()

    match = _TOKEN_RE.match(text)
    if not match:
        return ParseResult(None, ErrorCode.MSG_NOOP, "Empty message")
    try:
        msg = Message(match.group(0))
    except LWCPError as e:
        logger.debug("Dropping message: %s", e)
        return ParseResult(None, e.code, str(e))
    text = text[match.end():].lstrip()

    match = _TOKEN_RE.match(text)
    if not match:
        return ParseResult(msg)
    try:
        for selector in match.group(0).split("."):
            msg.add_object(ObjectRef.from_selector(selector))
    except LWCPError as e:
        logger.debug("Dropping '%s' message: %s", msg.op, e)
        return ParseResult(None, ErrorCode.MSG_INVOBJ, str(e))
    text = text[match.end():]

    result = ParseResult(msg)
    parse_property_list(msg, text, result.issues)
    return result


def parse_property_list(
    msg: Message, text: str, issues: list[ParseIssue] | None = None
) -> str:
    """Parse properties from ``text`` into ``msg``.

    Stops at the first token that is not a property name.

    Returns:
        Whatever text could not be parsed (empty on success).
    """
    if issues is None:
        issues = []
    while True:
        text = text[_SEPARATOR_RE.match(text).end():]
        match = _PROP_NAME_RE.match(text)
        if not match:
            break
        name = match.group(0)
        text = text[match.end():].lstrip()
        if text.startswith("="):
            parsed = parse_value(text[1:])
            text = parsed.rest
            if parsed.error is not None:
                issues.append(ParseIssue(parsed.error, f"Bad value for property '{name}'"))
            msg.set_property(name, parsed.value)
        else:
            msg.set_property(name)

    if text:
        logger.debug("Ignoring trailing text in '%s' message: %r", msg.op, text)
        issues.append(ParseIssue(ErrorCode.MSG_SYNTAX, f"Unparsed text {text!r}"))
    return text
