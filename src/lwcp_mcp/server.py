"""MCP server entry point for the LWCP codec.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport. The tools only
work on text handed to them; nothing here talks to an LWCP device.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import ErrorCode, LWCPError
from .models.value import ENCAP_BEGIN, ENCAP_END, Value, ValueType
from .protocol.commands import build_message
from .protocol.framing import StreamFramer
from .protocol.parser import parse_message

logger = logging.getLogger(__name__)

SERVER_NAME = "lwcp"

mcp = FastMCP(
    SERVER_NAME,
    instructions="Parse and build LWCP (line-oriented control protocol) messages",
)

# Session framer shared by feed/dequeue tools
_framer = StreamFramer()


def _to_value(value: Any) -> Any:
    """Map JSON input to a property value; booleans become enums."""
    if isinstance(value, bool):
        return Value("true" if value else "false", ValueType.ENUM)
    if isinstance(value, list):
        return Value([_to_value(v) for v in value])
    return value


# ─── CODEC TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def parse_text(text: str) -> dict[str, Any]:
    """Parse one or more newline-separated LWCP messages.

    Each line is parsed independently; encapsulated blocks may span lines.
    Rejected lines are reported with their error instead of aborting.

    Args:
        text: Raw LWCP text.
    """
    framer = StreamFramer()
    framer.feed(text if text.endswith("\n") else text + "\n")

    messages = []
    for msg in framer.dequeue_all():
        messages.append(msg.to_dict())
    rejected = [
        {"error": r.error.name if r.error else None, "detail": r.detail}
        for r in framer.rejected
    ]
    result: dict[str, Any] = {"messages": messages, "rejected": rejected}
    if framer.pending:
        result["incomplete"] = framer.pending
    return result


@mcp.tool()
def render_message(
    op: str,
    objects: list[str] | None = None,
    properties: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build an LWCP message and return its wire text.

    Args:
        op: Operation name, e.g. "call".
        objects: Selectors in addressing order, e.g. ["studio#1", "line#3"].
        properties: Property values by name. Names starting with "$" are
                    system properties; null makes a flag property.
    """
    try:
        msg = build_message(
            op,
            objects or [],
            {k: _to_value(v) for k, v in (properties or {}).items()},
        )
    except LWCPError as e:
        return {"error": e.code.name, "detail": str(e)}
    return {"text": msg.render(), "message": msg.to_dict()}


@mcp.tool()
def validate_message(text: str) -> dict[str, Any]:
    """Check a single message and report problems without queueing it.

    Args:
        text: Text of one message.
    """
    result = parse_message(text)
    issues = [{"error": i.code.name, "detail": i.detail} for i in result.issues]
    if result.message is None:
        return {
            "valid": False,
            "error": result.error.name if result.error else None,
            "detail": result.detail,
        }
    return {
        "valid": not issues,
        "issues": issues,
        "canonical": result.message.render(),
    }


# ─── SESSION FRAMER TOOLS ─────────────────────────────────────────────

@mcp.tool()
def feed(text: str) -> dict[str, Any]:
    """Append stream text to the session framer.

    Complete messages are queued; a trailing partial message is kept
    until more text arrives.

    Args:
        text: The next fragment of the stream.
    """
    queued = _framer.feed(text)
    return {"queued": queued, "waiting": len(_framer), "pending": _framer.pending}


@mcp.tool()
def dequeue() -> dict[str, Any]:
    """Take the oldest parsed message from the session framer."""
    msg = _framer.dequeue()
    if msg is None:
        return {"empty": True, "error": ErrorCode.NOMSG.name}
    return msg.to_dict()


@mcp.tool()
def dequeue_all() -> dict[str, Any]:
    """Take every parsed message from the session framer."""
    return {"messages": [m.to_dict() for m in _framer.dequeue_all()]}


@mcp.tool()
def reset_framer() -> dict[str, bool]:
    """Discard buffered text and queued messages."""
    _framer.reset()
    return {"reset": True}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

GRAMMAR = f"""message    := op WS objectPath WS propList
objectPath := selector ("." selector)*
selector   := identifier ("#" token)?
propList   := (propEntry [","|WS])*
propEntry  := propName ["=" value]
propName   := "$"? identifier
value      := array | dquote-string | squote-string | enum | number | encap
array      := "[" (value ",")* "]"
encap      := "{ENCAP_BEGIN}" .*? "{ENCAP_END}"
"""


@mcp.resource("lwcp://grammar")
def resource_grammar() -> str:
    """Wire grammar of LWCP messages."""
    return GRAMMAR


@mcp.resource("lwcp://errors")
def resource_errors() -> str:
    """LWCP status codes and their descriptions."""
    return json.dumps({code.name: code.value for code in ErrorCode})


@mcp.resource("lwcp://framer/status")
def resource_framer_status() -> str:
    """State of the session framer."""
    return json.dumps({
        "waiting": len(_framer),
        "pending": _framer.pending,
        "rejected": len(_framer.rejected),
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def compose_message(intent: str) -> str:
    """Guide the AI to express an intent as an LWCP message.

    Args:
        intent: What the message should do, e.g. "drop line 3 in studio 1".
    """
    return f"""Write an LWCP message that will: {intent}

Consider:
- The operation name comes first (e.g. get, set, call, drop)
- Objects are dot-separated selectors such as studio#1.line#3
- Strings are double quoted; bare words are enums
- System properties start with '$' (e.g. $ack)

Grammar is in the lwcp://grammar resource.
Use the render_message tool to produce the wire text, then
validate_message to check it."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
