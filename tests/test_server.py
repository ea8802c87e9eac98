"""Tests for the MCP tool functions."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            # Remove cached server module so it re-imports with our mock
            sys.modules.pop("lwcp_mcp.server", None)
            import lwcp_mcp.server as server_mod

    return server_mod


def test_parse_text_tool():
    server = _get_server_module()
    result = server.parse_text('call studio#1.line#3 number="101" $ack\n9bad\ndrop line#6')
    assert [m["op"] for m in result["messages"]] == ["call", "drop"]
    assert result["messages"][0]["properties"] == {"number": "101"}
    assert result["rejected"][0]["error"] == "MSG_INVOP"
    assert "incomplete" not in result


def test_parse_text_reports_incomplete():
    server = _get_server_module()
    result = server.parse_text("set a data=%BeginEncap%\nstill open")
    assert result["messages"] == []
    assert result["incomplete"].startswith("set a")


def test_render_message_tool():
    server = _get_server_module()
    result = server.render_message(
        "call", ["studio#1", "line#3"], {"hybrid": False, "number": "101", "$ack": None}
    )
    assert result["text"] == 'call studio#1.line#3 hybrid=false,number="101" $ack'


def test_render_message_tool_error():
    server = _get_server_module()
    result = server.render_message("call", ["bad selector"])
    assert result["error"] == "MSG_INVID"


def test_validate_message_tool():
    server = _get_server_module()
    assert server.validate_message("set obj a=1")["valid"] is True
    bad = server.validate_message("set obj a=!!")
    assert bad["valid"] is False
    assert bad["issues"][0]["error"] == "MSG_INVVAL"
    dropped = server.validate_message("set 1obj")
    assert dropped == {"valid": False, "error": "MSG_INVOBJ", "detail": dropped["detail"]}


def test_session_framer_tools():
    server = _get_server_module()
    assert server.feed("drop studio.line#3 data=%BeginEncap%\n")["queued"] == 0
    assert server.dequeue()["empty"] is True
    assert server.feed("%EndEncap%\nping\n")["queued"] == 2

    first = server.dequeue()
    assert first["properties"] == {"data": "\n"}
    assert [m["op"] for m in server.dequeue_all()["messages"]] == ["ping"]

    server.feed("partial")
    status = json.loads(server.resource_framer_status())
    assert status["pending"] == "partial"
    assert server.reset_framer() == {"reset": True}
    assert json.loads(server.resource_framer_status())["pending"] == ""


def test_resources():
    server = _get_server_module()
    assert "%BeginEncap%" in server.resource_grammar()
    errors = json.loads(server.resource_errors())
    assert errors["MSG_INCOMPLETE"] == "Message Incomplete"


def test_compose_prompt():
    server = _get_server_module()
    assert "drop line 3" in server.compose_message("drop line 3")
