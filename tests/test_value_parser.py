"""Tests for value parsing."""

from lwcp_mcp.errors import ErrorCode
from lwcp_mcp.models.value import ValueType
from lwcp_mcp.protocol.values import MAX_ARRAY_DEPTH, parse_number, parse_value


def _val(text):
    return parse_value(text).value


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def test_positive_integer():
    v = _val("100")
    assert v.type is ValueType.NUMBER
    assert v.val == 100
    assert isinstance(v.val, int)


def test_explicit_positive_integer():
    assert _val("+5555").val == 5555


def test_negative_integer():
    assert _val("-100").val == -100


def test_hex_integer():
    assert _val("0xFF").val == 255
    assert _val("-0x10").val == -16


def test_leading_whitespace():
    assert _val("    100").val == 100


def test_floats():
    assert _val("3.1415").val == 3.1415
    assert _val("+3.1415").val == 3.1415
    assert _val("-3.1415").val == -3.1415


def test_exponent_is_float():
    assert _val("1.5e3").val == 1500.0
    assert _val("1e+20").val == 1e20


def test_leading_zero_integer():
    assert _val("010").val == 10


def test_malformed_numbers_invalid():
    """Text in the numeric character class that is not a number."""
    for text in ("12.3.4", "0x", "1f", "--5", "+-1"):
        parsed = parse_value(text)
        assert parsed.value.type is ValueType.INVALID, text
        assert parsed.error is ErrorCode.MSG_INVVAL


def test_parse_number_direct():
    assert parse_number("0x1a") == 26
    assert parse_number("2.5") == 2.5
    assert parse_number("0xZZ") is None


# ---------------------------------------------------------------------------
# Strings, enums and encapsulated blocks
# ---------------------------------------------------------------------------

def test_enum():
    v = _val("ENUM_999")
    assert v.type is ValueType.ENUM
    assert v.val == "ENUM_999"


def test_double_quoted_string():
    v = _val('"hello, world!"')
    assert v.type is ValueType.STRING
    assert v.val == "hello, world!"


def test_single_quoted_string():
    assert _val("'hello, world!'").val == "hello, world!"


def test_empty_strings():
    assert _val('""').equals("")
    assert _val("''").equals("")


def test_escaped_quote_decoded():
    assert _val(r'"say \"hi\""').val == 'say "hi"'
    assert _val(r"'it\'s'").val == "it's"


def test_escaped_newline_decoded():
    assert _val(r'"a\nb"').val == "a\nb"


def test_encap():
    v = _val('%BeginEncap% "Hello", %EndEncap%')
    assert v.type is ValueType.ENCAP
    assert v.val == ' "Hello", '


def test_empty_encap():
    assert _val("%BeginEncap%%EndEncap%").equals("")


def test_encap_stops_at_first_end_marker():
    parsed = parse_value("%BeginEncap%a%EndEncap% b=%BeginEncap%c%EndEncap%")
    assert parsed.value.val == "a"
    assert parsed.rest == " b=%BeginEncap%c%EndEncap%"


def test_encap_spans_newlines():
    assert _val("%BeginEncap%line1\nline2%EndEncap%").val == "line1\nline2"


def test_encap_no_escape_processing():
    assert _val(r"%BeginEncap%\n\"%EndEncap%").val == r"\n\""


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------

def test_empty_array():
    v = _val("[]")
    assert v.type is ValueType.ARRAY
    assert v.equals([])


def test_simple_array():
    assert _val("[1]").equals([1])


def test_mixed_array():
    assert _val('["str",  2.5, ""]').equals(["str", 2.5, ""])


def test_nested_array():
    assert _val('[[], [1,2], "a"]').equals([[], [1, 2], "a"])


def test_whitespace_in_array():
    assert _val("[ [ 1 ] , [ ] ]").equals([[1], []])


def test_array_rest():
    parsed = parse_value("[1,2] next=3")
    assert parsed.rest == " next=3"
    assert parsed.ok


def test_array_with_bad_element_keeps_prefix():
    parsed = parse_value("[1, !!, 3]")
    assert parsed.value.type is ValueType.ARRAY
    assert parsed.value.equals([1])
    assert parsed.error is ErrorCode.MSG_INVVAL


def test_unterminated_array_stops():
    parsed = parse_value("[1, 2")
    assert parsed.value.equals([1, 2])
    assert parsed.error is ErrorCode.MSG_INVVAL
    assert parsed.rest == ""


# ---------------------------------------------------------------------------
# Illegal input
# ---------------------------------------------------------------------------

def test_illegal_inputs_invalid():
    for text in ("!!!", "()", '"', "'", "%", "%BeginEncap% Not Closed",
                 "%EndEncap%", "][", "", "     "):
        parsed = parse_value(text)
        assert parsed.value.type is ValueType.INVALID, repr(text)
        assert parsed.value.equals(None)
        assert not parsed.ok


def test_illegal_token_consumed():
    parsed = parse_value("!!! next")
    assert parsed.rest == " next"


def test_illegal_stops_at_comma():
    parsed = parse_value("(x),y")
    assert parsed.rest == ",y"


def test_unclosed_quote_does_not_scan_past_span():
    parsed = parse_value('"abc')
    assert parsed.value.type is ValueType.INVALID
    assert parsed.rest == ""


def test_array_depth_limit():
    """Nesting past the limit is INVALID but the outer array is kept."""
    text = "[" * (MAX_ARRAY_DEPTH + 5) + "]" * (MAX_ARRAY_DEPTH + 5)
    parsed = parse_value(text + " tail")
    assert parsed.value.type is ValueType.ARRAY
    assert parsed.error is ErrorCode.MSG_INVVAL
    assert parsed.rest == " tail"


def test_array_at_depth_limit_parses():
    text = "[" * MAX_ARRAY_DEPTH + "1" + "]" * MAX_ARRAY_DEPTH
    parsed = parse_value(text)
    assert parsed.ok
    assert parsed.rest == ""
