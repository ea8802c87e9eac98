"""Protocol layer: value parsing, message parsing, stream framing and builders."""

from .values import ParsedValue, parse_value
from .parser import ParseResult, parse_message, parse_property_list
from .framing import StreamFramer, find_message_end
from .commands import build_message, parse, render, render_line
