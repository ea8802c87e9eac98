"""Status codes and exceptions for the LWCP codec.

Construction-time validation raises; parsing never does. Parse failures are
reported as :class:`ErrorCode` values on the returned result objects.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """LWCP status vocabulary."""

    NONE = "No Error"
    NOMSG = "No Message"
    IGNORED = "Message Ignored"
    DELAYMSG = "Message Delayed"
    NOTFOUND = "Not Found"
    NOTIMPLEMENTED = "Not Implemented"
    EXISTS = "Already Exists"
    READONLY = "Read Only"
    WRITEONLY = "Write Only"
    NOMEM = "Out of Memory"
    BADPTR = "Bad Pointer"
    BADAUTH = "Unauthorized"
    BADSTATE = "Bad Internal State"
    BADTYPE = "Incorrect Type"
    ENDSTREAM = "End of Stream"
    OTHER = "Unknown Error"
    MSG_INCOMPLETE = "Message Incomplete"
    MSG_NOID = "Missing Identifier"
    MSG_INVID = "Invalid Identifier"
    MSG_NOOP = "Missing Operation"
    MSG_INVOP = "Invalid Operation"
    MSG_NOOBJ = "Missing Object"
    MSG_INVOBJ = "Invalid Object"
    MSG_INVPROP = "Invalid Property"
    MSG_INVSPROP = "Invalid System Property"
    MSG_INVVAL = "Invalid Value"
    MSG_SYNTAX = "Message Syntax Error"
    MSG_OTHER = "Unknown Message Error"


class LWCPError(Exception):
    """Base class for codec errors."""

    code: ErrorCode = ErrorCode.OTHER

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class InvalidIdentifier(LWCPError, ValueError):
    """A name does not match ``[A-Za-z]\\w*``."""

    code = ErrorCode.MSG_INVID


class InvalidOperation(InvalidIdentifier):
    """A message operation is missing or malformed."""

    code = ErrorCode.MSG_INVOP


class InvalidProperty(InvalidIdentifier):
    """A property name does not match ``$?[A-Za-z]\\w*``."""

    code = ErrorCode.MSG_INVPROP


class InvalidToken(LWCPError, ValueError):
    """An object id does not match ``\\w+``."""

    code = ErrorCode.MSG_INVOBJ


class PropertyNotFound(LWCPError, KeyError):
    """Lookup of a property that is in neither property map."""

    code = ErrorCode.NOTFOUND

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class BadType(LWCPError, TypeError):
    """A value cannot be retagged to the requested type."""

    code = ErrorCode.BADTYPE
