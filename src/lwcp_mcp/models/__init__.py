"""Data models for LWCP values, object selectors and messages."""

from .value import ENCAP_BEGIN, ENCAP_END, UNSET, Value, ValueType
from .objref import ObjectRef
from .message import Message, PropertyMap
