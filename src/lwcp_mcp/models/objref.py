"""Object selectors: ``name`` or ``name#id``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import InvalidIdentifier, InvalidToken

NAME_RE = re.compile(r"[A-Za-z]\w*", re.ASCII)
ID_RE = re.compile(r"\w+", re.ASCII)


@dataclass(frozen=True)
class ObjectRef:
    """One addressed object. An empty ``id`` means no id."""

    name: str
    id: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not NAME_RE.fullmatch(self.name):
            raise InvalidIdentifier(f"Invalid object name {self.name!r}")
        if self.id is None:
            object.__setattr__(self, "id", "")
        elif not isinstance(self.id, str) or (self.id and not ID_RE.fullmatch(self.id)):
            raise InvalidToken(f"Invalid object id {self.id!r}")

    @classmethod
    def from_selector(cls, selector: str) -> ObjectRef:
        """Build from ``name`` or ``name#id`` text."""
        name, sep, ident = selector.partition("#")
        if sep and not ident:
            raise InvalidToken(f"Empty object id in {selector!r}")
        return cls(name, ident)

    def render(self) -> str:
        return f"{self.name}#{self.id}" if self.id else self.name

    def __str__(self) -> str:
        return self.render()
