"""Markup tree model: elements, text runs, and opaque expression slots."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Union

# Plain JSX identifier: no member access (Foo.Bar) and no namespace (svg:rect).
_IDENTIFIER_TAG = re.compile(r"^[A-Za-z_$][\w$-]*$")


class SourcePosition(NamedTuple):
    """Where a node starts in the source (1-based line, 0-based column)."""

    line: int
    column: int


@dataclass(eq=False)
class Text:
    """Raw source text between structural children, whitespace included."""

    content: str

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()


@dataclass(eq=False)
class ExpressionSlot:
    """A ``{...}`` container; its payload is never inspected."""

    raw: str


@dataclass(eq=False)
class Attribute:
    # name is "" for a spread attribute ({...props})
    name: str
    value: Union[str, ExpressionSlot, "Element", None]
    raw: str


@dataclass(eq=False)
class Element:
    """A JSX element. Children are exclusively owned; there is no parent link."""

    tag: str
    attributes: List[Attribute] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    position: Optional[SourcePosition] = None
    self_closing: bool = False
    type_arguments: str = ""

    @property
    def has_identifier_tag(self) -> bool:
        """False for fragments, member expressions and namespaced names."""
        return bool(_IDENTIFIER_TAG.match(self.tag))

    @property
    def is_component_reference(self) -> bool:
        """True for custom units: by convention their tags start upper-case."""
        return self.tag[:1].isupper()


Node = Union[Element, Text, ExpressionSlot]


def make_reference(name: str) -> Element:
    """Return a bare self-closing invocation of the unit *name*."""
    return Element(tag=name, self_closing=True)


@dataclass
class MarkupRoot:
    """An outermost JSX element and the byte span it occupies in the source."""

    element: Element
    start_byte: int
    end_byte: int
    dirty: bool = False


@dataclass
class ExtractedUnit:
    name: str
    body: Element
    reference_count: int = 0


@dataclass
class Document:
    """A parsed TSX file: the source plus the JSX roots found in it."""

    source: str
    roots: List[MarkupRoot] = field(default_factory=list)
    # Byte offset where declarations may be inserted (after "use client"; etc.)
    prologue_end: int = 0
    declarations: List[ExtractedUnit] = field(default_factory=list)

    @property
    def source_bytes(self) -> bytes:
        return self.source.encode("utf-8")
