"""Parse TSX source into a Document of JSX roots using tree-sitter."""

from __future__ import annotations

from typing import List, Optional

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Parser
from tree_sitter import Node as TSNode

from ..errors import ParseFailure
from .nodes import (
    Attribute,
    Document,
    Element,
    ExpressionSlot,
    MarkupRoot,
    Node,
    SourcePosition,
    Text,
)

# jsx_fragment only exists in older grammar releases; newer ones emit a
# jsx_element whose opening tag has no name.
_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})

_TSX_LANGUAGE: Optional[Language] = None


def _make_parser() -> Parser:
    """Return a fresh TSX parser; the compiled language is loaded once."""
    global _TSX_LANGUAGE
    if _TSX_LANGUAGE is None:
        _TSX_LANGUAGE = Language(ts_typescript.language_tsx())
    return Parser(_TSX_LANGUAGE)


def _first_error(node: TSNode) -> Optional[TSNode]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _describe_error(root: TSNode) -> str:
    node = _first_error(root) or root
    row, col = node.start_point
    if node.is_missing:
        return f"missing {node.type!r} at line {row + 1}, column {col}"
    return f"syntax error at line {row + 1}, column {col}"


class _TreeBuilder:
    """Converts tree-sitter JSX nodes into the markup model."""

    def __init__(self, source: bytes) -> None:
        self._source = source

    def _slice(self, start: int, end: int) -> str:
        return self._source[start:end].decode("utf-8")

    def _text(self, node: TSNode) -> str:
        return self._slice(node.start_byte, node.end_byte)

    def _position(self, node: TSNode) -> SourcePosition:
        line_start = self._source.rfind(b"\n", 0, node.start_byte) + 1
        column = len(self._slice(line_start, node.start_byte))
        return SourcePosition(node.start_point[0] + 1, column)

    def roots(self, program: TSNode) -> List[MarkupRoot]:
        """Return the outermost JSX elements in source order."""
        found: List[MarkupRoot] = []
        stack = [program]
        while stack:
            node = stack.pop()
            if node.type in _ELEMENT_TYPES:
                found.append(
                    MarkupRoot(self.element(node), node.start_byte, node.end_byte)
                )
                continue
            stack.extend(reversed(node.children))
        return found

    def element(self, node: TSNode) -> Element:
        if node.type == "jsx_self_closing_element":
            el = self._open_tag(node)
            el.self_closing = True
            el.position = self._position(node)
            return el
        if node.type == "jsx_fragment":
            # "<" ">" children... "<" "/" ">"
            el = Element(tag="", position=self._position(node))
            opening_end = node.children[1].end_byte
            closing_start = node.children[-3].start_byte
            el.children = self._children(node.children[2:-3], opening_end, closing_start)
            return el
        open_tag = node.children[0]
        close_tag = node.children[-1]
        el = self._open_tag(open_tag)
        el.position = self._position(node)
        el.children = self._children(
            node.children[1:-1], open_tag.end_byte, close_tag.start_byte
        )
        return el

    def _open_tag(self, tag_node: TSNode) -> Element:
        name_node = tag_node.child_by_field_name("name")
        tag = self._text(name_node) if name_node is not None else ""
        type_arguments = ""
        attributes: List[Attribute] = []
        for child in tag_node.named_children:
            if child.type == "type_arguments":
                type_arguments = self._text(child)
            elif child.type in ("jsx_attribute", "jsx_expression"):
                attributes.append(self._attribute(child))
        return Element(tag=tag, attributes=attributes, type_arguments=type_arguments)

    def _attribute(self, node: TSNode) -> Attribute:
        raw = self._text(node)
        if node.type == "jsx_expression":
            return Attribute(name="", value=ExpressionSlot(raw), raw=raw)
        named = node.named_children
        name = self._text(named[0])
        value = self._attribute_value(named[-1]) if len(named) > 1 else None
        return Attribute(name=name, value=value, raw=raw)

    def _attribute_value(self, node: TSNode):
        if node.type == "string":
            return self._text(node)[1:-1]
        if node.type in _ELEMENT_TYPES:
            return self.element(node)
        return ExpressionSlot(self._text(node))

    def _children(self, nodes: List[TSNode], start: int, end: int) -> List[Node]:
        """Rebuild children; every gap between structural nodes becomes Text."""
        children: List[Node] = []
        cursor = start
        for child in nodes:
            if child.type in _ELEMENT_TYPES:
                built: Node = self.element(child)
            elif child.type == "jsx_expression":
                built = ExpressionSlot(self._text(child))
            else:
                continue
            if child.start_byte > cursor:
                children.append(Text(self._slice(cursor, child.start_byte)))
            children.append(built)
            cursor = child.end_byte
        if end > cursor:
            children.append(Text(self._slice(cursor, end)))
        return children


def _prologue_end(program: TSNode, source: bytes) -> int:
    """Return the offset just past a leading "use client"-style directive line."""
    end = 0
    for child in program.named_children:
        if child.type == "comment":
            continue
        first = child.named_children[0] if child.named_child_count else None
        if child.type != "expression_statement" or first is None:
            break
        if first.type != "string":
            break
        end = child.end_byte
    if end == 0:
        return 0
    newline = source.find(b"\n", end)
    return len(source) if newline == -1 else newline + 1


def parse_document(code: str) -> Document:
    """Parse *code* as TSX.

    Raises ParseFailure when tree-sitter reports any error or missing node.
    """
    source = code.encode("utf-8")
    tree = _make_parser().parse(source)
    program = tree.root_node
    if program.has_error:
        raise ParseFailure(_describe_error(program))
    builder = _TreeBuilder(source)
    return Document(
        source=code,
        roots=builder.roots(program),
        prologue_end=_prologue_end(program, source),
    )


def is_valid_tsx(code: str) -> bool:
    try:
        parse_document(code)
    except ParseFailure:
        return False
    return True
