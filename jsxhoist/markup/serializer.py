"""Render markup nodes to TSX and splice rewritten roots back into the source."""

from __future__ import annotations

from ..errors import ParseFailure, SerializationFailure
from .nodes import Document, Element, ExpressionSlot, ExtractedUnit, Node, Text
from .parser import parse_document

_BODY_INDENT = "    "


def render_node(node: Node) -> str:
    if isinstance(node, Text):
        return node.content
    if isinstance(node, ExpressionSlot):
        return node.raw
    if isinstance(node, Element):
        return _render_element(node)
    raise SerializationFailure(f"cannot render node of type {type(node).__name__}")


def _render_element(el: Element) -> str:
    head = "<" + el.tag + el.type_arguments
    head += "".join(" " + attr.raw for attr in el.attributes)
    if el.self_closing and not el.children:
        return head + " />"
    body = "".join(render_node(child) for child in el.children)
    return f"{head}>{body}</{el.tag}>"


def _reindent(text: str, column: int, indent: str) -> str:
    """Shift continuation lines left by up to *column* whitespace characters,
    then right by *indent*.

    Line endings come out as "\\n" so the body matches the declaration around it.
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    out = [lines[0]]
    for line in lines[1:]:
        # column counts characters, so a tab is one
        leading = len(line) - len(line.lstrip(" \t"))
        line = line[min(leading, column) :]
        out.append(indent + line if line else line)
    return "\n".join(out)


def render_declaration(unit: ExtractedUnit) -> str:
    """Render *unit* as a parameterless function component."""
    body = render_node(unit.body)
    column = unit.body.position.column if unit.body.position is not None else 0
    # Whitespace inside a template literal is content, not layout.
    if "`" not in body:
        body = _reindent(body, column, _BODY_INDENT)
    return (
        f"function {unit.name}() {{\n"
        f"  return (\n"
        f"{_BODY_INDENT}{body}\n"
        f"  );\n"
        f"}}\n"
    )


def serialize_document(document: Document) -> str:
    """Return the document's text with dirty roots re-rendered.

    Clean roots keep their original bytes. Declarations are inserted at the
    top of the file, after any directive prologue. Raises SerializationFailure
    if the result does not parse as TSX.
    """
    out = document.source_bytes
    dirty = sorted(
        (r for r in document.roots if r.dirty),
        key=lambda r: r.start_byte,
        reverse=True,
    )
    for root in dirty:
        rendered = render_node(root.element).encode("utf-8")
        out = out[: root.start_byte] + rendered + out[root.end_byte :]

    if document.declarations:
        block = "\n".join(render_declaration(u) for u in document.declarations)
        at = document.prologue_end
        head, tail = out[:at], out[at:]
        if at:
            head += b"\n"
        sep = b"" if tail.startswith(b"\n") else b"\n"
        out = head + block.encode("utf-8") + sep + tail

    text = out.decode("utf-8")
    try:
        parse_document(text)
    except ParseFailure as exc:
        raise SerializationFailure(f"rewritten source does not parse: {exc}") from exc
    return text
