"""Content-blind structural fingerprints for JSX elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from ..markup.nodes import Element, ExpressionSlot, Text


@dataclass(frozen=True)
class FingerprintOptions:
    """Which attributes feed the signature and how the class token is normalized."""

    # Attributes whose value forms the style-class token; the last one wins.
    class_attributes: Tuple[str, ...] = ("className", "class")
    # Attributes left out of the attribute count (e.g. "key").
    ignored_attributes: FrozenSet[str] = frozenset()
    normalize_class_tokens: bool = True


def _class_token(el: Element, options: FingerprintOptions) -> str:
    token = ""
    for attr in el.attributes:
        if attr.name not in options.class_attributes:
            continue
        if isinstance(attr.value, str):
            token = attr.value
            if options.normalize_class_tokens:
                token = " ".join(sorted(token.split()))
        elif isinstance(attr.value, ExpressionSlot):
            token = attr.value.raw
            if options.normalize_class_tokens:
                token = " ".join(token.split())
        else:
            token = ""
    return token


def _significant_child_count(el: Element) -> int:
    """Count children, ignoring whitespace-only text (source layout)."""
    return sum(
        1
        for child in el.children
        if not (isinstance(child, Text) and child.is_blank)
    )


def compute_fingerprint(
    el: Element, options: FingerprintOptions = FingerprintOptions()
) -> str:
    """Return ``tag:attributeCount:childCount:classToken`` for *el*.

    Leaf text and expression payloads never contribute, so elements with the
    same shape but different data share a fingerprint.
    """
    attr_count = sum(
        1 for attr in el.attributes if attr.name not in options.ignored_attributes
    )
    child_count = _significant_child_count(el)
    return f"{el.tag}:{attr_count}:{child_count}:{_class_token(el, options)}"
