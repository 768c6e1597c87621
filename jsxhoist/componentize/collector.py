"""Group elements by fingerprint into extraction candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional

from ..markup.nodes import Element
from .fingerprint import compute_fingerprint
from .options import ExtractorOptions
from .walker import ParentIndex, TreeWalker


@dataclass
class CandidateGroup:
    """Elements sharing one fingerprint. Occurrences are borrowed, not copied."""

    fingerprint: str
    occurrences: List[Element]
    name: Optional[str] = None

    @property
    def example(self) -> Element:
        return self.occurrences[0]

    @property
    def count(self) -> int:
        return len(self.occurrences)


def _should_skip_tag(el: Element, skip_tags: FrozenSet[str]) -> bool:
    if not el.has_identifier_tag:
        return True
    return el.tag.lower() in skip_tags


def _inside_component(el: Element, parents: ParentIndex) -> bool:
    return any(a.is_component_reference for a in parents.ancestors(el))


def collect_candidates(
    roots: List[Element],
    options: ExtractorOptions,
    parents: Optional[ParentIndex] = None,
    fingerprint: Optional[Callable[[Element], str]] = None,
) -> List[CandidateGroup]:
    """Return groups of at least ``options.min_repeats`` same-shape elements.

    Groups are ordered by descending count; ties keep discovery order.
    """
    walker = TreeWalker(roots)
    if parents is None:
        parents = walker.parent_index()
    if fingerprint is None:

        def fingerprint(el: Element) -> str:
            return compute_fingerprint(el, options.fingerprint_options)

    by_fp: Dict[str, List[Element]] = {}
    for el in walker:
        if _should_skip_tag(el, options.skip_tags):
            continue
        parent = parents.parent_of(el)
        if parent is not None and _should_skip_tag(parent, options.skip_tags):
            continue
        # Already a reusable unit (hand-written or extracted earlier).
        if el.is_component_reference:
            continue
        # Declarations are inserted as siblings; roots cannot be replaced.
        if parent is None:
            continue
        by_fp.setdefault(fingerprint(el), []).append(el)

    groups: List[CandidateGroup] = []
    for fp, occurrences in by_fp.items():
        if len(occurrences) < options.min_repeats:
            continue
        # A unit body must not depend on context only valid inside another unit.
        if any(_inside_component(occ, parents) for occ in occurrences):
            continue
        groups.append(CandidateGroup(fingerprint=fp, occurrences=occurrences))

    groups.sort(key=lambda g: g.count, reverse=True)
    return groups
