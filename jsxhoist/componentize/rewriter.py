"""Hoist planned groups into unit declarations and replace their occurrences."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple

from ..errors import StructuralLookupFailure
from ..markup.nodes import Document, Element, ExtractedUnit, make_reference
from .collector import CandidateGroup
from .walker import ParentIndex, TreeWalker


class ExtractedComponent(NamedTuple):
    name: str
    count: int
    fingerprint: str


@dataclass
class RewriteOutcome:
    components: List[ExtractedComponent] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)


def _where(el: Element) -> str:
    if el.position is None:
        return f"<{el.tag}>"
    return f"<{el.tag}> at line {el.position.line}"


def _locate(occ: Element, parents: ParentIndex) -> Tuple[Element, int]:
    """Return (parent, index) of *occ* by identity.

    Raises StructuralLookupFailure when the node is no longer in the tree.
    """
    if occ not in parents:
        raise StructuralLookupFailure("no longer reachable from any root")
    parent = parents.parent_of(occ)
    if parent is None:
        raise StructuralLookupFailure("has no parent element")
    for index, child in enumerate(parent.children):
        if child is occ:
            return parent, index
    raise StructuralLookupFailure("missing from its parent's children")


def rewrite_document(
    document: Document, planned: List[CandidateGroup]
) -> RewriteOutcome:
    """Apply *planned* groups to *document* in order, mutating it in place.

    Each group's example is cloned into a new declaration (inserted ahead of
    earlier ones) and every occurrence is swapped for ``<Name />``. Lookup
    failures are recorded as diagnostics; the run never aborts on them.
    """
    outcome = RewriteOutcome()
    roots_by_id = {id(r.element): r for r in document.roots}
    for group in planned:
        parents = TreeWalker(r.element for r in document.roots).parent_index()
        if group.example not in parents:
            outcome.diagnostics.append(
                f"SKIP {group.name}: example {_where(group.example)}"
                " is no longer in the tree"
            )
            continue

        body = copy.deepcopy(group.example)
        replaced = 0
        for occ in group.occurrences:
            try:
                parent, index = _locate(occ, parents)
            except StructuralLookupFailure as exc:
                outcome.diagnostics.append(f"SKIP {group.name}: {_where(occ)} {exc}")
                continue
            parent.children[index] = make_reference(group.name)
            root = roots_by_id.get(id(parents.root_of(parent)))
            if root is not None:
                root.dirty = True
            replaced += 1

        if not replaced:
            outcome.diagnostics.append(
                f"SKIP {group.name}: no occurrence could be replaced"
            )
            continue
        document.declarations.insert(0, ExtractedUnit(group.name, body, replaced))
        outcome.components.append(
            ExtractedComponent(group.name, replaced, group.fingerprint)
        )
    return outcome
