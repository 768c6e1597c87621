"""Greedy, most-repeated-first selection and naming of candidate groups."""

from __future__ import annotations

from typing import AbstractSet, Iterator, List, Set

from ..markup.nodes import Element
from .collector import CandidateGroup
from .walker import ParentIndex


def _names(base: str, reserved: AbstractSet[str]) -> Iterator[str]:
    counter = 0
    while True:
        counter += 1
        name = f"{base}{counter}"
        if name not in reserved:
            yield name


def _is_nested_in(el: Element, parents: ParentIndex, *claimed: Set[int]) -> bool:
    return any(id(a) in ids for a in parents.ancestors(el) for ids in claimed)


def plan_extractions(
    groups: List[CandidateGroup],
    parents: ParentIndex,
    component_name_base: str,
    min_repeats: int,
    reserved_names: AbstractSet[str] = frozenset(),
) -> List[CandidateGroup]:
    """Return the groups to extract, in processing order, with names assigned.

    An occurrence nested inside an occurrence of an earlier group (or an
    earlier occurrence of its own group) is dropped; a group left with fewer
    than *min_repeats* occurrences is dropped entirely. Names are numbered in
    the order groups are accepted, skipping *reserved_names*.
    """
    names = _names(component_name_base, reserved_names)
    claimed: Set[int] = set()
    planned: List[CandidateGroup] = []
    for group in groups:
        own: Set[int] = set()
        kept: List[Element] = []
        for occ in group.occurrences:
            if _is_nested_in(occ, parents, claimed, own):
                continue
            kept.append(occ)
            own.add(id(occ))
        if len(kept) < min_repeats:
            continue
        group.occurrences = kept
        group.name = next(names)
        claimed |= own
        planned.append(group)
    return planned
