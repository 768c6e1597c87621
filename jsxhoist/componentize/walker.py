"""Pre-order element traversal and a transient, identity-keyed parent index."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..markup.nodes import Element, Node


class ParentIndex:
    """Maps every reachable node to its parent element, by object identity.

    Valid only for the tree state it was built from; rebuild after mutating.
    """

    def __init__(self) -> None:
        # id(node) -> (node, parent); the node is kept so ids cannot be recycled.
        self._entries: Dict[int, Tuple[Node, Optional[Element]]] = {}

    def add(self, node: Node, parent: Optional[Element]) -> None:
        self._entries[id(node)] = (node, parent)

    def __contains__(self, node: object) -> bool:
        entry = self._entries.get(id(node))
        return entry is not None and entry[0] is node

    def __len__(self) -> int:
        return len(self._entries)

    def parent_of(self, node: Node) -> Optional[Element]:
        """Return the parent element, or None for roots and unknown nodes."""
        entry = self._entries.get(id(node))
        if entry is None or entry[0] is not node:
            return None
        return entry[1]

    def ancestors(self, node: Node) -> Iterator[Element]:
        """Yield ancestors from the immediate parent up to the root."""
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def root_of(self, node: Node) -> Node:
        top = node
        for top in self.ancestors(node):
            pass
        return top


class TreeWalker:
    """Restartable pre-order walk over the elements under *roots*."""

    def __init__(self, roots: Iterable[Element]) -> None:
        self._roots: List[Element] = list(roots)

    def __iter__(self) -> Iterator[Element]:
        stack: List[Element] = list(reversed(self._roots))
        while stack:
            el = stack.pop()
            yield el
            stack.extend(
                child for child in reversed(el.children) if isinstance(child, Element)
            )

    def parent_index(self) -> ParentIndex:
        index = ParentIndex()
        stack: List[Tuple[Node, Optional[Element]]] = [
            (root, None) for root in self._roots
        ]
        while stack:
            node, parent = stack.pop()
            index.add(node, parent)
            if isinstance(node, Element):
                stack.extend((child, node) for child in node.children)
        return index
