"""Detect repeated JSX subtrees and hoist them into function components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import ExtractionFailure, ParseFailure, SerializationFailure
from ..markup.nodes import Document
from ..markup.parser import parse_document
from ..markup.serializer import serialize_document
from .collector import collect_candidates
from .options import ExtractorOptions
from .planner import plan_extractions
from .rewriter import ExtractedComponent, rewrite_document
from .walker import TreeWalker


@dataclass
class ExtractionResult:
    """Outcome of one extraction run.

    ``code`` is the original text whenever ``changed`` is False. ``failure`` is
    set only for fatal failures (parse or serialization).
    """

    code: str
    components: List[ExtractedComponent] = field(default_factory=list)
    changed: bool = False
    diagnostics: List[str] = field(default_factory=list)
    failure: Optional[ExtractionFailure] = None


def _used_names(source: str, base: str) -> set:
    return set(re.findall(rf"\b{re.escape(base)}\d+\b", source))


def extract_document(
    document: Document, options: Optional[ExtractorOptions] = None
) -> ExtractionResult:
    """Run collection, planning, rewriting and serialization on *document*.

    The document's tree is mutated; ``document.source`` is left untouched.
    """
    if options is None:
        options = ExtractorOptions()
    roots = [r.element for r in document.roots]
    parents = TreeWalker(roots).parent_index()

    groups = collect_candidates(roots, options, parents=parents)
    if not groups:
        return ExtractionResult(document.source)

    planned = plan_extractions(
        groups,
        parents,
        options.component_name_base,
        options.min_repeats,
        reserved_names=_used_names(document.source, options.component_name_base),
    )
    if not planned:
        return ExtractionResult(document.source)

    outcome = rewrite_document(document, planned)
    if not outcome.components:
        return ExtractionResult(document.source, diagnostics=outcome.diagnostics)

    try:
        code = serialize_document(document)
    except SerializationFailure as exc:
        return ExtractionResult(
            document.source, diagnostics=outcome.diagnostics, failure=exc
        )
    return ExtractionResult(code, outcome.components, True, outcome.diagnostics)


def extract_components(
    code: str, options: Optional[ExtractorOptions] = None
) -> ExtractionResult:
    """Extract repeated JSX fragments from TSX *code* into components.

    With nothing to extract the input is returned verbatim with
    ``changed=False``; unparseable input comes back untouched with
    ``failure`` set to the ParseFailure.
    """
    try:
        document = parse_document(code)
    except ParseFailure as exc:
        return ExtractionResult(code, failure=exc)
    return extract_document(document, options)
