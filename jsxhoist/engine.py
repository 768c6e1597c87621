"""Load files, extract repeated markup, relabel, and write back."""

import sys
from pathlib import Path
from typing import Generator, Iterable, List, NamedTuple, Optional

from .componentize import extract_components
from .config import JsxHoistConfig, load_config
from .errors import ParseFailure
from .mapping.framework_mapper import map_to_framework, read_tailwind_config
from .stats import RunStats
from .writer import resolve_output_path, write_output


class ProcessResult(NamedTuple):
    source: str
    msgs: List[str]
    failed: bool


def _log(verbose: bool, message: str) -> None:
    if verbose:
        print(f"jsxhoist: ComponentExtractor: {message}", file=sys.stderr, flush=True)


def _relabel(
    source: str,
    label: str,
    config: JsxHoistConfig,
    stats: RunStats,
    msgs: List[str],
    verbose: bool,
) -> str:
    tailwind_text = None
    if config.tailwind_config:
        tailwind_text = read_tailwind_config(config.tailwind_config)
        if tailwind_text is None:
            msgs.append(
                f"{label}: FrameworkMapper: could not read Tailwind config "
                f"{config.tailwind_config}, skipping color mapping"
            )
    mapping = map_to_framework(
        source, config.framework, config, tailwind_text, verbose=verbose
    )
    stats.llm_calls += mapping.llm_calls
    stats.mapping_rejected += mapping.rejected
    if mapping.code != source:
        stats.framework_mapped += 1
    for msg in mapping.messages:
        msgs.append(f"{label}: {msg}")
    return mapping.code


def process_source(
    source: str,
    label: str,
    config: JsxHoistConfig,
    stats: RunStats,
    verbose: bool = True,
) -> ProcessResult:
    """Run extraction, then relabeling, on one source text.

    *label* names the source in messages (a path, or ``<stdin>``). A fatal
    extraction failure returns the input untouched with ``failed`` set.
    JsxHoistAPIError from the relabeling stage propagates.
    """
    msgs: List[str] = []
    _log(verbose, f"scanning {label}")
    result = extract_components(source, config.to_extractor_options())

    if result.failure is not None:
        if isinstance(result.failure, ParseFailure):
            stats.parse_failures += 1
            msgs.append(f"SKIP {label}: parse error: {result.failure}")
        else:
            stats.serialization_failures += 1
            msgs.append(f"SKIP {label}: output not valid TSX: {result.failure}")
        stats.lookup_failures += len(result.diagnostics)
        msgs.extend(f"{label}: ComponentExtractor: {d}" for d in result.diagnostics)
        return ProcessResult(source, msgs, True)

    stats.lookup_failures += len(result.diagnostics)
    msgs.extend(f"{label}: ComponentExtractor: {d}" for d in result.diagnostics)
    for component in result.components:
        stats.components_extracted += 1
        stats.occurrences_replaced += component.count
        msgs.append(
            f"{label}: ComponentExtractor: extracted {component.name} "
            f"({component.count} occurrences) [{component.fingerprint}]"
        )
    _log(verbose, f"  → {len(result.components)} component(s) extracted")

    current = result.code
    if config.framework != "none":
        current = _relabel(current, label, config, stats, msgs, verbose)
    return ProcessResult(current, msgs, False)


def run_engine(
    paths: Iterable[str],
    config: Optional[JsxHoistConfig] = None,
    stats: Optional[RunStats] = None,
    output_dir: Optional[str] = None,
    force: bool = False,
    verbose: bool = True,
) -> Generator[str, None, None]:
    """Process each file in *paths* and yield summary messages.

    Files are rewritten in place when their content changed, or always written
    into *output_dir* when one is given.
    """
    if config is None:
        config = load_config()
    _stats = stats if stats is not None else RunStats()

    for filepath in paths:
        path = Path(filepath)
        if not path.is_file():
            yield f"SKIP {filepath}: file not found"
            continue
        try:
            original = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            yield f"SKIP {filepath}: not UTF-8 text"
            continue

        result = process_source(original, filepath, config, _stats, verbose)
        yield from result.msgs
        if result.failed:
            continue

        target = resolve_output_path(filepath, output_dir)
        if output_dir is None and result.source == original:
            continue
        try:
            write_output(target, result.source, force=force or output_dir is None)
        except FileExistsError as exc:
            yield f"SKIP {filepath}: {exc}"
            continue
        _stats.files_edited.append(str(target))
        _stats.count_lines_changed(original, result.source)
