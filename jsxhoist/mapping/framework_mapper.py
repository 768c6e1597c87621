"""Best-effort relabeling of plain JSX onto a UI kit (shadcn/ui, MUI) via an LLM."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from .. import llm_client as _llm_client
from ..config import JsxHoistConfig
from ..markup.parser import is_valid_tsx

SUPPORTED_FRAMEWORKS = ("none", "shadcn", "mui", "chakra")

_MAX_TOKENS = 16000
# Added on top of config.api_timeout for the wall-clock limit per call.
_HARD_TIMEOUT_MARGIN = 30

_MAP_TOOL: dict = {
    "name": "emit_mapped_code",
    "description": "Return the complete converted component source",
    "input_schema": {
        "type": "object",
        "properties": {
            "code": {
                "type": "string",
                "description": (
                    "The full converted TSX source, including any import "
                    "statements the new components need"
                ),
            },
            "notes": {
                "type": "string",
                "description": "Short notes on anything left unconverted",
            },
        },
        "required": ["code"],
    },
}

_SHARED_RULES = """\
## Conversion rules
1. Preserve every existing Tailwind class, especially project-specific ones.
2. Preserve every prop (onClick, onChange, ...), all text content, and all
   nested elements and icons.
3. Add the imports the new components need at the top of the file.
4. Keep component logic and extracted helper components intact.
5. Do not convert semantic wrappers with no equivalent (<section>, <header>,
   <nav>, <main>, <footer>) and never convert SVG markup.
"""

_MUI_PROMPT = (
    "You convert cleaned React components to Material-UI (MUI) components.\n\n"
    "## Mappings\n"
    '- <button> → <Button variant="contained|outlined|text">\n'
    "- card-like containers → <Card>, <CardContent>\n"
    "- <input> / <textarea> → <TextField> / <TextField multiline>\n"
    '- <h1>-<h6> → <Typography variant="h1">-<Typography variant="h6">\n'
    '- <p> → <Typography variant="body1">\n\n' + _SHARED_RULES
)


def _tailwind_section(tailwind_config: Optional[str]) -> str:
    if not tailwind_config:
        return ""
    return (
        "## Project Tailwind config\n"
        "Replace hard-coded hex colors with the project's semantic color classes "
        "defined here:\n\n"
        f"```javascript\n{tailwind_config}\n```\n\n"
    )


def _shadcn_prompt(tailwind_config: Optional[str]) -> str:
    return (
        "You convert cleaned React components to shadcn/ui components.\n\n"
        + _tailwind_section(tailwind_config)
        + "## Mappings\n"
        '- <button> or button-like <div> → <Button> (variant="outline", '
        '"ghost" or "destructive" where it fits)\n'
        "- card-like containers → <Card>, <CardHeader>, <CardTitle>, "
        "<CardDescription>, <CardContent>, <CardFooter>\n"
        "- <input> → <Input>, <textarea> → <Textarea>, <label> → <Label>\n"
        "- small pill labels → <Badge>, divider lines → <Separator>\n"
        "- <table> structures → <Table>, <TableHeader>, <TableRow>, "
        "<TableHead>, <TableBody>, <TableCell>\n"
        "- notification boxes → <Alert>, <AlertTitle>, <AlertDescription>\n"
        'Import from "@/components/ui/<name>".\n\n' + _SHARED_RULES
    )


def _color_prompt(tailwind_config: str) -> str:
    return (
        "You are a color mapping specialist. Replace every hard-coded color, "
        "hex values (bg-[#ffffff], text-[#222222], border-[#cbe0ed]) and CSS "
        "variables (var(--color-text-primary)) alike, with the matching custom "
        "Tailwind color class from the project config. Change nothing else.\n\n"
        + _tailwind_section(tailwind_config)
    )


@dataclass
class MappingResult:
    code: str
    messages: List[str] = field(default_factory=list)
    llm_calls: int = 0
    rejected: int = 0


class _ApiTimeout(Exception):
    """Raised when an LLM API call exceeds the hard per-call timeout."""


def _run_with_timeout(func, timeout, *args, **kwargs):
    """Run *func* in a daemon thread; raise _ApiTimeout if it doesn't finish."""
    result: list = [None]
    exc: list = [None]

    def target():
        try:
            result[0] = func(*args, **kwargs)
        except BaseException as e:
            exc[0] = e

    t = threading.Thread(target=target, daemon=True)
    t.start()
    t.join(timeout=timeout)
    if t.is_alive():
        raise _ApiTimeout(f"API call exceeded {timeout}s hard limit")
    if exc[0] is not None:
        raise exc[0]
    return result[0]


def read_tailwind_config(path: str) -> Optional[str]:
    """Return the text of a tailwind.config.js, or None if it can't be read."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _log(verbose: bool, message: str) -> None:
    if verbose:
        print(f"jsxhoist: FrameworkMapper: {message}", file=sys.stderr, flush=True)


def _request(
    client: Any, config: JsxHoistConfig, system: str, code: str, target: str
) -> Optional[str]:
    result = _run_with_timeout(
        _llm_client.call_with_tool,
        config.api_timeout + _HARD_TIMEOUT_MARGIN,
        client,
        config.provider,
        config.model,
        _MAX_TOKENS,
        _MAP_TOOL,
        "emit_mapped_code",
        [
            {
                "role": "user",
                "content": f"Here is the code to map to {target}:\n\n"
                f"```tsx\n{code}\n```",
            }
        ],
        system=system,
        caller="FrameworkMapper",
    )
    if result is None:
        return None
    mapped = result.get("code")
    if not isinstance(mapped, str) or not mapped.strip():
        return None
    return mapped.strip() + "\n"


def _run_pass(
    client: Any,
    config: JsxHoistConfig,
    system: str,
    code: str,
    target: str,
    result: MappingResult,
    verbose: bool,
) -> str:
    """Run one LLM pass; return its output, or *code* if the output is unusable."""
    _log(verbose, f"mapping to {target}...")
    result.llm_calls += 1
    try:
        mapped = _request(client, config, system, code, target)
    except _ApiTimeout:
        _log(verbose, f"  → {target} mapping timed out")
        result.rejected += 1
        result.messages.append(f"FrameworkMapper: {target}: timed out, input kept")
        return code
    if mapped is None:
        result.rejected += 1
        result.messages.append(f"FrameworkMapper: {target}: no code returned, input kept")
        return code
    if not is_valid_tsx(mapped):
        result.rejected += 1
        result.messages.append(
            f"FrameworkMapper: {target}: output does not parse as TSX, input kept"
        )
        return code
    _log(verbose, f"  → {target} mapping accepted")
    return mapped


def map_to_framework(
    code: str,
    framework: str,
    config: JsxHoistConfig,
    tailwind_config_text: Optional[str] = None,
    verbose: bool = True,
    client: Any = None,
) -> MappingResult:
    """Relabel *code* onto *framework*, then map colors if a Tailwind config is given.

    Unusable LLM output is discarded and the input kept. API errors propagate
    as JsxHoistAPIError.
    """
    if framework not in SUPPORTED_FRAMEWORKS:
        raise ValueError(
            f"unknown framework {framework!r}; expected one of "
            + ", ".join(SUPPORTED_FRAMEWORKS)
        )
    result = MappingResult(code)
    if framework == "none":
        return result
    if framework == "chakra":
        result.messages.append("FrameworkMapper: chakra mapping not yet implemented")
        return result

    if client is None:
        api_key = _llm_client.get_api_key(config.provider, caller="FrameworkMapper")
        client = _llm_client.make_client(
            config.provider,
            api_key,
            timeout=config.api_timeout,
            base_url=config.base_url,
        )

    if framework == "shadcn":
        system = _shadcn_prompt(tailwind_config_text)
        target = "shadcn/ui"
    else:
        system = _MUI_PROMPT
        target = "MUI"
    current = _run_pass(client, config, system, code, target, result, verbose)

    if tailwind_config_text:
        current = _run_pass(
            client,
            config,
            _color_prompt(tailwind_config_text),
            current,
            "custom Tailwind colors",
            result,
            verbose,
        )

    if current != code:
        result.messages.append(f"FrameworkMapper: mapped components to {target}")
    result.code = current
    return result
