"""Load jsxhoist configuration from pyproject.toml and optional .jsxhoist.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .componentize.fingerprint import FingerprintOptions
from .componentize.options import DEFAULT_SKIP_TAGS, ExtractorOptions


@dataclass
class JsxHoistConfig:
    """Runtime configuration for jsxhoist."""

    # Extraction: minimum number of same-shape elements before hoisting (>= 2)
    min_repeats: int = 2
    # Extraction: prefix for generated component names (Extracted1, ...)
    component_name_base: str = "Extracted"
    # Extraction: tags never hoisted, nor their direct children (case-insensitive)
    skip_tags: List[str] = field(default_factory=lambda: sorted(DEFAULT_SKIP_TAGS))

    # Fingerprint: attributes whose value is the style-class token
    class_attributes: List[str] = field(default_factory=lambda: ["className", "class"])
    # Fingerprint: attributes that do not count toward the attribute total
    ignored_attributes: List[str] = field(default_factory=list)
    # Fingerprint: collapse whitespace (and sort literal class lists)
    normalize_class_tokens: bool = True

    # Relabeling: "none" (default), "shadcn", "mui" or "chakra"
    framework: str = "none"
    # Relabeling: path to the project's tailwind.config.js for color mapping
    tailwind_config: Optional[str] = None

    # LLM provider: "anthropic" (default), "openai", "moonshot", "deepseek",
    # or "lmstudio"
    provider: str = "anthropic"
    # LLM model used for relabeling calls
    model: str = "claude-sonnet-4-6"
    # Optional base URL override for OpenAI-compatible providers (e.g. LM Studio
    # on a non-default port).
    base_url: Optional[str] = None
    # HTTP timeout in seconds for each LLM API call.
    api_timeout: float = 60.0

    def to_extractor_options(self) -> ExtractorOptions:
        return ExtractorOptions(
            min_repeats=self.min_repeats,
            component_name_base=self.component_name_base,
            skip_tags=frozenset(self.skip_tags),
            fingerprint_options=FingerprintOptions(
                class_attributes=tuple(self.class_attributes),
                ignored_attributes=frozenset(self.ignored_attributes),
                normalize_class_tokens=self.normalize_class_tokens,
            ),
        )


def _read_toml(path: Path) -> dict:
    """Read a TOML file; return empty dict if missing or unparseable."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}


def _apply(cfg: JsxHoistConfig, d: dict) -> None:
    """Overlay dict values onto cfg, ignoring unknown keys."""
    valid = set(cfg.__dataclass_fields__)
    for key, val in d.items():
        if key in valid:
            setattr(cfg, key, val)


def load_config(project_root: Optional[Path] = None) -> JsxHoistConfig:
    """Load config from pyproject.toml [tool.jsxhoist], then .jsxhoist.toml."""
    if project_root is None:
        project_root = Path.cwd()
    cfg = JsxHoistConfig()
    pyproject = _read_toml(project_root / "pyproject.toml")
    _apply(cfg, pyproject.get("tool", {}).get("jsxhoist", {}))
    local = _read_toml(project_root / ".jsxhoist.toml")
    _apply(cfg, local)
    return cfg
