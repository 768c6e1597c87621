"""Options for one component-extraction run."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import FrozenSet

from .fingerprint import FingerprintOptions

# Low-level SVG / graphic primitives: never extraction roots, and their
# children are never extraction roots either.
DEFAULT_SKIP_TAGS: FrozenSet[str] = frozenset(
    {
        "svg",
        "clippath",
        "defs",
        "ellipse",
        "g",
        "lineargradient",
        "mask",
        "path",
        "pattern",
        "polygon",
        "polyline",
        "radialgradient",
        "rect",
        "stop",
        "circle",
        "image",
        "line",
        "text",
        "tspan",
        "use",
        "foreignobject",
    }
)

_COMPONENT_NAME = re.compile(r"^[A-Z][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class ExtractorOptions:
    """Runtime options for :func:`~jsxhoist.componentize.extract_components`."""

    min_repeats: int = 2
    component_name_base: str = "Extracted"
    skip_tags: FrozenSet[str] = DEFAULT_SKIP_TAGS
    fingerprint_options: FingerprintOptions = field(default_factory=FingerprintOptions)

    def __post_init__(self) -> None:
        if self.min_repeats < 2:
            raise ValueError(f"min_repeats must be at least 2, got {self.min_repeats}")
        # Lower-case first letters would read as intrinsic tags (<extracted1 />).
        if not _COMPONENT_NAME.match(self.component_name_base):
            raise ValueError(
                "component_name_base must be an identifier starting with an "
                f"upper-case letter, got {self.component_name_base!r}"
            )
        object.__setattr__(
            self, "skip_tags", frozenset(t.lower() for t in self.skip_tags)
        )
