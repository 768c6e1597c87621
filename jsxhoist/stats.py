"""Cumulative statistics for a single jsxhoist run."""

import difflib
from dataclasses import dataclass, field
from typing import List


@dataclass
class RunStats:
    """Holds cumulative counts for a single jsxhoist run."""

    # Extraction counts
    components_extracted: int = 0
    occurrences_replaced: int = 0

    # Failure counts
    lookup_failures: int = 0
    parse_failures: int = 0
    serialization_failures: int = 0

    # Relabeling counts
    framework_mapped: int = 0
    mapping_rejected: int = 0
    llm_calls: int = 0

    # File and line tracking
    files_edited: List[str] = field(default_factory=list)
    lines_changed: int = 0

    def merge(self, other: "RunStats") -> None:
        """Add all counters from *other* into self (files_edited is not merged)."""
        self.components_extracted += other.components_extracted
        self.occurrences_replaced += other.occurrences_replaced
        self.lookup_failures += other.lookup_failures
        self.parse_failures += other.parse_failures
        self.serialization_failures += other.serialization_failures
        self.framework_mapped += other.framework_mapped
        self.mapping_rejected += other.mapping_rejected
        self.llm_calls += other.llm_calls

    @property
    def total_failures(self) -> int:
        return self.lookup_failures + self.parse_failures + self.serialization_failures

    def count_lines_changed(self, original: str, new: str) -> None:
        """Add the number of added/removed lines between *original* and *new*."""
        orig_lines = original.splitlines()
        new_lines = new.splitlines()
        diff = difflib.unified_diff(orig_lines, new_lines)
        for line in diff:
            if line.startswith(("+", "-")) and not line.startswith(("+++", "---")):
                self.lines_changed += 1

    def format_summary(self) -> List[str]:
        """Return a list of lines forming the human-readable run summary."""
        lines = ["--- jsxhoist summary ---"]
        lines.append("extraction:")
        lines.append(f"  components extracted: {self.components_extracted}")
        lines.append(f"  occurrences replaced: {self.occurrences_replaced}")
        lines.append("failures:")
        lines.append(f"  lookup:               {self.lookup_failures}")
        lines.append(f"  parse:                {self.parse_failures}")
        lines.append(f"  serialization:        {self.serialization_failures}")
        lines.append(f"  total:                {self.total_failures}")
        lines.append("relabeling:")
        lines.append(f"  files mapped:         {self.framework_mapped}")
        lines.append(f"  rejected:             {self.mapping_rejected}")
        lines.append(f"  LLM calls:            {self.llm_calls}")
        if self.files_edited:
            flist = ", ".join(self.files_edited)
            lines.append(f"files edited ({len(self.files_edited)}): {flist}")
        else:
            lines.append("files edited: none")
        lines.append(f"lines changed: {self.lines_changed}")
        return lines
