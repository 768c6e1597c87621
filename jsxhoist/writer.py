"""Resolve output locations and write converted files."""

from pathlib import Path
from typing import Optional


def resolve_output_path(filepath: str, output_dir: Optional[str] = None) -> Path:
    """Return where the result for *filepath* goes.

    Without *output_dir* the file is rewritten in place; otherwise the result
    lands in *output_dir* under the same file name.
    """
    path = Path(filepath)
    if output_dir is None:
        return path
    return Path(output_dir) / path.name


def write_output(path: Path, text: str, force: bool = False) -> None:
    """Write *text* to *path*, creating parent directories.

    Raises FileExistsError if *path* already exists and *force* is false.
    """
    if path.exists() and not force:
        raise FileExistsError(f"{path} already exists (use --force to overwrite)")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
