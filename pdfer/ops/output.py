"""
Output locations + input discovery.

Rules:
- Split output files are named page_###.pdf (1-based original page number).
- Default split folder is <stem>_pages; a merge output always ends in .pdf.
- Before a split, stale page_*.pdf files in the target folder are removed
  (other files are left alone).
- When an output already exists the caller is asked: Y=overwrite,
  R=rename, N=abort. ``ask`` is injectable so the prompt can be scripted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

from pdfer.errors import PdfIoError, ValidationError

logger = logging.getLogger(__name__)

Ask = Callable[[str], str]


# -----------------------------
# Naming
# -----------------------------

def page_filename(page_number: int) -> str:
    return f"page_{page_number:03d}.pdf"


def default_split_dir(input_path: Path) -> Path:
    stem = Path(input_path).stem or "split"
    return Path(f"{stem}_pages")


def ensure_pdf_suffix(path: Path) -> Path:
    path = Path(path)
    if path.suffix == ".pdf":
        return path
    return path.with_suffix(".pdf")


def is_pdf_path(path: Path) -> bool:
    return Path(path).suffix.lower() == ".pdf"


def clear_stale_pages(folder: Path) -> int:
    """Delete page_*.pdf inside ``folder``; returns how many were removed."""
    folder = Path(folder)
    if not folder.is_dir():
        return 0

    removed = 0
    for item in folder.iterdir():
        if item.is_file() and item.name.startswith("page_") and item.name.endswith(".pdf"):
            try:
                item.unlink()
            except OSError as exc:
                raise PdfIoError(item, "Could not remove stale page file") from exc
            removed += 1
    if removed:
        logger.debug("removed %d stale page file(s) from %s", removed, folder)
    return removed


# -----------------------------
# Conflict prompt
# -----------------------------

def _prompt(ask: Ask, message: str) -> Optional[str]:
    try:
        return ask(message)
    except EOFError:
        return None


def resolve_output_conflict(
    output: Path,
    is_directory: bool,
    ask: Ask = input,
    say: Callable[[str], None] = print,
) -> Optional[Path]:
    """Return the path to write to, or None when the user aborted."""
    output = Path(output)
    if not output.exists():
        return output

    kind = "directory" if is_directory else "file"
    answer = _prompt(
        ask, f"[WARN] Output {kind} '{output}' already exists. Action? (Y=overwrite, R=rename, N=abort): "
    )
    choice = (answer or "").strip().lower()

    if choice in ("y", "yes"):
        return output
    if choice in ("n", "no") or answer is None:
        say("Aborted.")
        return None
    if choice not in ("r", "rename"):
        say("Invalid choice. Aborted.")
        return None

    prompt = (
        "Enter a new output folder: "
        if is_directory
        else "Enter a new filename or folder (e.g., report.pdf or ./output): "
    )
    raw = (_prompt(ask, prompt) or "").strip()
    if not raw:
        say("Empty path. Aborted.")
        return None

    renamed = Path(raw)
    if not is_directory and renamed.is_dir():
        renamed = renamed / output.name

    if renamed.exists():
        say(f"[ERROR] Output '{renamed}' already exists. Aborted to prevent overwrite.")
        return None
    return renamed


# -----------------------------
# Input discovery
# -----------------------------

def _collect_dir(folder: Path, found: List[Path], visited: Set[Path]) -> None:
    pending = [folder]
    while pending:
        current = pending.pop()
        try:
            key = current.resolve()
        except OSError:
            key = current
        if key in visited:
            continue
        visited.add(key)

        try:
            entries = sorted(current.iterdir())
        except OSError as exc:
            logger.warning("Cannot read directory %s: %s", current, exc)
            continue

        subdirs = []
        for entry in entries:
            if entry.is_dir():
                subdirs.append(entry)
            elif entry.is_file() and is_pdf_path(entry):
                found.append(entry)
        pending.extend(reversed(subdirs))


def collect_pdfs(paths: Iterable[Path], recursive: bool = False) -> List[Path]:
    """Expand files / folders into a sorted list of PDF paths."""
    found: List[Path] = []
    visited: Set[Path] = set()

    for path in (Path(p) for p in paths):
        if path.is_dir():
            if not recursive:
                raise ValidationError(
                    f"'{path}' is a directory. Use -r/--recursive to search subdirectories"
                )
            _collect_dir(path, found, visited)
        elif path.is_file():
            if not is_pdf_path(path):
                raise ValidationError(f"Non-PDF file provided: {path}")
            found.append(path)
        else:
            raise ValidationError(f"Invalid path: {path}")

    if not found:
        raise ValidationError("No PDF files found")
    return sorted(found)


__all__ = [
    "page_filename",
    "default_split_dir",
    "ensure_pdf_suffix",
    "is_pdf_path",
    "clear_stale_pages",
    "resolve_output_conflict",
    "collect_pdfs",
]
