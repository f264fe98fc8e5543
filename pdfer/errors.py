"""Error taxonomy shared by the whole package.

Three families, each carrying enough context for the caller to build an
actionable message:

    * StructuralError  - the object graph itself is broken (dangling
      reference, oversized reachability, malformed page tree). Always fatal
      to the document being processed.
    * ValidationError  - the request does not fit the document (bad page
      selection, page index out of range, document without pages).
    * PdfIoError       - a path could not be read or written.

Nothing in the core downgrades any of these to a warning.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class PdferError(Exception):
    """Base class for every error raised by pdfer."""


# =====================================================================
# Structural errors
# =====================================================================
class StructuralError(PdferError):
    """The object graph is corrupt or untrustworthy."""


class DanglingReferenceError(StructuralError):
    def __init__(self, object_id, referrer=None) -> None:
        self.object_id = object_id
        self.referrer = referrer
        where = f" (referenced from {_fmt_id(referrer)})" if referrer is not None else ""
        super().__init__(f"Object {_fmt_id(object_id)} does not exist{where}")


class OversizedGraphError(StructuralError):
    def __init__(self, root, limit: int) -> None:
        self.root = root
        self.limit = limit
        super().__init__(
            f"Object reference graph from {_fmt_id(root)} exceeds {limit} objects "
            "(possible circular reference)"
        )


class PageTreeError(StructuralError):
    """Page tree is missing or malformed."""


# =====================================================================
# Validation errors
# =====================================================================
class ValidationError(PdferError):
    """The requested operation does not fit the input."""


class PageRangeError(ValidationError):
    def __init__(self, spec: str, reason: str) -> None:
        self.spec = spec
        self.reason = reason
        super().__init__(reason)


class PageIndexError(ValidationError):
    def __init__(self, index: int, total: int) -> None:
        self.index = index
        self.total = total
        super().__init__(f"Page {index} is out of range (PDF has {total} pages)")


class EmptyDocumentError(ValidationError):
    def __init__(self, source: Optional[str]) -> None:
        self.source = source
        super().__init__(f"Input PDF has no pages: {source or '<in-memory document>'}")


# =====================================================================
# I/O errors
# =====================================================================
class PdfIoError(PdferError):
    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class PdfSyntaxError(PdferError):
    """A PDF object cannot be converted to or from a graph node."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


def _fmt_id(object_id) -> str:
    try:
        number, generation = object_id
    except (TypeError, ValueError):
        return str(object_id)
    return f"{number} {generation} R"


__all__ = [
    "PdferError",
    "StructuralError",
    "DanglingReferenceError",
    "OversizedGraphError",
    "PageTreeError",
    "ValidationError",
    "PageRangeError",
    "PageIndexError",
    "EmptyDocumentError",
    "PdfIoError",
    "PdfSyntaxError",
]
