"""Page selection parsing.

Grammar (comma separated, whitespace ignored around tokens and "-"):

    n      - page n
    a-b    - pages a..b inclusive
    a-     - pages a..total

The result is the union of all tokens, sorted ascending and de-duplicated;
input order is deliberately not preserved. Empty tokens (stray commas) are
skipped.

Two entry points:

    * parse_page_ranges()  - returns the list or raises PageRangeError
    * check_page_ranges()  - never raises, returns a RangeParseResult
      (used by callers that re-prompt on invalid input)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from pdfer.errors import PageRangeError

_NUMBER_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class RangeParseResult:
    pages: List[int] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_page_ranges(spec: str, total_pages: int) -> List[int]:
    if total_pages <= 0:
        raise PageRangeError(spec, "PDF has no pages")

    pages = set()
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start, end = _parse_range(spec, part, total_pages)
            pages.update(range(start, end + 1))
        else:
            page = _parse_number(spec, part)
            if page < 1 or page > total_pages:
                raise PageRangeError(
                    spec, f"Page {page} is out of range (PDF has {total_pages} pages)"
                )
            pages.add(page)

    return sorted(pages)


def check_page_ranges(spec: str, total_pages: int) -> RangeParseResult:
    try:
        return RangeParseResult(pages=parse_page_ranges(spec, total_pages))
    except PageRangeError as exc:
        return RangeParseResult(error=exc.reason)


def _parse_range(spec: str, part: str, total_pages: int):
    bounds = part.split("-")
    if len(bounds) != 2:
        raise PageRangeError(spec, f"Invalid range syntax: '{part}'")

    start_str = bounds[0].strip()
    end_str = bounds[1].strip()
    if not start_str:
        raise PageRangeError(spec, f"Invalid range: '{part}' (page numbers must be >= 1)")

    start = _parse_number(spec, start_str)
    end = _parse_number(spec, end_str) if end_str else total_pages

    if start < 1:
        raise PageRangeError(spec, "Page numbers must be >= 1")
    if start > total_pages:
        raise PageRangeError(spec, f"Start page {start} is beyond document end ({total_pages})")
    if end_str and end > total_pages:
        raise PageRangeError(spec, f"End page {end} is beyond document end ({total_pages})")
    if start > end:
        raise PageRangeError(spec, f"Invalid range: '{part}' (start > end)")
    return start, end


def _parse_number(spec: str, text: str) -> int:
    if not _NUMBER_RE.match(text):
        raise PageRangeError(spec, f"Invalid page number: '{text}'")
    return int(text)


# ---------------------------------------------------------------------
# Human-readable selection summary
# ---------------------------------------------------------------------
def is_contiguous(pages: List[int]) -> bool:
    return all(b == a + 1 for a, b in zip(pages, pages[1:]))


def describe_selection(pages: List[int], total_pages: int) -> str:
    if not pages:
        return "no pages"
    if len(pages) == total_pages and pages[0] == 1 and is_contiguous(pages):
        return "all pages"
    if len(pages) <= 20:
        return "pages " + ", ".join(str(p) for p in pages)
    if is_contiguous(pages):
        return f"pages {pages[0]} to {pages[-1]}"
    return f"{len(pages)} pages (including {pages[0]}, {pages[1]}, ..., {pages[-1]})"


__all__ = [
    "RangeParseResult",
    "parse_page_ranges",
    "check_page_ranges",
    "is_contiguous",
    "describe_selection",
]
