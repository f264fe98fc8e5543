"""Operations: page selection, merge, split, info and output handling."""

from __future__ import annotations

from pdfer.ops.info import DocumentInfo, describe_document, format_document_info
from pdfer.ops.merge import MergeOrchestrator, MergeResult, merge_files
from pdfer.ops.output import (
    clear_stale_pages,
    collect_pdfs,
    default_split_dir,
    ensure_pdf_suffix,
    page_filename,
    resolve_output_conflict,
)
from pdfer.ops.page_ranges import (
    RangeParseResult,
    check_page_ranges,
    describe_selection,
    parse_page_ranges,
)
from pdfer.ops.split import (
    PageExtractionError,
    SplitFailure,
    SplitOrchestrator,
    SplitPage,
    SplitReport,
    split_file,
)

__all__ = [
    "DocumentInfo",
    "describe_document",
    "format_document_info",
    "MergeOrchestrator",
    "MergeResult",
    "merge_files",
    "clear_stale_pages",
    "collect_pdfs",
    "default_split_dir",
    "ensure_pdf_suffix",
    "page_filename",
    "resolve_output_conflict",
    "RangeParseResult",
    "check_page_ranges",
    "describe_selection",
    "parse_page_ranges",
    "PageExtractionError",
    "SplitFailure",
    "SplitOrchestrator",
    "SplitPage",
    "SplitReport",
    "split_file",
]
