"""Split one document into single-page documents.

For each selected page:

    1. collect every object reachable from the page, with inherited
       attributes filled in and its old /Parent left out
    2. renumber that set from 1 (local-fresh)
    3. copy + rewrite it into a brand-new graph
    4. link the page under a one-entry page tree (its /Parent moves there)
    5. add catalog and trailer; optionally carry Info / ID / Encrypt over
    6. optionally prune whatever the new trailer no longer reaches

Every output graph stands on its own. Pages are recomputed one by one; no
clone is shared between outputs.

Failure policy is a config choice: "abort" re-raises the first page
failure (wrapped with the page number), "skip" records it and continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from pdfer.config import PdferConfig
from pdfer.errors import (
    EmptyDocumentError,
    PageIndexError,
    PdferError,
    PdfIoError,
    StructuralError,
    ValidationError,
)
from pdfer.graph import (
    Graph,
    ObjectId,
    collect_reachable,
    inherited_attributes,
    prune_unreachable,
    remap_fresh,
    rewrite_references,
)
from pdfer.intake import load_pdf, save_pdf
from pdfer.ops.assembly import attach_pages, copy_trailer_metadata, finalize_size
from pdfer.ops.output import clear_stale_pages, page_filename

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PageExtractionError(StructuralError):
    """A structural failure while extracting one page."""

    def __init__(self, page_number: int, cause: PdferError) -> None:
        self.page_number = page_number
        self.cause = cause
        super().__init__(f"Page {page_number}: {cause}")


@dataclass
class SplitPage:
    number: int
    graph: Graph
    path: Optional[Path] = None


@dataclass
class SplitFailure:
    number: int
    error: PdferError


@dataclass
class SplitReport:
    total_pages: int
    pages: List[SplitPage] = field(default_factory=list)
    failures: List[SplitFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class SplitOrchestrator:
    """One graph -> one graph per selected page."""

    def __init__(self, config: Optional[PdferConfig] = None) -> None:
        self.config = config or PdferConfig()

    # ------------------------------------------------------------------
    def split(
        self,
        source: Graph,
        page_numbers: Optional[Sequence[int]] = None,
        on_page: Optional[Callable[[SplitPage], None]] = None,
    ) -> SplitReport:
        """Extract ``page_numbers`` (1-based; all pages when None).

        ``on_page`` is called with each finished page, letting the caller
        write it out before the next one is built.
        """
        page_ids, numbers = self.select(source, page_numbers)

        report = SplitReport(total_pages=len(page_ids))
        for number in numbers:
            try:
                graph = self._extract(source, page_ids[number - 1])
            except StructuralError as exc:
                if self.config.split_error_policy == "abort":
                    raise PageExtractionError(number, exc) from exc
                logger.warning("skipping page %d: %s", number, exc)
                report.failures.append(SplitFailure(number=number, error=exc))
                continue

            page = SplitPage(number=number, graph=graph)
            if on_page is not None:
                on_page(page)
            report.pages.append(page)

        logger.info(
            "split %s: %d page(s) extracted, %d failed",
            source.source, len(report.pages), len(report.failures),
        )
        return report

    def select(
        self, source: Graph, page_numbers: Optional[Sequence[int]] = None
    ) -> Tuple[List[ObjectId], List[int]]:
        """Validate a selection against ``source``; return (page ids, numbers)."""
        page_ids = source.page_ids()
        total = len(page_ids)
        if total == 0:
            raise EmptyDocumentError(source.source)

        numbers = list(range(1, total + 1)) if page_numbers is None else list(page_numbers)
        if not numbers:
            raise ValidationError("No pages to split (check your page range)")
        for number in numbers:
            if number < 1 or number > total:
                raise PageIndexError(number, total)
        return page_ids, numbers

    def extract_page(self, source: Graph, page_number: int) -> Graph:
        page_ids = source.page_ids()
        if page_number < 1 or page_number > len(page_ids):
            raise PageIndexError(page_number, len(page_ids))
        return self._extract(source, page_ids[page_number - 1])

    # ------------------------------------------------------------------
    def _extract(self, source: Graph, page_id: ObjectId) -> Graph:
        # the old /Parent would pull in the whole source page tree
        page = dict(source.get_dict(page_id))
        page.update(inherited_attributes(source, page_id))
        page.pop("Parent", None)

        reachable = collect_reachable(
            source, page_id, self.config.reachability_limit, overrides={page_id: page}
        )
        table, next_id = remap_fresh(reachable)

        single = Graph.empty(version=source.version, source=source.source)
        for old_id in sorted(reachable):
            node = page if old_id == page_id else source.objects[old_id]
            single.insert(table[old_id], rewrite_references(node, table))
        single.max_id = next_id - 1

        attach_pages(single, [table[page_id]], self.config.max_page_tree_children)
        if self.config.copy_metadata_on_split:
            copy_trailer_metadata(source, single, table)
        if self.config.prune_split_output:
            prune_unreachable(single, self.config.reachability_limit)
        finalize_size(single)
        return single


# ---------------------------------------------------------------------
# File-level entry point
# ---------------------------------------------------------------------
def split_file(
    input_path: PathLike,
    output_dir: PathLike,
    page_numbers: Optional[Sequence[int]] = None,
    config: Optional[PdferConfig] = None,
    source: Optional[Graph] = None,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> SplitReport:
    """Split ``input_path`` into ``output_dir/page_###.pdf`` files.

    Existing ``page_*.pdf`` files in ``output_dir`` are removed first.
    A graph already loaded by the caller may be passed as ``source``.
    """
    output_dir = Path(output_dir)
    if source is None:
        source = load_pdf(input_path)

    orchestrator = SplitOrchestrator(config)
    _, numbers = orchestrator.select(source, page_numbers)

    clear_stale_pages(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PdfIoError(output_dir, "Failed to create output directory") from exc

    done = [0]

    def _write(page: SplitPage) -> None:
        page.path = save_pdf(page.graph, output_dir / page_filename(page.number))
        done[0] += 1
        if on_progress is not None:
            on_progress(done[0], len(numbers))

    return orchestrator.split(source, numbers, on_page=_write)


__all__ = [
    "PageExtractionError",
    "SplitPage",
    "SplitFailure",
    "SplitReport",
    "SplitOrchestrator",
    "split_file",
]
