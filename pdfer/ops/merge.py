"""Merge several documents into one.

For each source, in input order:

    1. take its full id set
    2. remap it into the target (global-sequential: ranges never overlap)
    3. copy every object with references rewritten
    4. collect its pages in document order
    5. first source only: carry Info / ID / Encrypt over

Then all collected pages are linked under one balanced page tree and a new
catalog. Any source without pages aborts the whole merge; nothing is
returned (or written) until every source went through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Union

from pdfer.config import PdferConfig
from pdfer.errors import EmptyDocumentError, ValidationError
from pdfer.graph import FIRST_ID, Graph, ObjectId, prune_unreachable, remap_ids, rewrite_references
from pdfer.intake import load_pdf, save_pdf
from pdfer.ops.assembly import attach_pages, copy_trailer_metadata, finalize_size

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class MergeResult:
    graph: Graph
    source_count: int
    page_count: int

    @property
    def degenerate(self) -> bool:
        """Single-source merge: effectively a copy / repair pass."""
        return self.source_count == 1


class MergeOrchestrator:
    """Sources -> one graph with a single page tree."""

    def __init__(self, config: Optional[PdferConfig] = None) -> None:
        self.config = config or PdferConfig()

    # ------------------------------------------------------------------
    def merge(self, sources: Iterable[Graph]) -> MergeResult:
        target = Graph.empty()
        page_refs: List[ObjectId] = []
        next_id = FIRST_ID
        source_count = 0

        for source in sources:
            page_ids = source.page_ids()
            if not page_ids:
                raise EmptyDocumentError(source.source)

            table, next_id = remap_ids(source.objects.keys(), next_id)
            for old_id, node in source.objects.items():
                target.insert(table[old_id], rewrite_references(node, table))

            page_refs.extend(table[page_id] for page_id in page_ids)

            if source_count == 0:
                target.version = source.version
                copy_trailer_metadata(source, target, table)
            source_count += 1

            logger.debug(
                "folded %s: %d objects, %d pages, ids up to %d",
                source.source, len(source.objects), len(page_ids), next_id - 1,
            )

        if source_count == 0:
            raise ValidationError("No input files provided")
        if source_count == 1:
            logger.warning("Only one input document: output is a copy / repair of it")

        target.max_id = max(target.max_id, next_id - 1)
        attach_pages(target, page_refs, self.config.max_page_tree_children)
        if self.config.prune_merge_output:
            prune_unreachable(target, self.config.reachability_limit)
        finalize_size(target)

        logger.info("merged %d document(s), %d page(s)", source_count, len(page_refs))
        return MergeResult(graph=target, source_count=source_count, page_count=len(page_refs))


# ---------------------------------------------------------------------
# File-level entry point
# ---------------------------------------------------------------------
def merge_files(
    inputs: Sequence[PathLike],
    output: PathLike,
    config: Optional[PdferConfig] = None,
    on_progress: Optional[Callable[[Path], None]] = None,
) -> MergeResult:
    """Load ``inputs`` one by one, merge, and save to ``output``.

    ``output`` is written only after every input merged cleanly.
    """
    if not inputs:
        raise ValidationError("No input files provided")

    def _sources() -> Iterable[Graph]:
        for path in inputs:
            path = Path(path)
            if on_progress is not None:
                on_progress(path)
            yield load_pdf(path)

    result = MergeOrchestrator(config).merge(_sources())
    save_pdf(result.graph, output)
    return result


__all__ = ["MergeResult", "MergeOrchestrator", "merge_files"]
