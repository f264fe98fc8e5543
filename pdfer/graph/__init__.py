"""Graph package: object model + remapping / reachability engine.

Everything outside the package should import from here rather than
reaching into individual modules.
"""

from __future__ import annotations

from pdfer.graph.model import (
    NULL_ID,
    Graph,
    Name,
    Node,
    ObjectId,
    PdfString,
    Reference,
    Stream,
    is_page_tree_node,
    iter_references,
)
from pdfer.graph.remap import FIRST_ID, IdTable, remap_fresh, remap_ids
from pdfer.graph.rewrite import deep_copy, rewrite_references
from pdfer.graph.reachability import (
    REACHABILITY_LIMIT,
    collect_reachable,
    prune_unreachable,
    verify_references,
)
from pdfer.graph.hierarchy import (
    DEFAULT_MAX_CHILDREN,
    build_page_tree,
    inherit_page_attributes,
    inherited_attributes,
)

__all__ = [
    "NULL_ID",
    "Graph",
    "Name",
    "Node",
    "ObjectId",
    "PdfString",
    "Reference",
    "Stream",
    "is_page_tree_node",
    "iter_references",
    "FIRST_ID",
    "IdTable",
    "remap_ids",
    "remap_fresh",
    "rewrite_references",
    "deep_copy",
    "REACHABILITY_LIMIT",
    "collect_reachable",
    "prune_unreachable",
    "verify_references",
    "DEFAULT_MAX_CHILDREN",
    "build_page_tree",
    "inherit_page_attributes",
    "inherited_attributes",
]
