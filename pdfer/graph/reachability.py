"""Transitive reachability over Reference edges.

Depth-first with a visited set doubling as cycle guard: an id already seen is
never expanded again. The walk is bounded; crossing ``limit`` visited
objects aborts with OversizedGraphError instead of traversing further.
Object number 0 is the "no object" sentinel and is never collected.

A reference to an object missing from the table aborts the whole walk with
DanglingReferenceError: a document with unresolvable references is not
trusted in part.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Set, Tuple

from pdfer.errors import DanglingReferenceError, OversizedGraphError
from pdfer.graph.model import Graph, Node, ObjectId, Reference, iter_references
from pdfer.graph.remap import remap_fresh
from pdfer.graph.rewrite import rewrite_references

logger = logging.getLogger(__name__)

REACHABILITY_LIMIT = 10_000

# trailer entries that keep objects alive
TRAILER_ROOTS = ("Root", "Info", "Encrypt")


def collect_reachable(
    graph: Graph,
    root: ObjectId,
    limit: int = REACHABILITY_LIMIT,
    overrides: Optional[Mapping[ObjectId, Node]] = None,
) -> Set[ObjectId]:
    """Return every id reachable from ``root`` (``root`` included).

    ``overrides`` supplies nodes to walk in place of the graph's own, e.g. a
    page copy without its /Parent.
    """
    return _walk(graph, [root], limit, overrides)


def _walk(
    graph: Graph,
    roots: Iterable[ObjectId],
    limit: int,
    overrides: Optional[Mapping[ObjectId, Node]] = None,
) -> Set[ObjectId]:
    roots = list(roots)
    overrides = overrides or {}
    visited: Set[ObjectId] = set()
    stack: List[Tuple[ObjectId, Optional[ObjectId]]] = [(r, None) for r in reversed(roots)]

    while stack:
        object_id, referrer = stack.pop()
        if object_id.number == 0 or object_id in visited:
            continue

        visited.add(object_id)
        if len(visited) > limit:
            raise OversizedGraphError(roots[0] if roots else object_id, limit)

        if object_id in overrides:
            node = overrides[object_id]
        else:
            node = graph.get_object(object_id, referrer)
        children = [ref.id for ref in iter_references(node)]
        stack.extend((child, object_id) for child in reversed(children))

    return visited


def verify_references(graph: Graph) -> None:
    """Raise DanglingReferenceError for the first reference that does not resolve."""
    for object_id, node in graph.objects.items():
        for ref in iter_references(node):
            if ref.id.number != 0 and ref.id not in graph.objects:
                raise DanglingReferenceError(ref.id, object_id)
    for ref in iter_references(graph.trailer):
        if ref.id.number != 0 and ref.id not in graph.objects:
            raise DanglingReferenceError(ref.id)


def prune_unreachable(graph: Graph, limit: int = REACHABILITY_LIMIT) -> int:
    """Drop objects unreachable from the trailer and renumber the rest from 1.

    Mutates ``graph`` in place; returns the number of dropped objects.
    """
    roots = [
        value.id
        for key in TRAILER_ROOTS
        for value in [graph.trailer.get(key)]
        if isinstance(value, Reference)
    ]
    keep = _walk(graph, roots, limit)
    table, next_id = remap_fresh(keep)

    objects = {table[old]: rewrite_references(graph.objects[old], table) for old in sorted(keep)}
    dropped = len(graph.objects) - len(objects)

    graph.objects = objects
    graph.max_id = next_id - 1
    graph.trailer = rewrite_references(graph.trailer, table)

    if dropped:
        logger.debug("pruned %d unreachable object(s), %d kept", dropped, len(objects))
    return dropped


__all__ = [
    "REACHABILITY_LIMIT",
    "collect_reachable",
    "verify_references",
    "prune_unreachable",
]
