"""Id remapping: old object id -> fresh object id.

The counter is an explicit value: ``remap_ids`` takes the first free number
and returns the next one, so callers decide the discipline.

    * global-sequential (merge): feed the returned counter into the next
      source, every source lands in its own disjoint range.
    * local-fresh (split): start every extraction at 1.
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from pdfer.graph.model import ObjectId

IdTable = Dict[ObjectId, ObjectId]

FIRST_ID = 1


def remap_ids(ids: Iterable[ObjectId], start: int = FIRST_ID) -> Tuple[IdTable, int]:
    """Map each distinct id (ascending) onto ``start, start+1, ...`` at generation 0.

    Returns the table and the next unused number.
    """
    if start < FIRST_ID:
        raise ValueError(f"Object numbers start at {FIRST_ID}, got {start}")

    table: IdTable = {}
    next_id = start
    for old_id in sorted(set(ids)):
        table[old_id] = ObjectId(next_id, 0)
        next_id += 1
    return table, next_id


def remap_fresh(ids: Iterable[ObjectId]) -> Tuple[IdTable, int]:
    """Local-fresh discipline: numbering restarts at 1."""
    return remap_ids(ids, FIRST_ID)


__all__ = ["IdTable", "FIRST_ID", "remap_ids", "remap_fresh"]
