"""Reference rewriting.

``rewrite_references`` returns a structural copy of a node in which every
Reference found in the id table points at its mapped id. References missing
from the table are kept as they are. Stream payloads are carried over
untouched.

The walk uses an explicit work list so deeply nested input cannot exhaust
the call stack.
"""

from __future__ import annotations

from typing import Any, List, Tuple

from pdfer.graph.model import Node, Reference, Stream
from pdfer.graph.remap import IdTable


def rewrite_references(node: Node, table: IdTable) -> Node:
    holder: List[Node] = [node]
    pending: List[Tuple[Any, Any]] = [(holder, 0)]

    while pending:
        container, key = pending.pop()
        value = container[key]

        if isinstance(value, Reference):
            new_id = table.get(value.id)
            if new_id is not None:
                container[key] = Reference(new_id)
        elif isinstance(value, dict):
            copy = dict(value)
            container[key] = copy
            pending.extend((copy, k) for k in copy)
        elif isinstance(value, list):
            copy = list(value)
            container[key] = copy
            pending.extend((copy, i) for i in range(len(copy)))
        elif isinstance(value, Stream):
            copy = Stream(dict(value.dict), value.data)
            container[key] = copy
            pending.extend((copy.dict, k) for k in copy.dict)
        # scalars are immutable and shared as-is

    return holder[0]


def deep_copy(node: Node) -> Node:
    """Structural copy with every reference left unchanged."""
    return rewrite_references(node, {})


__all__ = ["rewrite_references", "deep_copy"]
