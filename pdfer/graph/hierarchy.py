"""Balanced page-tree assembly.

Pages are linked under a new root through /Pages nodes of bounded width:

    * <= max_children pages  -> one /Pages node
    * otherwise              -> pages are chunked into groups of
      max_children, each group gets its own node, and the resulting
      level is chunked again until it fits under a single root.

Every created node carries /Type /Pages, /Kids and /Count, where /Count is
the number of pages below it. Each linked child receives a /Parent back to
the node that now holds it.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Set, Tuple

from pdfer.errors import StructuralError
from pdfer.graph.model import Graph, Name, Node, ObjectId, Reference
from pdfer.graph.rewrite import deep_copy

DEFAULT_MAX_CHILDREN = 8

INHERITABLE_KEYS = ("Resources", "MediaBox", "CropBox", "Rotate")


def build_page_tree(
    graph: Graph,
    page_ids: Sequence[ObjectId],
    max_children: int = DEFAULT_MAX_CHILDREN,
) -> ObjectId:
    """Link ``page_ids`` (in order) under a fresh page tree; return its root id."""
    if not page_ids:
        raise ValueError("build_page_tree() requires at least one page")
    if max_children < 2:
        raise ValueError("max_children must be >= 2")

    level: List[Tuple[ObjectId, int]] = [(page_id, 1) for page_id in page_ids]
    while len(level) > max_children:
        level = [
            _add_pages_node(graph, level[start:start + max_children])
            for start in range(0, len(level), max_children)
        ]

    root_id, _ = _add_pages_node(graph, level)
    return root_id


def _add_pages_node(graph: Graph, children: Sequence[Tuple[ObjectId, int]]) -> Tuple[ObjectId, int]:
    count = sum(child_count for _, child_count in children)
    node_id = graph.add_object(
        {
            "Type": Name("Pages"),
            "Kids": [Reference(child_id) for child_id, _ in children],
            "Count": count,
        }
    )
    for child_id, _ in children:
        graph.get_dict(child_id, node_id)["Parent"] = Reference(node_id)
    return node_id, count


# ---------------------------------------------------------------------
# Attribute inheritance
# ---------------------------------------------------------------------
def inherited_attributes(graph: Graph, page_id: ObjectId) -> Dict[str, Node]:
    """Inheritable attributes the page lacks, looked up along its /Parent chain.

    Values are deep copies; the graph is left untouched.
    """
    page = graph.get_dict(page_id)
    missing = [key for key in INHERITABLE_KEYS if key not in page]
    found: Dict[str, Node] = {}

    seen: Set[ObjectId] = {page_id}
    parent = page.get("Parent")
    current_id = page_id
    while missing and isinstance(parent, Reference):
        if parent.id in seen:
            raise StructuralError(
                f"Cyclic /Parent chain at {parent.id.number} {parent.id.generation} R"
            )
        seen.add(parent.id)
        ancestor = graph.get_dict(parent.id, current_id)

        for key in list(missing):
            if key in ancestor:
                found[key] = deep_copy(ancestor[key])
                missing.remove(key)

        current_id = parent.id
        parent = ancestor.get("Parent")

    return found


def inherit_page_attributes(graph: Graph, page_id: ObjectId) -> List[str]:
    """Copy inheritable attributes from the /Parent chain onto the page.

    Must run before the page is re-parented, otherwise values that only live
    on the old ancestors are lost. Returns the keys that were filled in.
    """
    found = inherited_attributes(graph, page_id)
    graph.get_dict(page_id).update(found)
    return list(found)


__all__ = [
    "DEFAULT_MAX_CHILDREN",
    "INHERITABLE_KEYS",
    "build_page_tree",
    "inherited_attributes",
    "inherit_page_attributes",
]
