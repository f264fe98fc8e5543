"""Steps shared by merge and split when finishing a target document."""

from __future__ import annotations

from typing import Sequence

from pdfer.graph import (
    Graph,
    IdTable,
    Name,
    ObjectId,
    Reference,
    build_page_tree,
    inherit_page_attributes,
    rewrite_references,
)

METADATA_KEYS = ("Info", "ID", "Encrypt")


def attach_pages(graph: Graph, page_ids: Sequence[ObjectId], max_children: int) -> ObjectId:
    """Hang ``page_ids`` under a new page tree + catalog; point the trailer at it.

    Returns the catalog id.
    """
    for page_id in page_ids:
        inherit_page_attributes(graph, page_id)

    pages_id = build_page_tree(graph, page_ids, max_children)
    catalog_id = graph.add_object({"Type": Name("Catalog"), "Pages": Reference(pages_id)})
    graph.trailer["Root"] = Reference(catalog_id)
    return catalog_id


def copy_trailer_metadata(source: Graph, target: Graph, table: IdTable) -> None:
    """Carry Info / ID / Encrypt over into ``target``'s id space.

    A reference entry is copied only when its object was copied too.
    """
    for key in METADATA_KEYS:
        if key not in source.trailer:
            continue
        value = source.trailer[key]
        if isinstance(value, Reference) and value.id not in table:
            continue
        target.trailer[key] = rewrite_references(value, table)


def finalize_size(graph: Graph) -> None:
    graph.trailer["Size"] = graph.max_id + 1


__all__ = ["METADATA_KEYS", "attach_pages", "copy_trailer_metadata", "finalize_size"]
