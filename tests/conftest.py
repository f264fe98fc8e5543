"""
Shared fixtures: small in-memory documents built straight from graph nodes.
"""

from __future__ import annotations

from typing import Callable, Optional

import pytest

from pdfer.graph import Graph, Name, ObjectId, PdfString, Reference, Stream


def _build_document(
    page_count: int = 3,
    *,
    label: str = "doc",
    title: Optional[str] = None,
    inherited: bool = True,
    source: Optional[str] = None,
) -> Graph:
    """Catalog -> one /Pages node -> ``page_count`` pages sharing one font.

    With ``inherited`` the Resources / MediaBox live on the /Pages node
    (pages inherit them); otherwise every page carries its own.
    Page contents read ``(<label> page <n>)``.
    """
    graph = Graph.empty(version="1.7", source=source or f"{label}.pdf")

    font_id = graph.add_object(
        {"Type": Name("Font"), "Subtype": Name("Type1"), "BaseFont": Name("Helvetica")}
    )
    resources = {"Font": {"F1": Reference(font_id)}}
    media_box = [0, 0, 612, 792]

    pages_id = graph.add_object({"Type": Name("Pages"), "Kids": [], "Count": 0})
    pages = graph.objects[pages_id]
    if inherited:
        pages["Resources"] = resources
        pages["MediaBox"] = media_box

    for number in range(1, page_count + 1):
        data = f"BT /F1 12 Tf 72 720 Td ({label} page {number}) Tj ET".encode("latin-1")
        content_id = graph.add_object(Stream({"Length": len(data)}, data))
        page = {"Type": Name("Page"), "Parent": Reference(pages_id), "Contents": Reference(content_id)}
        if not inherited:
            page["Resources"] = {"Font": {"F1": Reference(font_id)}}
            page["MediaBox"] = list(media_box)
        page_id = graph.add_object(page)
        pages["Kids"].append(Reference(page_id))
        pages["Count"] += 1

    catalog_id = graph.add_object({"Type": Name("Catalog"), "Pages": Reference(pages_id)})
    info_id = graph.add_object(
        {
            "Title": PdfString((title or label).encode("latin-1")),
            "Author": PdfString(b"pdfer tests"),
        }
    )
    graph.trailer = {
        "Root": Reference(catalog_id),
        "Info": Reference(info_id),
        "ID": [PdfString(b"\x01" * 16, hex=True), PdfString(b"\x02" * 16, hex=True)],
        "Size": graph.max_id + 1,
    }
    return graph


def _page_text(graph: Graph, page_id: ObjectId) -> bytes:
    page = graph.get_dict(page_id)
    contents = page["Contents"]
    return graph.get_object(contents.id).data


@pytest.fixture
def build_document() -> Callable[..., Graph]:
    return _build_document


@pytest.fixture
def page_text() -> Callable[[Graph, ObjectId], bytes]:
    return _page_text
