"""Document summary: page count, version and Info metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pdfer.graph import Graph, PdfString, Reference

INFO_FIELDS = ("Title", "Author", "Subject")


@dataclass
class DocumentInfo:
    path: Optional[Path]
    page_count: int
    version: str
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    page_numbers: List[int] = field(default_factory=list)


def describe_document(graph: Graph, path: Optional[Path] = None) -> DocumentInfo:
    page_count = graph.page_count
    info = DocumentInfo(
        path=Path(path) if path is not None else (Path(graph.source) if graph.source else None),
        page_count=page_count,
        version=graph.version,
        page_numbers=list(range(1, page_count + 1)),
    )

    info_dict = _info_dictionary(graph)
    for key in INFO_FIELDS:
        value = info_dict.get(key)
        if isinstance(value, PdfString):
            setattr(info, key.lower(), value.text())
    return info


def _info_dictionary(graph: Graph) -> dict:
    value = graph.trailer.get("Info")
    if isinstance(value, Reference):
        value = graph.objects.get(value.id)
    return value if isinstance(value, dict) else {}


def format_document_info(info: DocumentInfo) -> List[str]:
    lines = [
        f">>> {info.path if info.path is not None else '<in-memory document>'}",
        f"    Pages: {info.page_count}",
        f"    Version: {info.version}",
    ]
    if info.title is not None:
        lines.append(f"    Title: {info.title}")
    if info.author is not None:
        lines.append(f"    Author: {info.author}")
    if info.subject is not None:
        lines.append(f"    Subject: {info.subject}")

    numbers = info.page_numbers
    if numbers:
        if len(numbers) <= 10:
            lines.append(f"    Page numbers: {numbers}")
        else:
            lines.append(f"    Page numbers: {numbers[0]} to {numbers[-1]}")
    return lines


__all__ = ["DocumentInfo", "describe_document", "format_document_info"]
