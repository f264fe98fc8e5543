"""Object graph -> PDF file.

The graph is rebuilt inside a new PyMuPDF document: every object gets a
fresh xref (``get_new_xref``), references are rewritten to those numbers,
object text comes from pdf_objects and stream payloads are stored as they
are, still encoded. PyMuPDF writes the file; ``garbage=2`` drops the
catalog a new document starts with and compacts the xref table.

PyMuPDF refuses to save a document without pages, so neither can
``save_pdf``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import fitz  # PyMuPDF

from pdfer.errors import PageTreeError, PdfIoError, PdfSyntaxError
from pdfer.graph.model import Graph, ObjectId, Stream
from pdfer.graph.remap import IdTable
from pdfer.graph.rewrite import rewrite_references
from pdfer.intake.pdf_objects import object_source

logger = logging.getLogger(__name__)

TRAILER_KEYS = ("Root", "Info", "ID")


def to_fitz_document(graph: Graph) -> fitz.Document:
    """Copy ``graph`` into a new in-memory PyMuPDF document."""
    if "Root" not in graph.trailer:
        raise PageTreeError("Cannot write a graph without a /Root")

    doc = fitz.open()
    try:
        _copy_objects(graph, doc)
    except Exception:
        doc.close()
        raise
    return doc


def _copy_objects(graph: Graph, doc: fitz.Document) -> None:
    table: IdTable = {object_id: ObjectId(doc.get_new_xref(), 0) for object_id in sorted(graph.objects)}

    for old_id, new_id in table.items():
        node = rewrite_references(graph.objects[old_id], table)
        if isinstance(node, Stream):
            header = dict(node.dict)
            header["Length"] = len(node.data)
            source = object_source(header)
            doc.update_object(new_id.number, source)
            doc.update_stream(new_id.number, node.data, compress=False)
            # update_stream drops /Filter and /DecodeParms; the payload is still encoded
            doc.update_object(new_id.number, source)
        else:
            doc.update_object(new_id.number, object_source(node))

    for key in TRAILER_KEYS:
        if key in graph.trailer:
            doc.xref_set_key(-1, key, object_source(rewrite_references(graph.trailer[key], table)))


def save_pdf(graph: Graph, path: Union[str, Path]) -> Path:
    """Write ``graph`` to ``path`` (parent folders are created)."""
    path = Path(path)
    if "Encrypt" in graph.trailer:
        raise PdfIoError(path, "Writing encrypted documents is not supported")

    try:
        doc = to_fitz_document(graph)
    except PdfSyntaxError as exc:
        raise PdfIoError(path, f"Failed to build PDF ({exc})") from exc
    except (RuntimeError, ValueError) as exc:
        raise PdfIoError(path, f"PyMuPDF rejected an object ({exc})") from exc

    with doc:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            doc.save(str(path), garbage=2, no_new_id=True)
        except OSError as exc:
            raise PdfIoError(path, f"Failed to save ({exc.strerror or exc})") from exc
        except (RuntimeError, ValueError) as exc:
            raise PdfIoError(path, f"Failed to save ({exc})") from exc

    logger.debug("saved %s: %d objects", path, len(graph.objects))
    return path


__all__ = ["to_fitz_document", "save_pdf"]
