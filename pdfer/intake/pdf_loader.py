"""
PDF -> object graph.

Two readers share the work:

    * PyMuPDF (fitz) opens and checks the file, reports the version and the
      xref numbers in use, and hands out raw stream payloads still encoded
      (doc.xref_stream_raw)
    * pypdf parses every indirect object and the trailer into typed values,
      converted to nodes by pdf_objects

Object ids are the xref numbers at generation 0. Cross-reference streams
and object streams describe the file layout rather than the document and
are left out. Encrypted files are refused: their strings and payloads would
be copied still encrypted.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Union

import fitz  # PyMuPDF
from pypdf import PdfReader
from pypdf.errors import PyPdfError
from pypdf.generic import IndirectObject, StreamObject

from pdfer.errors import PdfIoError, PdfSyntaxError
from pdfer.graph.model import Graph, Name, ObjectId, Stream
from pdfer.intake.pdf_objects import from_pdf_object

logger = logging.getLogger(__name__)

KEPT_TRAILER_KEYS = ("Root", "Info", "ID")
LAYOUT_TYPES = (Name("XRef"), Name("ObjStm"))
DEFAULT_VERSION = "1.4"

_VERSION_RE = re.compile(r"(\d+\.\d+)")


def load_pdf(path: Union[str, Path]) -> Graph:
    """Read ``path`` into a Graph. Raises PdfIoError on any failure."""
    path = Path(path)
    if not path.exists():
        raise PdfIoError(path, "Input file does not exist")
    if not path.is_file():
        raise PdfIoError(path, "Input is not a file")

    try:
        doc = fitz.open(str(path))
    except (RuntimeError, ValueError, OSError) as exc:
        raise PdfIoError(path, f"Failed to load PDF ({exc})") from exc

    with doc:
        if not doc.is_pdf:
            raise PdfIoError(path, "Not a PDF document")
        if doc.needs_pass:
            raise PdfIoError(path, "PDF is password protected")
        if _is_encrypted(doc):
            raise PdfIoError(path, "Encrypted PDFs are not supported")

        try:
            reader = PdfReader(str(path))
        except (PyPdfError, ValueError, OSError) as exc:
            raise PdfIoError(path, f"Failed to load PDF ({exc})") from exc
        if reader.is_encrypted:
            raise PdfIoError(path, "Encrypted PDFs are not supported")

        graph = Graph.empty(version=_detect_version(doc.metadata), source=str(path))
        generations = _generations(reader)
        xref_count = doc.xref_length()

        for xref in range(1, xref_count):
            try:
                value = reader.get_object(IndirectObject(xref, generations.get(xref, 0), reader))
                if isinstance(value, StreamObject):
                    header = from_pdf_object(value)
                    if header.get("Type") in LAYOUT_TYPES:
                        continue
                    node = Stream(header, doc.xref_stream_raw(xref) or b"")
                else:
                    node = from_pdf_object(value)
            except (PyPdfError, PdfSyntaxError, RuntimeError, ValueError) as exc:
                raise PdfIoError(path, f"Failed to read object {xref} ({exc})") from exc
            graph.insert(ObjectId(xref, 0), node)

        try:
            trailer = from_pdf_object(reader.trailer)
        except PdfSyntaxError as exc:
            raise PdfIoError(path, f"Failed to read trailer ({exc})") from exc

    graph.trailer = {key: trailer[key] for key in KEPT_TRAILER_KEYS if key in trailer}
    graph.max_id = max(graph.max_id, xref_count - 1)

    logger.debug("loaded %s: %d objects, version %s", path, len(graph.objects), graph.version)
    return graph


def _is_encrypted(doc) -> bool:
    # needs_pass stays False when the user password is empty
    if (doc.metadata or {}).get("encryption"):
        return True
    kind, _ = doc.xref_get_key(-1, "Encrypt")
    return kind != "null"


def _generations(reader: PdfReader) -> Dict[int, int]:
    # object number -> generation in use; object streams only hold generation 0
    table: Dict[int, int] = {}
    for generation, entries in reader.xref.items():
        for number in entries:
            if not reader.xref_free_entry.get(generation, {}).get(number, False):
                table[number] = generation
    return table


def _detect_version(metadata) -> str:
    # metadata["format"] looks like "PDF 1.7"
    fmt = (metadata or {}).get("format") or ""
    match = _VERSION_RE.search(fmt)
    return match.group(1) if match else DEFAULT_VERSION


__all__ = ["load_pdf"]
