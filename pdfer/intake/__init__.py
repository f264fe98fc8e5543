"""Document I/O: PDF files in and out of the object graph."""

from __future__ import annotations

from pdfer.intake.pdf_loader import load_pdf
from pdfer.intake.pdf_objects import from_pdf_object, object_source, to_pdf_object
from pdfer.intake.pdf_writer import to_fitz_document, save_pdf

__all__ = [
    "load_pdf",
    "save_pdf",
    "to_fitz_document",
    "from_pdf_object",
    "to_pdf_object",
    "object_source",
]
