"""pdfer: merge and split PDF documents at the object-graph level.

Public API:

    - Graph / ObjectId / Reference / Name / PdfString / Stream
    - MergeOrchestrator, SplitOrchestrator, PdferConfig
    - parse_page_ranges() for page selections
    - load_pdf() / save_pdf() for file I/O
"""

from __future__ import annotations

from pdfer.config import PdferConfig
from pdfer.graph import Graph, Name, ObjectId, PdfString, Reference, Stream
from pdfer.intake import load_pdf, save_pdf
from pdfer.ops import MergeOrchestrator, SplitOrchestrator, parse_page_ranges

__version__ = "0.1.0"

__all__ = [
    "PdferConfig",
    "Graph",
    "Name",
    "ObjectId",
    "PdfString",
    "Reference",
    "Stream",
    "load_pdf",
    "save_pdf",
    "MergeOrchestrator",
    "SplitOrchestrator",
    "parse_page_ranges",
    "__version__",
]
