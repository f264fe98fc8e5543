"""Conversion between pypdf generic objects and graph nodes.

pypdf parses the file; ``from_pdf_object`` turns what it hands back into
the plain node types of ``pdfer.graph``. ``object_source`` goes the other
way and lets pypdf serialize a node, which is how the writer feeds object
text to PyMuPDF.

Indirect references are read at generation 0, matching the xref numbers
PyMuPDF addresses objects by. Strings are always written as hex so their
bytes survive unchanged.
"""

from __future__ import annotations

from io import BytesIO
from typing import Any, List, Tuple

from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    PdfObject,
    StreamObject,
    TextStringObject,
)

from pdfer.errors import PdfSyntaxError
from pdfer.graph.model import Name, Node, ObjectId, PdfString, Reference, Stream


def from_pdf_object(value: Any) -> Node:
    """pypdf object -> node.

    A stream converts to its dictionary without /Length; the payload is left
    to the caller.
    """
    holder: List[Node] = [None]
    pending: List[Tuple[Any, Any, Any]] = [(holder, 0, value)]

    while pending:
        container, key, item = pending.pop()

        if isinstance(item, IndirectObject):
            container[key] = Reference(ObjectId(item.idnum, 0))
        elif isinstance(item, DictionaryObject):
            node = {}
            container[key] = node
            for name, child in dict.items(item):
                if name == "/Length" and isinstance(item, StreamObject):
                    continue
                node[name[1:]] = None
                pending.append((node, name[1:], child))
        elif isinstance(item, ArrayObject):
            node = [None] * len(item)
            container[key] = node
            pending.extend((node, i, child) for i, child in enumerate(item))
        else:
            container[key] = _scalar(item)

    return holder[0]


def _scalar(item: Any) -> Node:
    if item is None or isinstance(item, NullObject):
        return None
    if isinstance(item, BooleanObject):
        return bool(item.value)
    if isinstance(item, NameObject):
        return Name(str(item)[1:])
    if isinstance(item, TextStringObject):
        return PdfString(item.get_encoded_bytes())
    if isinstance(item, ByteStringObject):
        return PdfString(bytes(item), hex=True)
    if isinstance(item, NumberObject):
        return int(item)
    if isinstance(item, FloatObject):
        return float(item)
    raise PdfSyntaxError(f"Unsupported PDF object {type(item).__name__}")


def to_pdf_object(node: Node) -> PdfObject:
    """Node -> pypdf object. A Stream contributes its dictionary only."""
    if isinstance(node, Stream):
        node = node.dict

    holder: List[Any] = [None]
    pending: List[Tuple[Any, Any, Node]] = [(holder, 0, node)]

    while pending:
        container, key, item = pending.pop()

        if isinstance(item, Reference):
            container[key] = IndirectObject(item.id.number, item.id.generation, None)
        elif isinstance(item, dict):
            out = DictionaryObject()
            container[key] = out
            for name, child in item.items():
                out[NameObject("/" + name)] = NullObject()
                pending.append((out, NameObject("/" + name), child))
        elif isinstance(item, list):
            out = ArrayObject([NullObject()] * len(item))
            container[key] = out
            pending.extend((out, i, child) for i, child in enumerate(item))
        elif isinstance(item, Stream):
            raise PdfSyntaxError("Stream objects cannot be nested")
        elif item is None:
            container[key] = NullObject()
        elif isinstance(item, bool):
            container[key] = BooleanObject(item)
        elif isinstance(item, int):
            container[key] = NumberObject(item)
        elif isinstance(item, float):
            container[key] = FloatObject(item)
        elif isinstance(item, Name):
            container[key] = NameObject("/" + item.value)
        elif isinstance(item, PdfString):
            container[key] = ByteStringObject(item.data)
        else:
            raise PdfSyntaxError(f"Cannot serialize {type(item).__name__}")

    return holder[0]


def object_source(node: Node) -> str:
    """PDF source text of ``node`` (a Stream yields its dictionary)."""
    buf = BytesIO()
    to_pdf_object(node).write_to_stream(buf)
    return buf.getvalue().decode("latin-1")


__all__ = ["from_pdf_object", "to_pdf_object", "object_source"]
