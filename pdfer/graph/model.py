"""In-memory object graph of a PDF document.

Defines:
    - ObjectId: (number, generation) pair; number 0 is the "no object" sentinel
    - Reference / Name / PdfString / Stream: tagged node values
    - Graph: object table + trailer + max-id watermark

A Node is any of:

    * Reference            - edge to another object, by id
    * dict                 - PDF dictionary, keys are names without "/"
    * list                 - PDF array
    * Stream               - dictionary + opaque byte payload
    * Name, PdfString      - PDF names and strings
    * int, float, bool, None

Objects never hold each other directly; every edge is a Reference looked up
in ``Graph.objects``. Cycles (a page pointing back at its parent) are
therefore just ids and cost nothing to represent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NamedTuple, Optional

from pdfer.errors import DanglingReferenceError, PageTreeError, StructuralError


class ObjectId(NamedTuple):
    number: int
    generation: int = 0


NULL_ID = ObjectId(0, 0)


# =====================================================================
# Node values
# =====================================================================
@dataclass(frozen=True)
class Reference:
    id: ObjectId

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Ref {self.id.number} {self.id.generation} R>"


@dataclass(frozen=True)
class Name:
    value: str

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"/{self.value}"


@dataclass(frozen=True)
class PdfString:
    data: bytes
    hex: bool = False

    def text(self) -> str:
        """Decode as a PDF text string (BOM aware, latin-1 otherwise)."""
        raw = self.data
        if raw.startswith(b"\xfe\xff"):
            return raw[2:].decode("utf-16-be", errors="replace")
        if raw.startswith(b"\xef\xbb\xbf"):
            return raw[3:].decode("utf-8", errors="replace")
        return raw.decode("latin-1")


@dataclass
class Stream:
    dict: Dict[str, Any]
    data: bytes = b""


Node = Any


def iter_references(node: Node) -> Iterator[Reference]:
    """Yield every Reference inside ``node`` in document order.

    Descends into dictionaries, arrays and a stream's own dictionary; never
    into a stream's payload.
    """
    pending: List[Node] = [node]
    while pending:
        value = pending.pop()
        if isinstance(value, Reference):
            yield value
        elif isinstance(value, dict):
            pending.extend(reversed(list(value.values())))
        elif isinstance(value, list):
            pending.extend(reversed(value))
        elif isinstance(value, Stream):
            pending.extend(reversed(list(value.dict.values())))


def is_page_tree_node(node: Node) -> bool:
    """True for /Pages nodes (or untyped nodes that carry /Kids)."""
    if not isinstance(node, dict):
        return False
    node_type = node.get("Type")
    if node_type is not None:
        return node_type == Name("Pages")
    return "Kids" in node


# =====================================================================
# Graph
# =====================================================================
@dataclass
class Graph:
    """Object table of one document.

    ``max_id`` is kept >= the highest object number in use; ``add_object``
    allocates above it.
    """

    objects: Dict[ObjectId, Node] = field(default_factory=dict)
    trailer: Dict[str, Node] = field(default_factory=dict)
    max_id: int = 0
    version: str = "1.5"
    source: Optional[str] = None

    @classmethod
    def empty(cls, version: str = "1.5", source: Optional[str] = None) -> "Graph":
        return cls(version=version, source=source)

    # ------------------------------------------------------------------
    def get_object(self, object_id: ObjectId, referrer: Optional[ObjectId] = None) -> Node:
        try:
            return self.objects[object_id]
        except KeyError:
            raise DanglingReferenceError(object_id, referrer) from None

    def get_dict(self, object_id: ObjectId, referrer: Optional[ObjectId] = None) -> Dict[str, Node]:
        node = self.get_object(object_id, referrer)
        if isinstance(node, Stream):
            return node.dict
        if not isinstance(node, dict):
            raise StructuralError(
                f"Object {object_id.number} {object_id.generation} R is not a dictionary"
            )
        return node

    def insert(self, object_id: ObjectId, node: Node) -> None:
        self.objects[object_id] = node
        if object_id.number > self.max_id:
            self.max_id = object_id.number

    def add_object(self, node: Node) -> ObjectId:
        object_id = ObjectId(self.max_id + 1, 0)
        self.insert(object_id, node)
        return object_id

    # ------------------------------------------------------------------
    def root_id(self) -> ObjectId:
        root = self.trailer.get("Root")
        if not isinstance(root, Reference):
            raise PageTreeError("Trailer has no /Root reference")
        return root.id

    def page_ids(self) -> List[ObjectId]:
        """Pages in document order, walking the page tree depth-first."""
        root_id = self.root_id()
        catalog = self.get_dict(root_id)
        pages_ref = catalog.get("Pages")
        if not isinstance(pages_ref, Reference):
            raise PageTreeError("Catalog has no /Pages reference")

        result: List[ObjectId] = []
        seen = set()
        stack = [(pages_ref.id, root_id)]
        while stack:
            object_id, referrer = stack.pop()
            if object_id in seen:
                raise PageTreeError(
                    f"Page tree visits object {object_id.number} {object_id.generation} R twice"
                )
            seen.add(object_id)

            node = self.get_dict(object_id, referrer)
            if not is_page_tree_node(node):
                result.append(object_id)
                continue

            kids = node.get("Kids", [])
            if not isinstance(kids, list):
                raise PageTreeError(
                    f"/Kids of {object_id.number} {object_id.generation} R is not an array"
                )
            for kid in reversed(kids):
                if not isinstance(kid, Reference):
                    raise PageTreeError(
                        f"/Kids of {object_id.number} {object_id.generation} R holds {kid!r}, "
                        "not a reference"
                    )
                stack.append((kid.id, object_id))
        return result

    @property
    def page_count(self) -> int:
        return len(self.page_ids())

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Graph objects={len(self.objects)} max_id={self.max_id} source={self.source!r}>"


__all__ = [
    "ObjectId",
    "NULL_ID",
    "Reference",
    "Name",
    "PdfString",
    "Stream",
    "Node",
    "Graph",
    "iter_references",
    "is_page_tree_node",
]
