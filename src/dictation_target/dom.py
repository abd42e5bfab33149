"""Document capability consumed by the detection engine.

The engine never reaches for a global document. Every entry point receives a
``DocumentLike`` (or an element of one), so the same heuristics run against a
snapshot captured from a live Playwright page or against a synthetic tree.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, Field

from .config import VIEWPORT

KNOWN_INPUT_TYPES = {
    "button",
    "checkbox",
    "color",
    "date",
    "datetime-local",
    "email",
    "file",
    "hidden",
    "image",
    "month",
    "number",
    "password",
    "radio",
    "range",
    "reset",
    "search",
    "submit",
    "tel",
    "text",
    "time",
    "url",
    "week",
}
BUTTON_TYPES = {"submit", "reset", "button"}
CONTENT_EDITABLE_VALUES = {"", "true", "plaintext-only"}


class Rect(BaseModel):
    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height


class ComputedStyle(BaseModel):
    display: str = "block"
    visibility: str = "visible"
    opacity: str = "1"


class Viewport(BaseModel):
    width: float = float(VIEWPORT["width"])
    height: float = float(VIEWPORT["height"])


class NodeSnapshot(BaseModel):
    uid: int
    tag: str
    parent: Optional[int] = None
    attributes: Dict[str, str] = Field(default_factory=dict)
    rect: Rect = Field(default_factory=Rect)
    style: ComputedStyle = Field(default_factory=ComputedStyle)
    text: str = ""  # direct text children only
    laid_out: bool = True  # offsetParent !== null
    selector: Optional[str] = None


class DocumentSnapshot(BaseModel):
    url: str = "about:blank"
    viewport: Viewport = Field(default_factory=Viewport)
    nodes: List[NodeSnapshot] = Field(default_factory=list)


class ElementLike(Protocol):
    """Readable facets of one element in the host document."""

    @property
    def handle(self) -> Hashable: ...

    @property
    def tag(self) -> str: ...

    @property
    def parent(self) -> Optional["ElementLike"]: ...

    @property
    def form(self) -> Optional["ElementLike"]: ...

    @property
    def text_content(self) -> str: ...

    @property
    def is_laid_out(self) -> bool: ...

    def get_attribute(self, name: str) -> Optional[str]: ...

    def bounding_rect(self) -> Rect: ...

    def computed_style(self) -> ComputedStyle: ...

    def descendants(self) -> Iterator["ElementLike"]: ...


class DocumentLike(Protocol):
    @property
    def viewport(self) -> Viewport: ...

    def elements(self) -> Iterator[ElementLike]: ...


class SnapshotElement:
    """Element view over one ``NodeSnapshot`` of a ``SnapshotDocument``."""

    __slots__ = ("_node", "_document")

    def __init__(self, node: NodeSnapshot, document: "SnapshotDocument") -> None:
        self._node = node
        self._document = document

    @property
    def handle(self) -> int:
        return self._node.uid

    @property
    def tag(self) -> str:
        return self._node.tag.lower()

    @property
    def selector(self) -> Optional[str]:
        return self._node.selector

    @property
    def document(self) -> "SnapshotDocument":
        return self._document

    @property
    def parent(self) -> Optional["SnapshotElement"]:
        if self._node.parent is None:
            return None
        return self._document.element(self._node.parent)

    @property
    def form(self) -> Optional["SnapshotElement"]:
        ancestor = self.parent
        while ancestor is not None:
            if ancestor.tag == "form":
                return ancestor
            ancestor = ancestor.parent
        return None

    @property
    def text_content(self) -> str:
        parts = [self._node.text.strip()]
        parts.extend(child._node.text.strip() for child in self.descendants())
        return " ".join(part for part in parts if part)

    @property
    def is_laid_out(self) -> bool:
        return self._node.laid_out

    def get_attribute(self, name: str) -> Optional[str]:
        return self._node.attributes.get(name.lower())

    def bounding_rect(self) -> Rect:
        return self._node.rect

    def computed_style(self) -> ComputedStyle:
        return self._node.style

    def children(self) -> List["SnapshotElement"]:
        return self._document.children_of(self._node.uid)

    def descendants(self) -> Iterator["SnapshotElement"]:
        stack = list(reversed(self.children()))
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnapshotElement):
            return NotImplemented
        return self._document is other._document and self._node.uid == other._node.uid

    def __hash__(self) -> int:
        return hash((id(self._document), self._node.uid))

    def __repr__(self) -> str:
        return f"<SnapshotElement {self.tag}#{self._node.uid}>"


class SnapshotDocument:
    """In-memory document built from a captured or synthetic snapshot.

    Nodes are expected in document order, which is what both the capture
    script and ``snapshot_from_tree`` produce.
    """

    def __init__(self, snapshot: DocumentSnapshot) -> None:
        self.snapshot = snapshot
        self._elements: Dict[int, SnapshotElement] = {}
        self._children: Dict[Optional[int], List[int]] = {}
        for node in snapshot.nodes:
            self._elements[node.uid] = SnapshotElement(node, self)
            self._children.setdefault(node.parent, []).append(node.uid)

    @classmethod
    def empty(cls, url: str = "about:blank", viewport: Optional[Viewport] = None) -> "SnapshotDocument":
        return cls(DocumentSnapshot(url=url, viewport=viewport or Viewport()))

    @property
    def url(self) -> str:
        return self.snapshot.url

    @property
    def viewport(self) -> Viewport:
        return self.snapshot.viewport

    def elements(self) -> Iterator[SnapshotElement]:
        for node in self.snapshot.nodes:
            yield self._elements[node.uid]

    def element(self, uid: int) -> Optional[SnapshotElement]:
        return self._elements.get(uid)

    def children_of(self, uid: Optional[int]) -> List[SnapshotElement]:
        return [self._elements[child] for child in self._children.get(uid, [])]

    def find(self, **attributes: str) -> Optional[SnapshotElement]:
        """Return the first element whose attributes match every keyword (``aria_label`` → ``aria-label``)."""
        wanted = {key.replace("_", "-"): value for key, value in attributes.items()}
        for element in self.elements():
            if all(element.get_attribute(key) == value for key, value in wanted.items()):
                return element
        return None

    def __len__(self) -> int:
        return len(self._elements)


RectLike = Union[Rect, Mapping[str, float], Sequence[float], None]


def snapshot_from_tree(
    tree: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]],
    *,
    url: str = "about:blank",
    viewport: Optional[Viewport] = None,
) -> SnapshotDocument:
    """Flatten a nested ``{"tag", "attrs", "rect", "style", "text", "laid_out", "children"}`` tree.

    ``rect`` accepts a ``Rect``, a mapping, or a ``(top, left, width, height)`` tuple.
    """
    roots = [tree] if isinstance(tree, Mapping) else list(tree)
    nodes: List[NodeSnapshot] = []

    def visit(entry: Mapping[str, Any], parent: Optional[int]) -> None:
        uid = len(nodes)
        attributes = {str(key).lower(): str(value) for key, value in (entry.get("attrs") or {}).items()}
        nodes.append(
            NodeSnapshot(
                uid=uid,
                tag=str(entry["tag"]).lower(),
                parent=parent,
                attributes=attributes,
                rect=_coerce_rect(entry.get("rect")),
                style=ComputedStyle(**(entry.get("style") or {})),
                text=entry.get("text") or "",
                laid_out=entry.get("laid_out", True),
                selector=entry.get("selector"),
            )
        )
        for child in entry.get("children") or []:
            visit(child, uid)

    for root in roots:
        visit(root, None)
    return SnapshotDocument(DocumentSnapshot(url=url, viewport=viewport or Viewport(), nodes=nodes))


def _coerce_rect(value: RectLike) -> Rect:
    if value is None:
        return Rect()
    if isinstance(value, Rect):
        return value
    if isinstance(value, Mapping):
        return Rect(**value)
    top, left, width, height = value
    return Rect(top=top, left=left, width=width, height=height)


def input_type_of(element: ElementLike) -> str:
    """Effective ``type`` of an ``<input>``; missing or unknown values mean ``text``."""
    raw = (element.get_attribute("type") or "").strip().lower()
    return raw if raw in KNOWN_INPUT_TYPES else "text"


def button_type_of(element: ElementLike) -> str:
    """Effective ``type`` of a ``<button>``; missing or unknown values mean ``submit``."""
    raw = (element.get_attribute("type") or "").strip().lower()
    return raw if raw in BUTTON_TYPES else "submit"


def native_type_of(element: ElementLike) -> str:
    tag = element.tag
    if tag == "input":
        return input_type_of(element)
    if tag == "button":
        return button_type_of(element)
    return ""


def is_content_editable(element: ElementLike) -> bool:
    value = element.get_attribute("contenteditable")
    return value is not None and value.strip().lower() in CONTENT_EDITABLE_VALUES


def class_tokens(element: ElementLike) -> List[str]:
    return (element.get_attribute("class") or "").split()


__all__ = [
    "ComputedStyle",
    "DocumentLike",
    "DocumentSnapshot",
    "ElementLike",
    "NodeSnapshot",
    "Rect",
    "SnapshotDocument",
    "SnapshotElement",
    "Viewport",
    "button_type_of",
    "class_tokens",
    "input_type_of",
    "is_content_editable",
    "native_type_of",
    "snapshot_from_tree",
]
