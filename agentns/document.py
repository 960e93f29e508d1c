"""
Element tree for interpreter documents.

Documents are parsed with expat in non-namespace mode: qualified names are
kept verbatim (``env:get``, ``use:memory``, ``event:schema``) and prefixes
are resolved afterwards against the ``xmlns`` declarations in scope. Unlike
ElementTree this accepts undeclared prefixes, which documents use for
``use:`` aliases and ``event:schema`` annotations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional
from xml.parsers import expat


class DocumentError(ValueError):
    """Raised when a document cannot be parsed."""


@dataclass(eq=False)
class Element:
    """A document element."""

    tag_name: str
    _attributes: list[tuple[str, str]] = field(default_factory=list)
    _children: list["Element"] = field(default_factory=list)
    parent: Optional["Element"] = None
    text: str = ""
    _namespaces: dict[str, str] = field(default_factory=dict)

    @property
    def prefix(self) -> str:
        prefix, sep, _ = self.tag_name.partition(":")
        return prefix if sep else ""

    @property
    def local_name(self) -> str:
        return self.tag_name.rpartition(":")[2]

    @property
    def namespace_uri(self) -> str:
        return self.lookup_namespace(self.prefix)

    def lookup_namespace(self, prefix: str) -> str:
        """URI bound to ``prefix`` in this element's scope, or "" if unbound."""
        return self._namespaces.get(prefix, "")

    def get_attribute(self, name: str) -> str:
        """Attribute value, or "" when the attribute is absent."""
        for attr_name, value in self._attributes:
            if attr_name == name:
                return value
        return ""

    def has_attribute(self, name: str) -> bool:
        return any(attr_name == name for attr_name, _ in self._attributes)

    def attributes(self) -> list[tuple[str, str]]:
        return list(self._attributes)

    def children(self) -> list["Element"]:
        return list(self._children)

    def iter(self) -> Iterator["Element"]:
        """Depth-first walk starting at this element."""
        yield self
        for child in self._children:
            yield from child.iter()

    def __repr__(self) -> str:
        return f"<Element {self.tag_name} children={len(self._children)}>"


@dataclass
class Document:
    root: Element
    source: Optional[str] = None


class _TreeBuilder:
    def __init__(self) -> None:
        self.root: Optional[Element] = None
        self._stack: list[Element] = []

    def start(self, name: str, attrs: list[str]) -> None:
        pairs = list(zip(attrs[0::2], attrs[1::2]))
        parent = self._stack[-1] if self._stack else None
        scope = dict(parent._namespaces) if parent is not None else {}
        for attr_name, value in pairs:
            if attr_name == "xmlns":
                scope[""] = value
            elif attr_name.startswith("xmlns:"):
                scope[attr_name[len("xmlns:"):]] = value

        element = Element(tag_name=name, _attributes=pairs, parent=parent, _namespaces=scope)
        if parent is None:
            self.root = element
        else:
            parent._children.append(element)
        self._stack.append(element)

    def end(self, name: str) -> None:
        self._stack.pop()

    def data(self, text: str) -> None:
        if self._stack:
            self._stack[-1].text += text


def parse_document(content: str | bytes, source: Optional[str] = None) -> Document:
    """Parse document text into a :class:`Document`."""
    builder = _TreeBuilder()
    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    try:
        parser.Parse(content, True)
    except expat.ExpatError as exc:
        where = f"{source}:" if source else ""
        raise DocumentError(
            f"{where}{exc.lineno}:{exc.offset}: {expat.ErrorString(exc.code)}"
        ) from exc

    if builder.root is None:
        raise DocumentError("Document has no root element")
    return Document(root=builder.root, source=source)


def load_document(path: str | Path) -> Document:
    path = Path(path)
    return parse_document(path.read_bytes(), source=str(path))
