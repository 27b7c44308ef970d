"""SVG document arena — facade over xml.etree.ElementTree.

The markup is parsed once into a flat, index-addressed list of nodes with
parent/children index lists. Stages mutate the arena (attributes, moves,
removals) instead of a live element tree, so traversal snapshots never get
invalidated by edits. ``serialize()`` rebuilds markup from the arena.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from animsvg.errors import SvgParseError

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# Tags whose subtrees carry no directly rendered geometry
NON_VISUAL_TAGS = {"defs", "metadata", "title", "desc"}

SHAPE_TAGS = {"path", "circle", "ellipse", "rect", "line", "polyline", "polygon"}


def _split_tag(tag: str) -> tuple[str | None, str]:
    if tag.startswith("{"):
        ns, local = tag[1:].split("}", 1)
        return ns, local
    return None, tag


@dataclass
class ElementNode:
    """One element in the arena."""

    index: int
    tag: str
    namespace: str | None = None
    # Ordered attribute map (Clark notation for namespaced names)
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[int] = field(default_factory=list)
    # Lookup only; the arena owns every node
    parent: int | None = None
    text: str | None = None
    tail: str | None = None
    removed: bool = False

    @property
    def qualified_tag(self) -> str:
        return f"{{{self.namespace}}}{self.tag}" if self.namespace else self.tag


class SvgDocument:
    """Arena of ``ElementNode``s rooted at a single ``svg`` element."""

    def __init__(self, nodes: list[ElementNode], root: int = 0) -> None:
        self._nodes = nodes
        self._root = root

    # ── parse / serialize ────────────────────────────────────────────────

    @classmethod
    def parse(cls, svg_text: str) -> SvgDocument:
        """Parse SVG markup. Raises ``SvgParseError`` on malformed input."""
        if not svg_text or not svg_text.strip():
            raise SvgParseError("empty SVG document")
        try:
            root_el = ET.fromstring(svg_text.strip())
        except ET.ParseError as e:
            raise SvgParseError(f"malformed SVG markup: {e}") from e

        _, local = _split_tag(root_el.tag)
        if local != "svg":
            raise SvgParseError(f"root element is <{local}>, expected <svg>")

        nodes: list[ElementNode] = []

        def visit(el: ET.Element, parent: int | None) -> int:
            ns, tag = _split_tag(el.tag)
            idx = len(nodes)
            nodes.append(
                ElementNode(
                    index=idx,
                    tag=tag,
                    namespace=ns,
                    attributes=dict(el.attrib),
                    parent=parent,
                    text=el.text,
                    tail=el.tail,
                )
            )
            for child in el:
                if not isinstance(child.tag, str):
                    continue
                nodes[idx].children.append(visit(child, idx))
            return idx

        visit(root_el, None)
        logger.debug("Parsed SVG arena: %d nodes", len(nodes))
        return cls(nodes)

    def serialize(self) -> str:
        """Rebuild markup from the live part of the arena."""

        def build(idx: int) -> ET.Element:
            node = self._nodes[idx]
            el = ET.Element(node.qualified_tag, dict(node.attributes))
            el.text = node.text
            el.tail = node.tail
            for child in node.children:
                el.append(build(child))
            return el

        root = build(self._root)
        root.tail = None
        # The prefix map is process-global and other libraries (svgpathtools)
        # register "svg" for the same URI
        ET.register_namespace("", SVG_NS)
        ET.register_namespace("xlink", XLINK_NS)
        return ET.tostring(root, encoding="unicode")

    # ── navigation ───────────────────────────────────────────────────────

    @property
    def root(self) -> int:
        return self._root

    @property
    def namespace(self) -> str | None:
        return self._nodes[self._root].namespace

    def node(self, idx: int) -> ElementNode:
        return self._nodes[idx]

    def tag(self, idx: int) -> str:
        return self._nodes[idx].tag

    def parent(self, idx: int) -> int | None:
        return self._nodes[idx].parent

    def children(self, idx: int) -> list[int]:
        """Snapshot of the child indices (safe to mutate the arena while iterating)."""
        return list(self._nodes[idx].children)

    def is_live(self, idx: int) -> bool:
        return not self._nodes[idx].removed

    def iter_preorder(self, start: int | None = None, skip: set[str] | None = None) -> list[int]:
        """Pre-order snapshot of the subtree at ``start`` (root by default).

        Subtrees whose tag is in ``skip`` are left out entirely.
        """
        order: list[int] = []
        stack = [self._root if start is None else start]
        while stack:
            idx = stack.pop()
            node = self._nodes[idx]
            if node.removed:
                continue
            if skip and node.tag in skip and idx != start:
                continue
            order.append(idx)
            stack.extend(reversed(node.children))
        return order

    def descendants(self, idx: int | None = None) -> list[int]:
        """Every live element below ``idx`` (root by default), pre-order."""
        return self.iter_preorder(idx)[1:]

    def find_all(self, tag: str) -> list[int]:
        return [i for i in self.descendants() if self._nodes[i].tag == tag]

    def depth(self, idx: int) -> int:
        d = 0
        parent = self._nodes[idx].parent
        while parent is not None:
            d += 1
            parent = self._nodes[parent].parent
        return d

    def element_count(self) -> int:
        """Number of live elements below the root."""
        return len(self.descendants())

    # ── attributes ───────────────────────────────────────────────────────

    def get(self, idx: int, name: str, default: str | None = None) -> str | None:
        return self._nodes[idx].attributes.get(name, default)

    def set(self, idx: int, name: str, value: str) -> None:
        self._nodes[idx].attributes[name] = value

    def remove_attribute(self, idx: int, name: str) -> bool:
        return self._nodes[idx].attributes.pop(name, None) is not None

    def attributes(self, idx: int) -> dict[str, str]:
        return dict(self._nodes[idx].attributes)

    def rename(self, idx: int, tag: str) -> None:
        """Change the local tag name, keeping the namespace."""
        self._nodes[idx].tag = tag

    def inherited(self, idx: int, name: str) -> str | None:
        """Attribute value on ``idx`` or its nearest ancestor that sets it."""
        cur: int | None = idx
        while cur is not None:
            value = self._nodes[cur].attributes.get(name)
            if value is not None:
                return value
            cur = self._nodes[cur].parent
        return None

    # ── structure edits ──────────────────────────────────────────────────

    def create_element(
        self,
        tag: str,
        attributes: dict[str, str] | None = None,
        parent: int | None = None,
        namespace: str | None = None,
    ) -> int:
        """Create an element in the document's namespace and append it to ``parent``."""
        idx = len(self._nodes)
        self._nodes.append(
            ElementNode(
                index=idx,
                tag=tag,
                namespace=namespace if namespace is not None else self.namespace,
                attributes=dict(attributes or {}),
            )
        )
        if parent is not None:
            self.move(idx, parent)
        return idx

    def move(self, idx: int, new_parent: int, before: int | None = None) -> None:
        """Detach ``idx`` and insert it under ``new_parent`` (before sibling ``before``)."""
        if idx == self._root:
            raise ValueError("cannot move the root element")
        self._detach(idx)
        siblings = self._nodes[new_parent].children
        if before is not None and before in siblings:
            siblings.insert(siblings.index(before), idx)
        else:
            siblings.append(idx)
        self._nodes[idx].parent = new_parent

    def remove(self, idx: int) -> int:
        """Remove ``idx`` with its subtree. Returns the number of elements removed."""
        if idx == self._root:
            raise ValueError("cannot remove the root element")
        if self._nodes[idx].removed:
            return 0
        subtree = self.iter_preorder(idx)
        prev = self._previous_sibling(idx)
        tail = self._nodes[idx].tail
        self._detach(idx)
        # Keep the indentation that followed the removed element
        if prev is not None:
            self._nodes[prev].tail = tail
        for i in subtree:
            self._nodes[i].removed = True
        return len(subtree)

    def _previous_sibling(self, idx: int) -> int | None:
        parent = self._nodes[idx].parent
        if parent is None:
            return None
        siblings = self._nodes[parent].children
        pos = siblings.index(idx)
        return siblings[pos - 1] if pos > 0 else None

    def _detach(self, idx: int) -> None:
        parent = self._nodes[idx].parent
        if parent is not None:
            self._nodes[parent].children.remove(idx)
        self._nodes[idx].parent = None
