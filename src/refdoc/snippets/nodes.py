"""Node model for reference documents.

The reference document is parsed once with ruamel.yaml in round-trip mode and
converted into an immutable tree of ``Node`` objects. Every derived output
(overview, key snippets, setting sections) is assembled from copies of these
nodes and converted back to ruamel data only when it is serialized, so two
outputs never share mutable YAML state.

Mapping nodes store their children as a flat ``key, value, key, value``
sequence in document order. Sequence nodes store values only. Comments live on
mapping keys and sequence items (see ``refdoc.snippets.comments``).
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import CommentMark, YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean
from ruamel.yaml.scalarstring import (
    DoubleQuotedScalarString,
    FoldedScalarString,
    LiteralScalarString,
    SingleQuotedScalarString,
)
from ruamel.yaml.tokens import CommentToken

from .comments import Placement, place, scan
from .exceptions import NodeShapeError, ReferenceParseError

TAG_MAP = "!!map"
TAG_SEQ = "!!seq"
TAG_STR = "!!str"
TAG_INT = "!!int"
TAG_FLOAT = "!!float"
TAG_BOOL = "!!bool"
TAG_NULL = "!!null"
TAG_TIMESTAMP = "!!timestamp"

# Column offset of a nested block relative to its parent key or dash.
INDENT_STEP = 2


class NodeKind(Enum):
    """Structural kind of a node."""
    DOCUMENT = "document"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    ALIAS = "alias"


class NodeStyle(Enum):
    """Rendering style of a node."""
    BLOCK = "block"
    FLOW = "flow"
    PLAIN = "plain"
    DOUBLE_QUOTED = "double_quoted"
    SINGLE_QUOTED = "single_quoted"
    LITERAL = "literal"
    FOLDED = "folded"


_STYLED_STRINGS: dict[NodeStyle, type] = {
    NodeStyle.LITERAL: LiteralScalarString,
    NodeStyle.FOLDED: FoldedScalarString,
    NodeStyle.DOUBLE_QUOTED: DoubleQuotedScalarString,
    NodeStyle.SINGLE_QUOTED: SingleQuotedScalarString,
}


@dataclass(frozen=True)
class Comments:
    """Comments attached to a node.

    ``head`` holds the full comment lines written right above the node, ``#``
    included; an empty line stands for a blank line. ``line`` is the comment
    closing the node's first line and ``line_column`` the column it started
    at. ``foot`` holds the comment lines after the last node of a document
    and is only set on the document content.

    Mapping keys and sequence items carry the comments of their entry, so a
    key copied into another document takes its own comments and no others.
    """

    head: str = ""
    line: str = ""
    line_column: int = 0
    foot: str = ""


def comment_text(text: str) -> str:
    """Turn plain text into comment lines."""
    return "\n".join(f"# {line}" if line else "#" for line in text.split("\n"))


@dataclass(frozen=True)
class Node:
    """One node of a parsed or synthesized YAML document."""

    kind: NodeKind
    tag: str = ""
    style: NodeStyle = NodeStyle.PLAIN
    value: Any = None
    children: tuple[Node, ...] = ()
    comments: Comments = field(default_factory=Comments)
    anchor: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    def copy(self, **changes: Any) -> Node:
        """Return a copy of this node with ``changes`` applied."""
        return replace(self, **changes)

    def with_head_comment(self, text: str) -> Node:
        """Return a copy with ``text`` appended to its head comment."""
        head = comment_text(text)
        if self.comments.head:
            head = f"{self.comments.head}\n{head}"
        return self.copy(comments=replace(self.comments, head=head))

    @property
    def root(self) -> Node:
        """The content node of a document, or the node itself."""
        if self.kind is NodeKind.DOCUMENT:
            if not self.children:
                raise NodeShapeError("Document node has no content")
            return self.children[0]
        return self

    def pairs(self) -> Iterator[tuple[Node, Node]]:
        """Yield the ``(key, value)`` pairs of a mapping in document order."""
        if self.kind is not NodeKind.MAPPING:
            raise NodeShapeError(f"Expected a mapping node, got {self.kind.value}")
        if len(self.children) % 2:
            raise NodeShapeError(
                f"Mapping node has an odd number of children ({len(self.children)})"
            )
        for i in range(0, len(self.children), 2):
            yield self.children[i], self.children[i + 1]

    def keys(self) -> list[str]:
        return [str(key.value) for key, _ in self.pairs()]

    def get(self, name: str) -> Node | None:
        """Return the value node stored under the scalar key ``name``."""
        for key, value in self.pairs():
            if key.kind is NodeKind.SCALAR and key.value == name:
                return value
        return None


def scalar(
    value: Any,
    *,
    tag: str = TAG_STR,
    style: NodeStyle = NodeStyle.PLAIN,
    head_comment: str = "",
) -> Node:
    return Node(
        kind=NodeKind.SCALAR,
        tag=tag,
        style=style,
        value=value,
        comments=Comments(head=comment_text(head_comment) if head_comment else ""),
    )


def mapping(*children: Node, tag: str = TAG_MAP, style: NodeStyle = NodeStyle.BLOCK) -> Node:
    """Build a mapping node from alternating key and value nodes."""
    if len(children) % 2:
        raise NodeShapeError(
            f"Mapping node needs key/value pairs, got {len(children)} children"
        )
    return Node(kind=NodeKind.MAPPING, tag=tag, style=style, children=children)


def document(content: Node) -> Node:
    """Wrap ``content`` in a document node that mirrors its kind attributes."""
    return Node(
        kind=NodeKind.DOCUMENT,
        tag=content.tag,
        style=content.style,
        children=(content,),
    )


def parse(text: str, source: str | None = None) -> Node:
    """Parse YAML text into a document node.

    Args:
        text: Raw YAML document
        source: Optional name of the document, used in error messages

    Returns:
        Document node whose root is the top-level content (an empty mapping
        for an empty document)

    Raises:
        ReferenceParseError: If the text is not well-formed YAML
    """
    yaml = YAML()
    yaml.preserve_quotes = True

    try:
        data = yaml.load(text)
    except YAMLError as exc:
        raise ReferenceParseError(exc, source) from exc

    if data is None:
        data = CommentedMap()

    placement = place(scan(text), _positions(data))
    content = _Composer(placement).node(data)
    if placement.foot:
        content = content.copy(comments=replace(content.comments, foot=placement.foot))
    return document(content)


def to_yaml_data(node: Node, indent: int = INDENT_STEP) -> Any:
    """Convert a node tree into ruamel.yaml round-trip data.

    ``indent`` must match the mapping indent of the serializer so that
    synthesized head comments line up with their keys.
    """
    return _Builder(indent).data(node, 0)


def _scalar_tag(value: Any) -> str:
    if value is None:
        return TAG_NULL
    if isinstance(value, (bool, ScalarBoolean)):
        return TAG_BOOL
    if isinstance(value, int):
        return TAG_INT
    if isinstance(value, float):
        return TAG_FLOAT
    if isinstance(value, str):
        return TAG_STR
    if isinstance(value, (datetime.date, datetime.datetime)):
        return TAG_TIMESTAMP
    return f"!{type(value).__name__}"


def _scalar_style(value: Any) -> NodeStyle:
    for style, string_type in _STYLED_STRINGS.items():
        if isinstance(value, string_type):
            return style
    return NodeStyle.PLAIN


def _styled_scalar(value: Any, style: NodeStyle) -> Any:
    if not isinstance(value, str):
        return value

    string_type = _STYLED_STRINGS.get(style)
    if string_type is None:
        return str(value)
    if type(value) is string_type:
        return value
    return string_type(value)


def _collection_style(data: Any) -> NodeStyle:
    fa = getattr(data, "fa", None)
    if fa is not None and fa.flow_style():
        return NodeStyle.FLOW
    return NodeStyle.BLOCK


def _anchor_name(data: Any) -> str | None:
    anchor = getattr(data, "anchor", None)
    return getattr(anchor, "value", None) if anchor is not None else None


def _entry_line(data: Any, key: Any) -> int | None:
    """Source line of a mapping key or sequence item, when the parser recorded it."""
    lc = getattr(data, "lc", None)
    positions = getattr(lc, "data", None) or {}
    position = positions.get(key)
    return position[0] if position else None


def _positions(data: Any) -> list[tuple[int, tuple[int, Any]]]:
    """Source lines of every block mapping key and sequence item, in document order."""
    positions: list[tuple[int, tuple[int, Any]]] = []
    seen: set[int] = set()

    def walk(value: Any, in_flow: bool) -> None:
        if not isinstance(value, (dict, list)) or id(value) in seen:
            return
        seen.add(id(value))
        in_flow = in_flow or _collection_style(value) is NodeStyle.FLOW
        entries = value.items() if isinstance(value, dict) else enumerate(value)
        for key, item in entries:
            line = _entry_line(value, key)
            if line is not None and not in_flow:
                positions.append((line, (id(value), key)))
            walk(item, in_flow)

    walk(data, False)
    return positions


class _Composer:
    """Converts ruamel round-trip data into nodes."""

    def __init__(self, placement: Placement) -> None:
        self._placement = placement
        # Collections already converted, so a repeated object becomes an alias.
        self._seen: dict[int, Node] = {}

    def comments(self, container: Any, key: Any) -> Comments:
        ref = (id(container), key)
        column, line = self._placement.lines.get(ref, (0, ""))
        return Comments(
            head=self._placement.heads.get(ref, ""),
            line=line,
            line_column=column,
        )

    def node(self, data: Any, comments: Comments | None = None) -> Node:
        comments = comments or Comments()
        if isinstance(data, (dict, list)):
            seen = self._seen.get(id(data))
            if seen is not None:
                return Node(
                    kind=NodeKind.ALIAS,
                    tag=seen.tag,
                    style=seen.style,
                    value=seen.anchor,
                    children=(seen,),
                    comments=comments,
                )

            if isinstance(data, dict):
                node = self._mapping(data, comments)
            else:
                node = self._sequence(data, comments)
            self._seen[id(data)] = node
            return node

        return Node(
            kind=NodeKind.SCALAR,
            tag=_scalar_tag(data),
            style=_scalar_style(data),
            value=data,
            comments=comments,
        )

    def _mapping(self, data: dict[Any, Any], comments: Comments) -> Node:
        children: list[Node] = []
        for key, value in data.items():
            if isinstance(key, (dict, list, tuple)):
                raise NodeShapeError(f"Complex mapping keys are not supported: {key!r}")
            children.append(self.node(key, self.comments(data, key)))
            children.append(self.node(value))

        return Node(
            kind=NodeKind.MAPPING,
            tag=TAG_MAP,
            style=_collection_style(data),
            children=tuple(children),
            comments=comments,
            anchor=_anchor_name(data),
        )

    def _sequence(self, data: list[Any], comments: Comments) -> Node:
        children = tuple(
            self.node(item, self.comments(data, i)) for i, item in enumerate(data)
        )

        return Node(
            kind=NodeKind.SEQUENCE,
            tag=TAG_SEQ,
            style=_collection_style(data),
            children=children,
            comments=comments,
            anchor=_anchor_name(data),
        )


class _Builder:
    """Converts nodes back into ruamel round-trip data."""

    def __init__(self, indent: int) -> None:
        self._indent = indent
        # Rendered collections by node identity, so aliases share one object.
        self._rendered: dict[int, Any] = {}

    def data(self, node: Node, column: int) -> Any:
        if node.kind is NodeKind.DOCUMENT:
            return self.data(node.root, column)

        if node.kind is NodeKind.ALIAS:
            if not node.children:
                raise NodeShapeError(f"Alias {node.value!r} has no target")
            return self.data(node.children[0], column)

        if node.kind is NodeKind.SCALAR:
            return _styled_scalar(node.value, node.style)

        cached = self._rendered.get(id(node))
        if cached is not None:
            return cached

        if node.kind is NodeKind.MAPPING:
            result = self._mapping(node, column)
        elif node.kind is NodeKind.SEQUENCE:
            result = self._sequence(node, column)
        else:
            raise NodeShapeError(f"Unknown node kind: {node.kind!r}")

        self._rendered[id(node)] = result
        return result

    def _mapping(self, node: Node, column: int) -> CommentedMap:
        result = CommentedMap()
        for key_node, value_node in node.pairs():
            if key_node.kind is not NodeKind.SCALAR:
                raise NodeShapeError(f"Mapping keys must be scalars, got {key_node.kind.value}")

            key = _styled_scalar(key_node.value, key_node.style)
            if key in result:
                raise NodeShapeError(f"Duplicate mapping key: {key!r}")

            result[key] = self.data(value_node, column + self._indent)
            _attach_item_comments(result, key, key_node.comments, column)

        _attach_collection_attributes(result, node)
        return result

    def _sequence(self, node: Node, column: int) -> CommentedSeq:
        result = CommentedSeq()
        for i, item in enumerate(node.children):
            result.append(self.data(item, column + self._indent))
            _attach_item_comments(result, i, item.comments, column)

        _attach_collection_attributes(result, node)
        return result


def _attach_item_comments(container: Any, key: Any, comments: Comments, column: int) -> None:
    """Store an entry's comments in the slots the round-trip emitter reads.

    Slot 1 of mappings and sequences holds the lines above the entry. The
    comment closing the entry's line sits in slot 2 of a mapping and slot 0
    of a sequence.
    """
    if not comments.head and not comments.line:
        return

    slots = container.ca.items.setdefault(key, [None, None, None, None])
    if comments.head:
        mark = CommentMark(column)
        slots[1] = [
            CommentToken(f"{line}\n" if line else "\n", mark)
            for line in comments.head.split("\n")
        ]
    if comments.line:
        index = 2 if isinstance(container, CommentedMap) else 0
        slots[index] = CommentToken(comments.line, CommentMark(comments.line_column))


def _attach_collection_attributes(container: Any, node: Node) -> None:
    if node.style is NodeStyle.FLOW:
        container.fa.set_flow_style()
    else:
        container.fa.set_block_style()

    if node.anchor:
        container.yaml_set_anchor(node.anchor)
