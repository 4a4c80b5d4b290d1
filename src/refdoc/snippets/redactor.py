"""Top-level redaction of the reference document into the overview."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .exceptions import NodeShapeError
from .nodes import Node, NodeKind, document, mapping, scalar
from .policy import SPLITTABLE_CONTAINERS, KeyAction, action_for, pointer_comment

logger = logging.getLogger(__name__)

PLACEHOLDER_OPTION = "option"
PLACEHOLDER_VALUE = "value"


@dataclass(frozen=True)
class RedactionResult:
    """Result of redacting the top level of a reference document."""

    overview: Node  # Document node with placeholders in place of documented blocks
    documented: tuple[tuple[Node, Node], ...] = ()  # Original (key, value) pairs kept in the overview
    containers: dict[str, Node] = field(default_factory=dict)  # Original values of splittable containers


def placeholder(*path: str) -> Node:
    """Build the ``option: value`` stand-in for a redacted block.

    The ``option`` key carries a comment pointing at the documentation
    section named by ``path``.
    """
    return mapping(
        scalar(PLACEHOLDER_OPTION, head_comment=pointer_comment(*path)),
        scalar(PLACEHOLDER_VALUE),
    )


def is_placeholder(node: Node) -> bool:
    if node.kind is not NodeKind.MAPPING or len(node.children) != 2:
        return False
    key, value = node.children
    return key.value == PLACEHOLDER_OPTION and value.value == PLACEHOLDER_VALUE


def redact(root: Node) -> RedactionResult:
    """Build the overview document from the reference document.

    Args:
        root: Parsed reference document (or its top-level mapping)

    Returns:
        RedactionResult with the overview document, the documented top-level
        pairs and the values of the splittable containers, all in document
        order

    Raises:
        NodeShapeError: If the document is not a mapping at the top level
    """
    content = root.root
    if content.kind is not NodeKind.MAPPING:
        raise NodeShapeError(
            f"The reference document must be a mapping at the top level, got {content.kind.value}"
        )

    children: list[Node] = []
    documented: list[tuple[Node, Node]] = []
    containers: dict[str, Node] = {}

    for key, value in content.pairs():
        name = str(key.value)
        action = action_for(name)

        if action is KeyAction.DROP:
            logger.debug("Top-level key %r is not documented, dropping it from the overview", name)
            continue

        documented.append((key, value))

        if action is KeyAction.EMBED_WITH_COMMENT:
            children.extend([key.with_head_comment(pointer_comment(name)), value.copy()])
        else:
            children.extend([key.copy(), placeholder(name)])

        if name in SPLITTABLE_CONTAINERS:
            containers[name] = value

    overview = document(content.copy(children=children))
    return RedactionResult(overview=overview, documented=tuple(documented), containers=containers)
