"""Markdown rendering of YAML snippets."""

from __future__ import annotations

import json
from io import StringIO

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .exceptions import NodeShapeError, RenderError
from .nodes import INDENT_STEP, Node, NodeKind, document, to_yaml_data
from .splitter import Section

LIST_ITEM_PREFIX = "list-item-"
BACK_TO_TOP_ICON = "<FaArrowUp />"


def span(title: str, icon: str) -> str:
    return f"<span title={_quote(title)}>{icon}</span>"


def span_with_id(element_id: str, title: str, icon: str) -> str:
    return f"<span id={_quote(element_id)} title={_quote(title)}>{icon}</span>"


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def anchor_for(name: str, prefix: str = LIST_ITEM_PREFIX) -> str:
    """Anchor of a component's row in the component table."""
    return f"{prefix}{name}"


def render_yaml(
    node: Node,
    indent: int = INDENT_STEP,
    container: str | None = None,
    section: str | None = None,
) -> str:
    """Serialize a node as a standalone YAML document.

    Args:
        node: Any node; it is wrapped in a throwaway document first
        indent: Mapping indent (sequences are indented twice as much, with
            the dash at ``indent``)
        container: Container being rendered, for error context
        section: Section being rendered, for error context

    Raises:
        RenderError: If the node tree is malformed or the serializer fails
    """
    if node.kind is not NodeKind.DOCUMENT:
        node = document(node)

    yaml = YAML()
    yaml.indent(mapping=indent, sequence=indent * 2, offset=indent)
    yaml.width = 4096  # Prevent line wrapping

    buffer = StringIO()
    try:
        yaml.dump(to_yaml_data(node, indent), buffer)
        foot = node.root.comments.foot
    except (NodeShapeError, YAMLError) as exc:
        raise RenderError(f"Can't serialize YAML snippet: {exc}", container, section) from exc

    if foot:
        buffer.write(f"{foot}\n")
    return buffer.getvalue()


def fenced(text: str) -> str:
    return f"```yaml\n{text}```\n"


def render_snippet(
    node: Node,
    header: str | None = None,
    indent: int = INDENT_STEP,
    container: str | None = None,
) -> str:
    """Render a node as a fenced YAML block, optionally under a heading."""
    parts: list[str] = []
    if header:
        parts.append(f"### {header}\n\n")
    parts.append(fenced(render_yaml(node, indent, container=container)))
    parts.append("\n")
    return "".join(parts)


def render_key_snippet(key: str, node: Node, indent: int = INDENT_STEP) -> str:
    """Render the full block of one top-level key."""
    return f"### `{key}` configuration\n\n" + render_snippet(node, indent=indent, container=key)


def render_section(
    section: Section,
    prefix: str = LIST_ITEM_PREFIX,
    indent: int = INDENT_STEP,
) -> str:
    """Render one settings section with its description and a link back to the table."""
    parts = [f"### {section.name}\n\n"]
    if section.description:
        parts.append(f"{section.description}\n\n")

    parts.append(
        fenced(
            render_yaml(
                section.document,
                indent,
                container=section.container,
                section=section.name,
            )
        )
    )
    parts.append("\n")
    parts.append(f"[{span('Back to the top', BACK_TO_TOP_ICON)}](#{anchor_for(section.name, prefix)})\n\n")
    parts.append("\n")
    return "".join(parts)
