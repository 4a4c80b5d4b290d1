"""Tests for Markdown snippet rendering."""

import pytest

from refdoc.snippets.exceptions import RenderError
from refdoc.snippets.nodes import Node, NodeKind, mapping, parse, scalar
from refdoc.snippets.renderer import (
    anchor_for,
    render_key_snippet,
    render_section,
    render_snippet,
    render_yaml,
    span,
    span_with_id,
)
from refdoc.snippets.splitter import split


def test_render_yaml_uses_two_space_indent():
    doc = parse("run:\n    timeout: 5m\n    tags:\n        - a\n")

    assert render_yaml(doc) == "run:\n  timeout: 5m\n  tags:\n    - a\n"


def test_render_yaml_wraps_subtrees():
    run = parse("run:\n  timeout: 5m\n").root.get("run")

    assert render_yaml(run) == "timeout: 5m\n"


def test_render_yaml_reports_malformed_nodes():
    broken = Node(kind=NodeKind.MAPPING, children=(scalar("lonely"),))

    with pytest.raises(RenderError) as exc_info:
        render_yaml(broken, container="linters", section="unused")

    assert exc_info.value.container == "linters"
    assert exc_info.value.section == "unused"
    assert "linters.unused" in str(exc_info.value)


def test_render_yaml_rejects_duplicate_keys():
    node = mapping(scalar("a"), scalar("1"), scalar("a"), scalar("2"))

    with pytest.raises(RenderError):
        render_yaml(node)


def test_render_snippet_without_header():
    node = mapping(scalar("key"), scalar("value"))

    assert render_snippet(node) == "```yaml\nkey: value\n```\n\n"


def test_render_snippet_with_header():
    node = mapping(scalar("key"), scalar("value"))

    assert render_snippet(node, header="Title") == "### Title\n\n```yaml\nkey: value\n```\n\n"


def test_render_key_snippet():
    node = mapping(scalar("issues"), mapping(scalar("max-same-issues"), scalar(3)))

    assert render_key_snippet("issues", node) == (
        "### `issues` configuration\n\n```yaml\nissues:\n  max-same-issues: 3\n```\n\n"
    )


def test_span_helpers():
    assert span("Back to the top", "<FaArrowUp />") == '<span title="Back to the top"><FaArrowUp /></span>'
    assert span_with_id("list-item-x", "", "") == '<span id="list-item-x" title=""></span>'


def test_anchor_for():
    assert anchor_for("unused") == "list-item-unused"
    assert anchor_for("unused", prefix="row-") == "row-unused"


def test_render_section_without_description(reference_text):
    section = split("linters", parse(reference_text).root.get("linters"))[1]

    assert render_section(section) == (
        "### unused\n"
        "\n"
        "```yaml\n"
        "linters:\n"
        "  settings:\n"
        "    unused:\n"
        "      field-writes-are-uses: false\n"
        "```\n"
        "\n"
        '[<span title="Back to the top"><FaArrowUp /></span>](#list-item-unused)\n'
        "\n"
        "\n"
    )


def test_render_section_with_description(reference_text, description_index):
    section = split("linters", parse(reference_text).root.get("linters"), description_index)[0]

    text = render_section(section)

    assert text.startswith(
        "### nolintlint\n\nReports ill-formed or insufficient nolint directives.\n\n```yaml\nlinters:\n"
    )
    assert "# Disable to ensure that all nolint directives actually have an effect." in text
    assert "(#list-item-nolintlint)" in text


def test_render_section_custom_prefix(reference_text):
    section = split("linters", parse(reference_text).root.get("linters"))[1]

    assert "(#row-unused)" in render_section(section, prefix="row-")
