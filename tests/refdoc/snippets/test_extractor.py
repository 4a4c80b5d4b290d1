"""Tests for the snippet extraction orchestrator."""

import json
import logging
from pathlib import Path

import pytest

from refdoc.snippets.config import ExtractorSettings
from refdoc.snippets.descriptions import DescriptionIndex
from refdoc.snippets.exceptions import NodeShapeError, ReferenceParseError, SnippetError
from refdoc.snippets.extractor import (
    CONFIGURATION_FILE,
    FORMATTERS_SETTINGS_FILE,
    LINTERS_SETTINGS_FILE,
    ExampleSnippetsExtractor,
    build,
)


def _settings(project_dir: Path) -> ExtractorSettings:
    return ExtractorSettings(
        reference_path=project_dir / ".golangci.reference.yml",
        assets_path=project_dir / "assets",
        output_dir=project_dir / "build",
    )


def test_overview_lists_documented_keys_as_placeholders(reference_text, load_block):
    bundle = build(reference_text)

    assert bundle.overview.startswith("```yaml\n")
    assert bundle.overview.endswith("```\n\n")
    assert load_block(bundle.overview) == {
        "version": "2",
        "run": {"option": "value"},
        "linters": {"option": "value"},
        "formatters": {"option": "value"},
        "issues": {"option": "value"},
    }


def test_key_snippets_follow_document_order(reference_text):
    bundle = build(reference_text)

    assert list(bundle.key_snippets) == ["version", "run", "linters", "formatters", "issues"]
    assert bundle.key_snippets["run"].startswith("### `run` configuration\n\n```yaml\nrun:\n")
    assert "  build-tags:\n    - mytag\n" in bundle.key_snippets["run"]


def test_container_key_snippets_point_to_sections(reference_text, load_block):
    bundle = build(reference_text)

    linters = bundle.key_snippets["linters"]
    assert '# See the dedicated "linters.nolintlint" documentation section.' in linters
    assert '# See the dedicated "linters.unused" documentation section.' in linters
    assert load_block(linters) == {
        "linters": {
            "default": "standard",
            "enable": ["nolintlint"],
            "settings": {
                "nolintlint": {"option": "value"},
                "unused": {"option": "value"},
            },
        }
    }
    assert "enable: [gofmt, goimports]" in bundle.key_snippets["formatters"]


def test_configuration_file_joins_overview_and_key_snippets(reference_text):
    bundle = build(reference_text)

    text = bundle.configuration_file

    assert text.startswith(bundle.overview)
    assert text.index("### `run` configuration") < text.index("### `issues` configuration")
    assert "custom-plugins" not in text


def test_sections_per_container(reference_text):
    bundle = build(reference_text)

    assert bundle.section_names() == {"linters": ["nolintlint", "unused"], "formatters": ["gofmt"]}
    assert bundle.linters_settings == bundle.sections["linters"]["nolintlint"] + bundle.sections["linters"]["unused"]
    assert bundle.formatters_settings.startswith("### gofmt\n\n```yaml\nformatters:\n  settings:\n    gofmt:\n")


def test_section_text(reference_text):
    bundle = build(reference_text)

    assert bundle.sections["linters"]["unused"] == (
        "### unused\n\n"
        "```yaml\n"
        "linters:\n"
        "  settings:\n"
        "    unused:\n"
        "      field-writes-are-uses: false\n"
        "```\n\n"
        '[<span title="Back to the top"><FaArrowUp /></span>](#list-item-unused)\n\n'
        "\n"
    )


def test_descriptions_are_used_when_indexed(reference_text, description_index):
    bundle = build(reference_text, index=description_index)

    assert bundle.sections["linters"]["nolintlint"].startswith(
        "### nolintlint\n\nReports ill-formed or insufficient nolint directives.\n\n"
    )
    assert bundle.sections["formatters"]["gofmt"].startswith(
        "### gofmt\n\nChecks if the code is formatted according to 'gofmt' command.\n\n"
    )


def test_settings_change_indent_and_prefix(reference_text):
    bundle = build(reference_text, settings=ExtractorSettings(indent=4, list_item_prefix="row-"))

    unused = bundle.sections["linters"]["unused"]
    assert "linters:\n    settings:\n        unused:\n" in unused
    assert "(#row-unused)" in unused


def test_build_is_deterministic(reference_text, description_index):
    assert build(reference_text, description_index) == build(reference_text, description_index)


def test_missing_container_yields_empty_sections():
    bundle = build("linters:\n  settings:\n    unused:\n      check-exported: true\n")

    assert bundle.sections["formatters"] == {}
    assert bundle.formatters_settings == ""
    assert list(bundle.sections["linters"]) == ["unused"]


def test_empty_document():
    bundle = build("")

    assert bundle.key_snippets == {}
    assert bundle.section_names() == {"linters": [], "formatters": []}
    assert bundle.unknown_keys == ()


def test_unknown_keys_are_reported(reference_text):
    assert build(reference_text).unknown_keys == ("custom-plugins",)


def test_malformed_reference_raises_parse_error():
    with pytest.raises(ReferenceParseError):
        build("linters: [unterminated\n", source="reference.yml")


def test_non_mapping_reference_is_rejected():
    with pytest.raises(NodeShapeError):
        build("- run\n- linters\n")


def test_extractor_reads_reference_and_metadata(project_dir):
    extractor = ExampleSnippetsExtractor(_settings(project_dir))

    bundle = extractor.get_example_snippets()

    assert "Reports ill-formed or insufficient nolint directives." in bundle.linters_settings
    assert "typecheck" not in bundle.linters_settings


def test_extractor_writes_files(project_dir):
    extractor = ExampleSnippetsExtractor(_settings(project_dir))
    bundle = extractor.get_example_snippets()

    written = extractor.write(bundle)

    assert written == [CONFIGURATION_FILE, LINTERS_SETTINGS_FILE, FORMATTERS_SETTINGS_FILE]
    output = project_dir / "build"
    assert (output / CONFIGURATION_FILE).read_text(encoding="utf-8") == bundle.configuration_file
    assert (output / LINTERS_SETTINGS_FILE).read_text(encoding="utf-8") == bundle.linters_settings
    assert (output / FORMATTERS_SETTINGS_FILE).read_text(encoding="utf-8") == bundle.formatters_settings


def test_extractor_writes_to_explicit_directory(project_dir, tmp_path):
    extractor = ExampleSnippetsExtractor(_settings(project_dir))
    target = tmp_path / "elsewhere" / "docs"

    extractor.write(extractor.get_example_snippets(), target)

    assert (target / CONFIGURATION_FILE).exists()


def test_missing_metadata_file_is_skipped_with_warning(project_dir, caplog):
    (project_dir / "assets" / "formatters-info.json").unlink()
    extractor = ExampleSnippetsExtractor(_settings(project_dir))

    with caplog.at_level(logging.WARNING, logger="refdoc.snippets.extractor"):
        bundle = extractor.get_example_snippets()

    assert bundle.sections["formatters"]["gofmt"].startswith("### gofmt\n\n```yaml\n")
    assert "formatters-info.json" in caplog.text


def test_missing_reference_raises(tmp_path):
    extractor = ExampleSnippetsExtractor(ExtractorSettings(reference_path=tmp_path / "missing.yml"))

    with pytest.raises(SnippetError, match="missing.yml"):
        extractor.get_example_snippets()


def test_sections_keep_their_own_comments(commented_reference_text):
    bundle = build(commented_reference_text)

    nolintlint = bundle.sections["linters"]["nolintlint"]
    unused = bundle.sections["linters"]["unused"]
    assert "  settings:\n    # nolintlint head\n    nolintlint:\n" in nolintlint
    assert "unused head" not in nolintlint
    assert "  settings:\n    # unused head\n    unused:\n" in unused
    assert "Issues configuration" not in unused


def test_key_snippets_do_not_take_the_next_key_comments(commented_reference_text):
    bundle = build(commented_reference_text)

    version = bundle.key_snippets["version"]
    run = bundle.key_snippets["run"]
    assert "# Defines the configuration version.\n" in version
    assert "Options for analysis running" not in version
    assert run.startswith("### `run` configuration\n\n```yaml\n# Options for analysis running.\nrun:\n")
    assert "  # Timeout for total work.\n  timeout: 5m # default: 0\n" in run
    assert run.count("# not a comment") == 1
    assert "Linters configuration" not in run
    assert "End of the reference" not in bundle.key_snippets["issues"]
    assert 'exclude: "a # b"\n```' in bundle.key_snippets["issues"]


def test_container_key_snippet_keeps_entry_comments(commented_reference_text):
    linters = build(commented_reference_text).key_snippets["linters"]

    assert linters.startswith("### `linters` configuration\n\n```yaml\n# Linters configuration.\nlinters:\n")
    assert (
        "    # nolintlint head\n"
        "    nolintlint:\n"
        '      # See the dedicated "linters.nolintlint" documentation section.\n'
        "      option: value\n"
    ) in linters
    assert "Issues configuration" not in linters


def test_overview_keeps_top_level_comments(commented_reference_text, load_block):
    overview = build(commented_reference_text).overview

    assert "# Linters configuration.\nlinters:\n" in overview
    assert "# Issues configuration.\nissues:\n" in overview
    assert "# Options for analysis running.\nrun:\n" in overview
    assert overview.index("# This file contains all available configuration options.") < overview.index("version:")
    assert overview.endswith("# End of the reference.\n```\n\n")
    assert load_block(overview)["linters"] == {"option": "value"}


def test_descriptions_are_looked_up_per_container():
    text = "linters:\n  settings:\n    shared: {}\nformatters:\n  settings:\n    shared: {}\n"
    indexes = {
        "linters": DescriptionIndex({"shared": "The linter."}),
        "formatters": DescriptionIndex({"shared": "The formatter."}),
    }

    bundle = build(text, indexes=indexes)

    assert bundle.sections["linters"]["shared"].startswith("### shared\n\nThe linter.\n\n")
    assert bundle.sections["formatters"]["shared"].startswith("### shared\n\nThe formatter.\n\n")


def test_extractor_reads_each_metadata_file_for_its_container(project_dir):
    (project_dir / "assets" / "formatters-info.json").write_text(
        json.dumps([{"name": "nolintlint", "desc": "a formatter sharing the name"}]),
        encoding="utf-8",
    )
    (project_dir / ".golangci.reference.yml").write_text(
        "linters:\n  settings:\n    nolintlint:\n      a: 1\nformatters:\n  settings:\n    nolintlint:\n      b: 2\n",
        encoding="utf-8",
    )
    extractor = ExampleSnippetsExtractor(_settings(project_dir))

    indexes = extractor.load_indexes()
    bundle = extractor.get_example_snippets()

    assert indexes["linters"].lookup("nolintlint") == "Reports ill-formed or insufficient nolint directives."
    assert indexes["formatters"].lookup("nolintlint") == "A formatter sharing the name."
    assert "A formatter sharing the name." in bundle.formatters_settings
    assert "A formatter sharing the name." not in bundle.linters_settings
