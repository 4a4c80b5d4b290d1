"""Snippet extraction orchestrator.

Provides the build() function that:
1. Parses the reference document
2. Redacts the top level into the overview
3. Splits the linters/formatters settings into sections
4. Renders the overview, the per-key snippets and every section

and the ExampleSnippetsExtractor, which reads the reference document and the
metadata files from disk and writes the generated Markdown files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .config import ExtractorSettings
from .descriptions import DescriptionIndex
from .exceptions import SnippetError
from .nodes import Comments, parse
from .policy import KEY_FORMATTERS, KEY_LINTERS, SPLITTABLE_CONTAINERS, unknown_keys
from .redactor import redact
from .renderer import render_key_snippet, render_section, render_snippet
from .splitter import Section, redact_settings, split

logger = logging.getLogger(__name__)

CONFIGURATION_FILE = "configuration-file.md"
LINTERS_SETTINGS_FILE = "linters-settings.md"
FORMATTERS_SETTINGS_FILE = "formatters-settings.md"


@dataclass(frozen=True)
class SnippetBundle:
    """Rendered snippets for one reference document."""

    overview: str
    key_snippets: dict[str, str] = field(default_factory=dict)  # top-level key -> text
    sections: dict[str, dict[str, str]] = field(default_factory=dict)  # container -> name -> text
    unknown_keys: tuple[str, ...] = ()  # Top-level keys dropped for lack of a policy

    @property
    def configuration_file(self) -> str:
        """The overview followed by the full block of every documented key."""
        return self.overview + "".join(self.key_snippets.values())

    def settings_text(self, container: str) -> str:
        return "".join(self.sections.get(container, {}).values())

    @property
    def linters_settings(self) -> str:
        return self.settings_text(KEY_LINTERS)

    @property
    def formatters_settings(self) -> str:
        return self.settings_text(KEY_FORMATTERS)

    def section_names(self) -> dict[str, list[str]]:
        return {container: list(texts) for container, texts in self.sections.items()}


def build(
    text: str,
    index: DescriptionIndex | None = None,
    settings: ExtractorSettings | None = None,
    source: str | None = None,
    indexes: Mapping[str, DescriptionIndex] | None = None,
) -> SnippetBundle:
    """Generate all snippets for a reference document.

    Args:
        text: Reference document YAML
        index: Component descriptions for the settings sections of every
            container
        settings: Rendering settings (defaults if omitted)
        source: Name of the document for error messages
        indexes: Component descriptions by container, used instead of
            ``index`` for the containers they name

    Returns:
        SnippetBundle with the overview, key snippets and sections

    Raises:
        ReferenceParseError: If the document is not well-formed YAML
        NodeShapeError: If the document is not a mapping at the top level
        RenderError: If a generated snippet can't be serialized
    """
    settings = settings or ExtractorSettings()
    root = parse(text, source)
    unknown = unknown_keys(root)
    redaction = redact(root)

    extracted: dict[str, list[Section]] = {container: [] for container in SPLITTABLE_CONTAINERS}
    for container, value in redaction.containers.items():
        extracted[container] = split(container, value, (indexes or {}).get(container, index))
        logger.info("Extracted %d %s settings sections", len(extracted[container]), container)

    overview = render_snippet(redaction.overview, indent=settings.indent)

    content = root.root
    key_snippets: dict[str, str] = {}
    for key, value in redaction.documented:
        name = str(key.value)
        if name in redaction.containers:
            value = redact_settings(name, value)
        block = content.copy(children=(key.copy(), value.copy()), comments=Comments())
        key_snippets[name] = render_key_snippet(name, block, settings.indent)

    sections = {
        container: {
            section.name: render_section(section, settings.list_item_prefix, settings.indent)
            for section in items
        }
        for container, items in extracted.items()
    }

    return SnippetBundle(
        overview=overview,
        key_snippets=key_snippets,
        sections=sections,
        unknown_keys=tuple(unknown),
    )


class ExampleSnippetsExtractor:
    """Reads the reference document and metadata files, writes the snippet files."""

    def __init__(self, settings: ExtractorSettings | None = None):
        self.settings = settings or ExtractorSettings()

    def load_indexes(self) -> dict[str, DescriptionIndex]:
        """Build one description index per container from the metadata files that exist.

        A linter and a formatter may share a name, so each container only
        looks up its own metadata file.
        """
        indexes: dict[str, DescriptionIndex] = {}
        for container in SPLITTABLE_CONTAINERS:
            path = self.settings.metadata_path(container)
            if not path.exists():
                logger.warning("Metadata file %s not found, %s sections will have no description", path, container)
                indexes[container] = DescriptionIndex()
                continue
            indexes[container] = DescriptionIndex.from_files([path])
        return indexes

    def get_example_snippets(self) -> SnippetBundle:
        reference_path = self.settings.reference_path
        try:
            reference = reference_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SnippetError(f"Can't read {reference_path}: {exc}") from exc

        return build(
            reference,
            indexes=self.load_indexes(),
            settings=self.settings,
            source=str(reference_path),
        )

    def write(self, bundle: SnippetBundle, output_dir: Path | None = None) -> list[str]:
        """Write the generated Markdown files.

        Returns:
            Names of the files written
        """
        target = output_dir or self.settings.output_dir
        target.mkdir(parents=True, exist_ok=True)

        files = {
            CONFIGURATION_FILE: bundle.configuration_file,
            LINTERS_SETTINGS_FILE: bundle.linters_settings,
            FORMATTERS_SETTINGS_FILE: bundle.formatters_settings,
        }
        for name, content in files.items():
            (target / name).write_text(content, encoding="utf-8")

        logger.info("Wrote %d snippet files to %s", len(files), target)
        return list(files)
