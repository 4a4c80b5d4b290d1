"""Documentation snippets generated from the configuration reference.

This subpackage provides tools for:
- Parsing the reference YAML into an immutable node tree
- Redacting the top level into a configuration overview
- Splitting linters/formatters settings into standalone sections
- Rendering everything as Markdown with fenced YAML blocks

Provides:
- build(): reference text -> SnippetBundle
- ExampleSnippetsExtractor: file-based extraction and output
- render_component_table(): the linters/formatters table
"""

from .config import ExtractorSettings, load_settings
from .descriptions import ComponentRecord, DescriptionIndex, describe, format_description, load_records
from .exceptions import (
    MetadataError,
    NodeShapeError,
    ReferenceParseError,
    RenderError,
    SettingsError,
    SnippetError,
)
from .extractor import ExampleSnippetsExtractor, SnippetBundle, build
from .listing import SettingsRegistry, render_component_table
from .nodes import Comments, Node, NodeKind, NodeStyle, parse
from .policy import KEY_POLICY, KeyAction
from .redactor import RedactionResult, placeholder, redact
from .renderer import render_section, render_snippet, render_yaml
from .splitter import Section, redact_settings, split

__all__ = [
    "ExtractorSettings",
    "load_settings",
    "ComponentRecord",
    "DescriptionIndex",
    "describe",
    "format_description",
    "load_records",
    "MetadataError",
    "NodeShapeError",
    "ReferenceParseError",
    "RenderError",
    "SettingsError",
    "SnippetError",
    "ExampleSnippetsExtractor",
    "SnippetBundle",
    "build",
    "SettingsRegistry",
    "render_component_table",
    "Comments",
    "Node",
    "NodeKind",
    "NodeStyle",
    "parse",
    "KEY_POLICY",
    "KeyAction",
    "RedactionResult",
    "placeholder",
    "redact",
    "render_section",
    "render_snippet",
    "render_yaml",
    "Section",
    "redact_settings",
    "split",
]
