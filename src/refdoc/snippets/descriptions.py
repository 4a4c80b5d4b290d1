"""Component metadata records and the description index.

Metadata files (``assets/linters-info.json``, ``assets/formatters-info.json``)
hold one JSON record per component. The index maps a component name to the
description shown above its settings section.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import MetadataError

logger = logging.getLogger(__name__)

GROUP_STANDARD = "standard"


class Deprecation(BaseModel):
    """Deprecation details of a component."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    since: str = ""
    message: str = ""
    replacement: str = ""


class ComponentRecord(BaseModel):
    """One linter or formatter as described by the metadata files."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    desc: str = ""
    internal: bool = False
    groups: frozenset[str] = Field(default_factory=frozenset)
    since: str = ""
    can_auto_fix: bool = Field(default=False, alias="canAutoFix")
    original_url: str = Field(default="", alias="originalURL")
    alternative_names: list[str] = Field(default_factory=list, alias="alternativeNames")
    deprecation: Deprecation | None = None

    @field_validator("groups", mode="before")
    @classmethod
    def _normalize_groups(cls, value: Any) -> Any:
        # Groups are serialized as a set-like object ({"standard": {}}).
        if value is None:
            return frozenset()
        if isinstance(value, Mapping):
            return frozenset(str(key) for key in value)
        return value

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation is not None

    @property
    def is_standard(self) -> bool:
        return GROUP_STANDARD in self.groups


def format_description(text: str) -> str:
    """Capitalize, terminate with a period and keep line breaks in Markdown tables."""
    if not text:
        return ""

    formatted = text[0].upper() + text[1:]
    if not formatted.endswith("."):
        formatted += "."

    return formatted.replace("\n", "<br/>")


def describe(record: ComponentRecord) -> str:
    """Return the display description of a component.

    Deprecated components are described by their deprecation message and,
    when one exists, their replacement.
    """
    desc = record.desc
    if record.deprecation is not None:
        desc = record.deprecation.message
        if record.deprecation.replacement:
            desc += f" Replaced by {record.deprecation.replacement}."

    return format_description(desc)


def load_records(path: Path) -> list[ComponentRecord]:
    """Read component records from a JSON metadata file.

    Raises:
        MetadataError: If the file is missing, is not valid JSON or a record
            does not match the expected layout
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise MetadataError(f"Metadata file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise MetadataError(f"Can't parse metadata file {path}: {exc}") from exc

    if not isinstance(payload, list):
        raise MetadataError(f"Metadata file {path} must contain a JSON list of records")

    records: list[ComponentRecord] = []
    for position, item in enumerate(payload):
        try:
            records.append(ComponentRecord.model_validate(item))
        except ValidationError as exc:
            raise MetadataError(f"Invalid record #{position} in {path}: {exc}") from exc

    logger.debug("Loaded %d component records from %s", len(records), path)
    return records


class DescriptionIndex:
    """Lookup from component name to display description."""

    def __init__(self, descriptions: Mapping[str, str] | None = None):
        self._descriptions: dict[str, str] = dict(descriptions or {})

    @classmethod
    def from_records(cls, records: Iterable[ComponentRecord]) -> DescriptionIndex:
        index = cls()
        for record in records:
            index.add(record)
        return index

    @classmethod
    def from_files(cls, paths: Iterable[Path]) -> DescriptionIndex:
        index = cls()
        for path in paths:
            for record in load_records(path):
                index.add(record)
        return index

    def add(self, record: ComponentRecord) -> None:
        """Index a record by its canonical name, skipping internal components."""
        if record.internal:
            return
        # Alternative names are aliases and never key a settings section.
        self._descriptions.setdefault(record.name, describe(record))

    def lookup(self, name: str) -> str:
        """Return the description of ``name``, or an empty string when unknown."""
        return self._descriptions.get(name, "")

    def __contains__(self, name: object) -> bool:
        return name in self._descriptions

    def __len__(self) -> int:
        return len(self._descriptions)
