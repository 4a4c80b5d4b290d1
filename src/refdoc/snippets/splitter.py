"""Splitting of container `settings` blocks into standalone sections."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .descriptions import DescriptionIndex
from .nodes import Node, NodeKind, NodeStyle, document, mapping, scalar
from .policy import KEY_SETTINGS
from .redactor import placeholder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Section:
    """One component's settings, extracted from a container."""

    container: str  # "linters" | "formatters"
    name: str  # Component name, e.g. "nolintlint"
    description: str  # Empty when the component is not in the index
    body: Node  # Copy of settings[name]
    document: Node  # {container: {settings: {name: body}}}

    @property
    def key(self) -> str:
        return f"{self.container}/{self.name}"


def find_settings(container_value: Node) -> tuple[Node, Node] | None:
    """Return the ``settings`` key and value of a container, if present."""
    if container_value.kind is not NodeKind.MAPPING:
        return None
    for key, value in container_value.pairs():
        if key.kind is NodeKind.SCALAR and key.value == KEY_SETTINGS:
            return key, value
    return None


def _settings_mapping(container: str, container_value: Node) -> Node | None:
    found = find_settings(container_value)
    if found is None:
        logger.debug("No %r block under %r", KEY_SETTINGS, container)
        return None

    _, settings = found
    if settings.kind is not NodeKind.MAPPING:
        logger.warning("%s.%s is not a mapping, no sections extracted", container, KEY_SETTINGS)
        return None
    return settings


def split(
    container: str,
    container_value: Node,
    index: DescriptionIndex | None = None,
) -> list[Section]:
    """Extract every ``settings`` entry of a container as its own section.

    Args:
        container: Container key ("linters" or "formatters")
        container_value: The container's value node from the reference document
        index: Description lookup; missing entries give an empty description

    Returns:
        Sections in document order (empty if the container has no settings)
    """
    settings = _settings_mapping(container, container_value)
    if settings is None:
        return []

    sections: list[Section] = []
    for name_key, body in settings.pairs():
        name = str(name_key.value)
        section_body = body.copy()

        section_document = document(
            mapping(
                scalar(container),
                mapping(
                    scalar(KEY_SETTINGS),
                    settings.copy(children=(name_key.copy(), section_body), style=NodeStyle.BLOCK),
                ),
            )
        )

        description = index.lookup(name) if index is not None else ""
        if not description:
            logger.debug("No description found for %s.%s", container, name)

        sections.append(
            Section(
                container=container,
                name=name,
                description=description,
                body=section_body,
                document=section_document,
            )
        )

    return sections


def redact_settings(container: str, container_value: Node) -> Node:
    """Return a copy of a container whose settings entries are placeholders.

    Each ``settings`` entry keeps its name and comments but its body becomes
    a placeholder pointing at the ``container.name`` section. Everything else
    in the container is kept verbatim. The container and its settings are
    rendered in block style so the placeholder comments can be written.
    """
    settings = _settings_mapping(container, container_value)
    if settings is None:
        return container_value.copy()

    children: list[Node] = []
    for key, value in container_value.pairs():
        if value is settings:
            redacted = [
                child
                for name_key, _ in settings.pairs()
                for child in (name_key.copy(), placeholder(container, str(name_key.value)))
            ]
            value = settings.copy(children=redacted, style=NodeStyle.BLOCK)
        children.extend([key, value])

    return container_value.copy(children=children, style=NodeStyle.BLOCK)
