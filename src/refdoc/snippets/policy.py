"""Top-level key policy for the configuration overview.

The overview only documents a closed set of top-level keys. Adding a new
top-level key to the reference document therefore needs an explicit entry in
``KEY_POLICY``; until then it is dropped from the overview and reported by
``unknown_keys()``.
"""

from __future__ import annotations

import logging
from enum import Enum

from .nodes import Node

logger = logging.getLogger(__name__)

KEY_LINTERS = "linters"
KEY_FORMATTERS = "formatters"
KEY_SETTINGS = "settings"
KEY_VERSION = "version"

# Containers whose values group per-component configuration under `settings`.
SPLITTABLE_CONTAINERS: tuple[str, ...] = (KEY_LINTERS, KEY_FORMATTERS)


class KeyAction(Enum):
    """What happens to a top-level key in the overview."""
    EMBED_WITH_COMMENT = "embed_with_comment"
    PLACEHOLDER = "placeholder"
    DROP = "drop"


KEY_POLICY: dict[str, KeyAction] = {
    "run": KeyAction.PLACEHOLDER,
    "output": KeyAction.PLACEHOLDER,
    KEY_LINTERS: KeyAction.PLACEHOLDER,
    KEY_FORMATTERS: KeyAction.PLACEHOLDER,
    "issues": KeyAction.PLACEHOLDER,
    "severity": KeyAction.PLACEHOLDER,
    KEY_VERSION: KeyAction.EMBED_WITH_COMMENT,
}


def action_for(key: str) -> KeyAction:
    return KEY_POLICY.get(key, KeyAction.DROP)


def unknown_keys(root: Node) -> list[str]:
    """Return top-level keys of ``root`` that have no policy entry."""
    unknown = [key for key in root.root.keys() if key not in KEY_POLICY]
    if unknown:
        logger.info("Top-level keys without a documentation policy: %s", ", ".join(unknown))
    return unknown


def pointer_comment(*path: str) -> str:
    """Build the comment pointing readers at a documentation section."""
    return f'See the dedicated "{".".join(path)}" documentation section.'
