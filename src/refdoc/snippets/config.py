"""Extractor settings stored in refdoc.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .exceptions import SettingsError
from .nodes import INDENT_STEP
from .renderer import LIST_ITEM_PREFIX

SETTINGS_FILENAME = "refdoc.yaml"
SETTINGS_SECTION = "snippets"


@dataclass(slots=True)
class ExtractorSettings:
    """Where to read the reference document from and how to render it."""

    reference_path: Path = field(default_factory=lambda: Path(".golangci.reference.yml"))
    assets_path: Path = field(default_factory=lambda: Path("assets"))
    output_dir: Path = field(default_factory=lambda: Path("build"))
    indent: int = INDENT_STEP
    list_item_prefix: str = LIST_ITEM_PREFIX

    def metadata_path(self, container: str) -> Path:
        """Metadata file describing the components of ``container``."""
        return self.assets_path / f"{container}-info.json"

    def to_dict(self) -> dict[str, object]:
        return {
            "reference": str(self.reference_path),
            "assets": str(self.assets_path),
            "output": str(self.output_dir),
            "indent": self.indent,
            "list_item_prefix": self.list_item_prefix,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object] | None, base_dir: Path | None = None) -> ExtractorSettings:
        """Build settings from the ``snippets`` section of refdoc.yaml.

        Relative paths are resolved against ``base_dir`` when given.
        """
        settings = cls()
        if not isinstance(data, dict):
            return settings

        for key, attr in (("reference", "reference_path"), ("assets", "assets_path"), ("output", "output_dir")):
            raw = data.get(key)
            if raw is None:
                continue
            if not isinstance(raw, str) or not raw.strip():
                raise SettingsError(f"'{SETTINGS_SECTION}.{key}' must be a non-empty path")
            path = Path(raw.strip())
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            setattr(settings, attr, path)

        indent = data.get("indent")
        if indent is not None:
            if isinstance(indent, bool) or not isinstance(indent, int) or indent < 1:
                raise SettingsError(f"'{SETTINGS_SECTION}.indent' must be a positive integer, got {indent!r}")
            settings.indent = indent

        prefix = data.get("list_item_prefix")
        if prefix is not None:
            if not isinstance(prefix, str):
                raise SettingsError(f"'{SETTINGS_SECTION}.list_item_prefix' must be a string")
            settings.list_item_prefix = prefix

        return settings


def load_settings(path: Path | None = None) -> ExtractorSettings:
    """Load extractor settings, falling back to defaults when the file is missing."""
    config_path = path or Path(SETTINGS_FILENAME)
    if not config_path.exists():
        return ExtractorSettings()

    yaml = YAML()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    except YAMLError as exc:
        raise SettingsError(f"Failed to parse {config_path}: {exc}") from exc

    section = payload.get(SETTINGS_SECTION) if isinstance(payload, dict) else None
    return ExtractorSettings.from_dict(
        section if isinstance(section, dict) else None,
        base_dir=config_path.parent,
    )
