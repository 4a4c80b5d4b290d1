"""Markdown table of linters and formatters for the website."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .descriptions import ComponentRecord, describe
from .renderer import LIST_ITEM_PREFIX, anchor_for, span, span_with_id

COG_ICON = "<FaCog size={'0.8rem'} />"
GITHUB_ICON = "<FaGithub size={'0.8rem'} />"
GITLAB_ICON = "<FaGitlab size={'0.8rem'} />"
DEPRECATED_ICON = "⚠"
CHECK_ICON = "✔"

TABLE_HEADER = (
    "|Name|Description|AutoFix|Since|",
    "|----|-----------|-------|-----|",
)


class SettingsRegistry:
    """Names of the components that have a settings section.

    Names compare case-insensitively.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names = frozenset(name.lower() for name in names)

    @classmethod
    def from_sections(cls, sections: Mapping[str, Iterable[str]]) -> SettingsRegistry:
        """Build the registry from container -> section names."""
        return cls(name for names in sections.values() for name in names)

    def has_settings(self, name: str) -> bool:
        return name.lower() in self._names

    def __len__(self) -> int:
        return len(self._names)


def select_components(records: Iterable[ComponentRecord], enabled: bool) -> list[ComponentRecord]:
    """Public components enabled (or not) by default, deprecated ones last."""
    needed = [record for record in records if not record.internal and record.is_standard == enabled]
    return sorted(needed, key=lambda record: (record.is_deprecated, record.name))


def _check(value: bool, title: str) -> str:
    return span(title, CHECK_ICON) if value else ""


def _name_cell(record: ComponentRecord, registry: SettingsRegistry, prefix: str) -> str:
    name = record.name
    cell = span_with_id(anchor_for(name, prefix), "", "")

    if registry.has_settings(name) and not record.is_deprecated:
        cell += f'[{name}&nbsp;{COG_ICON}](#{name} "{name} configuration")'
    else:
        cell += f'{span_with_id(name, "", "")}[{name}](#{name} "{name} has no configuration")'

    if record.original_url:
        icon = GITLAB_ICON if "gitlab" in record.original_url else GITHUB_ICON
        cell += f"&nbsp;[{span(name + ' repository', icon)}]({record.original_url})"

    if record.deprecation is None:
        return cell

    # The version is only shown for components that have a replacement.
    title = "deprecated"
    if record.deprecation.replacement:
        title += f" since {record.deprecation.since}"

    return cell + "&nbsp;" + span(title, DEPRECATED_ICON)


def render_component_table(
    records: Iterable[ComponentRecord],
    enabled: bool,
    registry: SettingsRegistry | None = None,
    prefix: str = LIST_ITEM_PREFIX,
) -> str:
    """Render the component table.

    Args:
        records: Component records from a metadata file
        enabled: True for components in the standard group, False for the rest
        registry: Components with a settings section (linked with a cog icon)
        prefix: Anchor prefix of the table rows

    Returns:
        Markdown table without a trailing newline
    """
    registry = registry or SettingsRegistry()

    lines = list(TABLE_HEADER)
    for record in select_components(records, enabled):
        lines.append(
            "|{name}|{desc}|{autofix}|{since}|".format(
                name=_name_cell(record, registry, prefix),
                desc=describe(record),
                autofix=_check(record.can_auto_fix, "Auto fix supported"),
                since=record.since,
            )
        )

    return "\n".join(lines)
