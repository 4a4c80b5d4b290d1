"""Reference snippet commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from refdoc.snippets.config import ExtractorSettings, load_settings
from refdoc.snippets.descriptions import load_records
from refdoc.snippets.exceptions import SnippetError
from refdoc.snippets.extractor import ExampleSnippetsExtractor, SnippetBundle
from refdoc.snippets.listing import SettingsRegistry, render_component_table
from refdoc.snippets.policy import KEY_LINTERS, SPLITTABLE_CONTAINERS

app = typer.Typer(
    name="snippets",
    help="Generate documentation snippets from the configuration reference",
    no_args_is_help=True,
)

console = Console()


def _resolve_settings(
    config: Optional[Path],
    reference: Optional[Path],
    assets: Optional[Path],
    output: Optional[Path] = None,
) -> ExtractorSettings:
    """Load refdoc.yaml and apply command-line overrides."""
    settings = load_settings(config)
    if reference is not None:
        settings.reference_path = reference
    if assets is not None:
        settings.assets_path = assets
    if output is not None:
        settings.output_dir = output
    return settings


def _extract(settings: ExtractorSettings) -> tuple[ExampleSnippetsExtractor, SnippetBundle]:
    extractor = ExampleSnippetsExtractor(settings)
    return extractor, extractor.get_example_snippets()


ConfigOption = typer.Option(None, "--config", "-c", help="Path to refdoc.yaml")
ReferenceOption = typer.Option(None, "--reference", "-r", help="Reference configuration file")
AssetsOption = typer.Option(None, "--assets", help="Directory holding <container>-info.json files")


@app.command()
def extract(
    config: Optional[Path] = ConfigOption,
    reference: Optional[Path] = ReferenceOption,
    assets: Optional[Path] = AssetsOption,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for the generated Markdown"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Write the configuration overview and the settings sections."""
    try:
        settings = _resolve_settings(config, reference, assets, output)
        extractor, bundle = _extract(settings)
        files_written = extractor.write(bundle)

        if json_output:
            print(
                json.dumps(
                    {
                        "success": True,
                        "output_dir": str(settings.output_dir),
                        "files_written": files_written,
                        "sections": bundle.section_names(),
                        "unknown_keys": list(bundle.unknown_keys),
                    },
                    indent=2,
                )
            )
            return

        console.print("[green]✅ Snippets generated[/green]")
        console.print(f"Output: {settings.output_dir}")
        for container, names in bundle.section_names().items():
            console.print(f"{container}: {len(names)} settings sections")
        if bundle.unknown_keys:
            console.print(
                "[yellow]Undocumented top-level keys (add them to the key policy):[/yellow] "
                + ", ".join(bundle.unknown_keys)
            )
        console.print("Files written:")
        for filename in files_written:
            console.print(f"  ✓ {filename}")

    except SnippetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


@app.command()
def overview(
    config: Optional[Path] = ConfigOption,
    reference: Optional[Path] = ReferenceOption,
    full: bool = typer.Option(False, "--full", help="Append the full block of every documented key"),
) -> None:
    """Print the configuration overview."""
    try:
        settings = _resolve_settings(config, reference, None)
        _, bundle = _extract(settings)
    except SnippetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    typer.echo(bundle.configuration_file if full else bundle.overview, nl=False)


@app.command()
def table(
    container: str = typer.Option(KEY_LINTERS, "--container", help="linters or formatters"),
    enabled: bool = typer.Option(True, "--enabled/--disabled", help="Components enabled by default or not"),
    config: Optional[Path] = ConfigOption,
    reference: Optional[Path] = ReferenceOption,
    assets: Optional[Path] = AssetsOption,
) -> None:
    """Print the Markdown table of linters or formatters."""
    if container not in SPLITTABLE_CONTAINERS:
        console.print(f"[red]Error:[/red] --container must be one of: {', '.join(SPLITTABLE_CONTAINERS)}")
        raise typer.Exit(code=1)

    try:
        settings = _resolve_settings(config, reference, assets)
        _, bundle = _extract(settings)
        records = load_records(settings.metadata_path(container))
    except SnippetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    registry = SettingsRegistry.from_sections(bundle.section_names())
    typer.echo(render_component_table(records, enabled, registry, settings.list_item_prefix))


@app.command()
def keys(
    config: Optional[Path] = ConfigOption,
    reference: Optional[Path] = ReferenceOption,
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Report which top-level keys are documented and which are dropped."""
    try:
        settings = _resolve_settings(config, reference, None)
        _, bundle = _extract(settings)
    except SnippetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    documented = list(bundle.key_snippets)

    if json_output:
        print(json.dumps({"documented": documented, "unknown": list(bundle.unknown_keys)}, indent=2))
        return

    report = Table(show_header=True, header_style="bold magenta")
    report.add_column("Key", style="cyan")
    report.add_column("Status")
    for key in documented:
        report.add_row(key, "[green]documented[/green]")
    for key in bundle.unknown_keys:
        report.add_row(key, "[yellow]dropped (no policy)[/yellow]")
    console.print(report)
