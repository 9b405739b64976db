"""Command-line interface for gettext-duplicate-errors."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict

import click

from . import __version__
from .analyzer import analyze_file
from .checks import ALL_CHECKS
from .log import setup_logging
from .models import Diagnostic, Severity
from .parser import ParseError
from .settings import Settings

SEVERITY_COLORS: dict[Severity, str] = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
    Severity.HINT: "green",
}


@click.group()
@click.version_option(__version__, prog_name="gettext-duplicate-errors")
def main() -> None:
    """Report msgid values defined more than once in gettext catalogs."""


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--checks",
    "check_names",
    default=None,
    help=f"Comma-separated check names (default: all). Available: {', '.join(ALL_CHECKS)}",
)
@click.option(
    "--severity",
    type=click.Choice([s.name.lower() for s in Severity]),
    default=None,
    help="Severity of reported duplicates (default: from saved settings, else error).",
)
@click.option("--save-settings", is_flag=True, help="Remember --severity for later runs.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def check(
    paths: tuple[str, ...],
    check_names: str | None,
    severity: str | None,
    save_settings: bool,
    fmt: str,
    verbose: bool,
) -> None:
    """Check catalog files for duplicate message definitions."""
    setup_logging(verbose=verbose)

    checks = None
    if check_names:
        checks = [c.strip() for c in check_names.split(",")]

    settings = Settings.load()
    if severity is not None:
        settings.severity = severity
    if save_settings:
        settings.save()

    results: dict[str, list[Diagnostic]] = {}
    for path in paths:
        try:
            results[path] = analyze_file(path, settings=settings, checks=checks)
        except ParseError as exc:
            click.echo(f"Error: {path}: {exc}", err=True)
            sys.exit(2)
        except (ValueError, OSError) as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(2)

    if fmt == "json":
        _output_json(results)
    else:
        _output_text(results)

    total = sum(len(diags) for diags in results.values())
    sys.exit(1 if total else 0)


@main.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--log-file", default=None, type=click.Path(dir_okay=False), help="Also write logs to this file.")
def serve(verbose: bool, log_file: str | None) -> None:
    """Run the language server over stdio."""
    setup_logging(verbose=True if verbose else None, log_file=log_file, libraries=("pygls",))

    from .server import create_server

    create_server().start_io()


def _output_text(results: dict[str, list[Diagnostic]]) -> None:
    total = sum(len(diags) for diags in results.values())
    if not total:
        click.echo("No duplicate messages found.")
        return

    for path, diagnostics in results.items():
        for d in diagnostics:
            start = d.range.start
            sev = click.style(d.severity.name.lower(), fg=SEVERITY_COLORS[d.severity], bold=True)
            click.echo(f"{path}:{start.line + 1}:{start.character + 1}: {sev}: {d.message}")
            for rel in d.related_information:
                loc = click.style(f"{rel.range.start.line + 1}:{rel.range.start.character + 1}", dim=True)
                click.echo(f"    {loc}  {rel.message}")

    click.echo(f"\nTotal: {total} diagnostic(s) in {len(results)} file(s).", err=True)


def _output_json(results: dict[str, list[Diagnostic]]) -> None:
    data = []
    for path, diagnostics in results.items():
        for d in diagnostics:
            item = asdict(d)
            item["severity"] = d.severity.name
            item["file"] = path
            data.append(item)
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
