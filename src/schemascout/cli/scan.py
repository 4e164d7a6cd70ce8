"""``schemascout scan <path>`` — Discover and resolve feature artifacts.

Loads the project config found at PATH (unless ``--no-config``), scans the
tree and prints the features found, their primary files, any multi-instance
conflicts and the files carrying unusable schema tags.

Exit Codes:
    0 — Scan completed (conflicts and unknown schemas are reported, not failures).
    2 — Project root unreadable, or its config file is invalid.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from schemascout.discovery.models import ScanResult
from schemascout.discovery.scanner import ProjectScanner
from schemascout.exceptions import SchemaScoutError


def build_scanner(path: Path, use_config: bool) -> ProjectScanner:
    """Create a scanner for PATH, optionally from its config file."""
    if use_config:
        return ProjectScanner.for_project(path)
    return ProjectScanner()


def run_scan(path: Path, use_config: bool) -> ScanResult:
    """Scan PATH.

    Raises:
        SchemaScoutError: If the root or its config file is unusable.
    """
    scanner = build_scanner(path, use_config)
    return scanner.scan_sync(path)


@click.command("scan")
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
@click.option(
    "--no-config",
    is_flag=True,
    default=False,
    help="Ignore project.yaml and scan with built-in defaults.",
)
def scan_command(path: Path, output_format: str, no_config: bool) -> None:
    """Discover schema-tagged and legacy artifacts under PATH.

    Exit code 0 when the scan completes, 2 when PATH cannot be scanned.
    """
    try:
        result = run_scan(path, use_config=not no_config)
    except SchemaScoutError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        from schemascout.cli.output import print_scan_result
        print_scan_result(result)
    sys.exit(0)
