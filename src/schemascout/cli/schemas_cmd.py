"""``schemascout schemas`` — List the schemas known to the registry.

With ``--path``, the project config at that path contributes its custom
schemas and overrides; otherwise only the built-in schemas are listed.

Exit Codes:
    0 — Always, unless the project config is invalid (2).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from schemascout.config.loader import build_registry, load_project_config
from schemascout.exceptions import SchemaScoutError
from schemascout.schema.registry import default_registry


@click.command("schemas")
@click.option(
    "--path", "project_path",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Project root whose config adds custom schemas.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def schemas_command(project_path: Path | None, output_format: str) -> None:
    """List registered schemas with their scope and carriers."""
    if project_path is None:
        registry = default_registry()
    else:
        try:
            registry = build_registry(load_project_config(project_path).config)
        except SchemaScoutError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(2)

    schemas = sorted(registry.get_all(), key=lambda s: s.id)
    if output_format == "json":
        click.echo(json.dumps([s.to_dict() for s in schemas], indent=2))
    else:
        from schemascout.cli.output import print_schemas
        print_schemas(schemas)
