"""SchemaScout CLI: discover and validate schema-tagged project artifacts.

Entry point for the ``schemascout`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan      — Discover artifacts, group them per feature, resolve primaries.
    validate  — Check every feature's completeness against the feature spec.
    schemas   — List the schemas known to the registry.

Usage::

    schemascout scan .
    schemascout scan ./my-project --format json
    schemascout validate ./my-project
    schemascout -v scan .                 # debug logging, incl. resolver decisions
    schemascout schemas
"""

from __future__ import annotations

import logging

import click

from schemascout import __version__
from schemascout.cli.scan import scan_command
from schemascout.cli.schemas_cmd import schemas_command
from schemascout.cli.validate import validate_command


@click.group()
@click.version_option(version=__version__)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    default=False,
    help="Enable debug logging (resolver decisions, skipped files).",
)
def cli(verbose: bool) -> None:
    """SchemaScout: find, classify and validate feature artifacts.

    Walks a project tree for YAML and Markdown files that declare a
    ``_schema`` (or follow legacy naming conventions), picks one primary
    file per feature and role, and reports what is missing.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


cli.add_command(scan_command)
cli.add_command(validate_command)
cli.add_command(schemas_command)
