"""``schemascout validate <path>`` — Check feature completeness.

Scans PATH with its project config, then validates every feature against
the config's ``feature_spec``.

Exit Codes:
    0 — Every feature is valid and no unknown schemas were found.
    1 — Warnings only (phase-gated files missing, implicit primaries, ...).
    2 — At least one feature misses a required file.
    3 — Project root unreadable, or its config file is invalid.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from schemascout.cli.scan import build_scanner
from schemascout.exceptions import SchemaScoutError
from schemascout.validation.models import ValidationStatus
from schemascout.validation.validator import Validator

_EXIT_CODES: dict[ValidationStatus, int] = {
    ValidationStatus.VALID: 0,
    ValidationStatus.WARNING: 1,
    ValidationStatus.ERROR: 2,
}


@click.command("validate")
@click.argument("path", type=click.Path(path_type=Path), default=".")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def validate_command(path: Path, output_format: str) -> None:
    """Validate every feature found under PATH.

    Exit code 0 if valid, 1 on warnings, 2 on errors, 3 if PATH cannot be
    scanned.
    """
    try:
        scanner = build_scanner(path, use_config=True)
        scan_result = scanner.scan_sync(path)
    except SchemaScoutError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}", err=True)
        sys.exit(3)

    validator = Validator(scanner.config.feature_spec)
    report = validator.validate(scan_result)
    summary = validator.get_summary(report)

    if output_format == "json":
        payload = report.to_dict()
        payload["summary"] = summary
        click.echo(json.dumps(payload, indent=2))
    else:
        from schemascout.cli.output import print_validation_report
        print_validation_report(report, summary)
    sys.exit(_EXIT_CODES[report.status])
