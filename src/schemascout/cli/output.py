"""Rich output formatting helpers for the SchemaScout CLI.

Status Color Mapping:
    error = bold red, warning = yellow, valid = green, info = cyan
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from schemascout.discovery.models import ScanResult
from schemascout.schema.models import SchemaDefinition
from schemascout.validation.models import IssueLevel, ValidationReport, ValidationStatus

_STATUS_STYLES: dict[ValidationStatus, str] = {
    ValidationStatus.ERROR: "bold red",
    ValidationStatus.WARNING: "yellow",
    ValidationStatus.VALID: "green",
}

_LEVEL_STYLES: dict[IssueLevel, str] = {
    IssueLevel.ERROR: "bold red",
    IssueLevel.WARNING: "yellow",
    IssueLevel.INFO: "cyan",
}

console = Console()


def status_style(status: ValidationStatus) -> str:
    """Return the Rich style string for a validation status."""
    return _STATUS_STYLES.get(status, "white")


def print_scan_result(result: ScanResult) -> None:
    """Print features, conflicts and unknown schemas of a scan.

    Args:
        result: Output of ``ProjectScanner.scan_sync``.
    """
    for warning in result.warnings:
        console.print(f"[yellow]Note:[/yellow] {warning}")

    if not result.features and not result.project_files:
        console.print("[dim]No schema files found.[/dim]")
    else:
        table = Table(title="Features", show_header=True, header_style="bold")
        table.add_column("Feature", style="bold")
        table.add_column("File Type")
        table.add_column("Primary File")
        table.add_column("Instances", justify="right")
        table.add_column("Reason", style="dim")

        for feature_id, feature in result.features.items():
            for file_type, primary in sorted(feature.primary_files.items()):
                resolution = feature.resolutions[file_type]
                path = Text(primary.path)
                if primary.legacy:
                    path.append(" (legacy)", style="dim")
                reason = Text(resolution.reason.value)
                if not resolution.confident:
                    reason.stylize("yellow")
                table.add_row(
                    feature_id,
                    file_type,
                    path,
                    str(len(feature.all_files.get(file_type, []))),
                    reason,
                )
        for file_type, primary in sorted(result.project_files.items()):
            table.add_row(Text("(project)", style="cyan"), file_type, primary.path, "-", "-")
        console.print(table)

    conflicts = [
        (feature_id, conflict)
        for feature_id, feature in result.features.items()
        for conflict in feature.conflicts
    ]
    conflicts.extend(("(project)", conflict) for conflict in result.project_conflicts)
    if conflicts:
        conflict_table = Table(title="Conflicts", show_header=True, header_style="bold")
        conflict_table.add_column("Feature", style="bold")
        conflict_table.add_column("File Type")
        conflict_table.add_column("Selected")
        conflict_table.add_column("Why")
        for feature_id, conflict in conflicts:
            why = Text(conflict.reason_text)
            if not conflict.has_explicit_primary:
                why.append(" (no explicit primary)", style="yellow")
            conflict_table.add_row(feature_id, conflict.file_type, conflict.selected_path, why)
        console.print(conflict_table)

    if result.unknown_schemas:
        unknown_table = Table(title="Unknown Schemas", show_header=True, header_style="bold")
        unknown_table.add_column("File", style="bold")
        unknown_table.add_column("Schema")
        unknown_table.add_column("Category", justify="center")
        unknown_table.add_column("Suggestion", style="dim")
        for item in result.unknown_schemas:
            unknown_table.add_row(
                item.file.path, item.file.schema, item.category.value, item.hint.suggestion,
            )
        console.print(unknown_table)

    _print_scan_summary(result)


def _print_scan_summary(result: ScanResult) -> None:
    """Print a one-line summary after the scan tables."""
    stats = result.stats
    parts = [
        f"[bold]{stats.total_files}[/bold] files scanned",
        f"{stats.schema_files} schema files",
        f"{len(result.features)} features",
    ]
    n_conflicts = sum(len(f.conflicts) for f in result.features.values())
    if n_conflicts:
        parts.append(f"[yellow]{n_conflicts} conflicts[/yellow]")
    if result.unknown_schemas:
        parts.append(f"[red]{len(result.unknown_schemas)} unknown schemas[/red]")
    parts.append(f"{stats.scan_time_ms:.1f} ms")
    console.print(" | ".join(parts))


def print_validation_report(report: ValidationReport, summary: str) -> None:
    """Print per-feature validation results and their issues.

    Args:
        report: Output of ``Validator.validate``.
        summary: Text from ``Validator.get_summary``.
    """
    verdict = Text(report.status.label.upper(), style=status_style(report.status))
    console.print(Panel(Text.assemble(("Status: ", "bold"), verdict), title="Validation"))

    if report.feature_reports:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Feature", style="bold")
        table.add_column("Status", justify="center")
        table.add_column("Phase", justify="right")
        table.add_column("Missing")
        for feature_id, feature_report in report.feature_reports.items():
            missing = feature_report.missing_required + feature_report.missing_for_phase
            phase = feature_report.current_phase
            table.add_row(
                feature_id,
                Text(feature_report.status.label, style=status_style(feature_report.status)),
                "-" if phase is None else str(phase),
                ", ".join(missing) or "-",
            )
        console.print(table)

    issues = [
        (feature_id, issue)
        for feature_id, feature_report in report.feature_reports.items()
        for issue in feature_report.issues
    ]
    if issues:
        issue_table = Table(title="Issues", show_header=True, header_style="bold")
        issue_table.add_column("Feature", style="bold")
        issue_table.add_column("Level", justify="center")
        issue_table.add_column("Code")
        issue_table.add_column("Message")
        issue_table.add_column("Suggestion", style="dim")
        for feature_id, issue in issues:
            issue_table.add_row(
                feature_id,
                Text(issue.level.value, style=_LEVEL_STYLES[issue.level]),
                issue.code,
                issue.message,
                issue.suggestion or "",
            )
        console.print(issue_table)

    console.print(summary)


def print_schemas(schemas: list[SchemaDefinition]) -> None:
    """Print the registered schemas as a table."""
    table = Table(title="Registered Schemas", show_header=True, header_style="bold")
    table.add_column("Schema", style="bold")
    table.add_column("File Type")
    table.add_column("Scope", justify="center")
    table.add_column("Required", justify="center")
    table.add_column("Carriers")
    for schema in schemas:
        table.add_row(
            schema.full_id,
            schema.file_type,
            schema.scope.value,
            Text("yes", style="bold") if schema.required else Text("no", style="dim"),
            ", ".join(c.value for c in schema.carriers),
        )
    console.print(table)
