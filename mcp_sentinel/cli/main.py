"""Typer CLI for mcp-sentinel."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mcp_sentinel.config import load_settings
from mcp_sentinel.exceptions import ConfigError, FatalScanError
from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.output.formats import OutputFormat, render_report
from mcp_sentinel.output.terminal import SEVERITY_STYLES, render_scan_result
from mcp_sentinel.rules import CATALOG_VERSION, RULE_CATALOG
from mcp_sentinel.scanners.vulnerability_scanner import scan_vulnerabilities

app = typer.Typer(
    name="mcp-sentinel",
    help="mcp-sentinel: lexical security scanner for MCP servers and their source trees.",
)
console = Console()
err_console = Console(stderr=True)

EXIT_FAIL_ON = 1
EXIT_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _enabled_families(
    current: frozenset[RuleFamily],
    enable: List[RuleFamily],
    disable: List[RuleFamily],
) -> frozenset[RuleFamily]:
    families = set(enable) if enable else set(current)
    return frozenset(families - set(disable))


@app.command()
def scan(
    target: str = typer.Argument(help="File or directory to scan"),
    output_format: OutputFormat = typer.Option(OutputFormat.TERMINAL, "--format", "-f", help="Report format"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to this file"),
    min_severity: Optional[Severity] = typer.Option(None, "--min-severity", help="Hide findings below this severity"),
    min_confidence: Optional[float] = typer.Option(None, "--min-confidence", help="Hide findings below this confidence (0-1)"),
    fail_on: Optional[Severity] = typer.Option(None, "--fail-on", help="Exit 1 if any finding is at or above this severity"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Parallel file workers (default: CPU count)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Overall scan timeout in seconds"),
    max_file_size: Optional[int] = typer.Option(None, "--max-file-size", help="Skip files larger than this many bytes"),
    enable_family: List[RuleFamily] = typer.Option([], "--enable-family", help="Only run these rule families"),
    disable_family: List[RuleFamily] = typer.Option([], "--disable-family", help="Skip these rule families"),
    include: List[str] = typer.Option([], "--include", help="Only scan paths matching this glob"),
    exclude: List[str] = typer.Option([], "--exclude", help="Skip paths matching this glob"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to a YAML options file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """Scan files for security vulnerabilities."""
    _configure_logging(verbose)

    overrides = dict(
        min_severity=min_severity,
        min_confidence=min_confidence,
        worker_count=workers,
        timeout_seconds=timeout,
        max_file_size_bytes=max_file_size,
        include_patterns=include or None,
        exclude_patterns=exclude or None,
    )
    try:
        settings = load_settings(config, **overrides)
        if enable_family or disable_family:
            families = _enabled_families(settings.enabled_rule_families, enable_family, disable_family)
            settings = load_settings(config, enabled_rule_families=families, **overrides)
        result = scan_vulnerabilities(target, settings)
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=EXIT_ERROR)
    except FatalScanError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=EXIT_ERROR)

    if output_format == OutputFormat.TERMINAL:
        if output:
            with output.open("w", encoding="utf-8") as fh:
                render_scan_result(result, Console(file=fh, width=160))
            console.print(f"Report written to {output}")
        else:
            render_scan_result(result, console)
    else:
        report = render_report(result, output_format)
        if output:
            output.write_text(report, encoding="utf-8")
            console.print(f"Report written to {output}")
        else:
            typer.echo(report)

    if fail_on is not None and result.has_issues_at_level(fail_on):
        raise typer.Exit(code=EXIT_FAIL_ON)


@app.command()
def rules(
    family: Optional[RuleFamily] = typer.Option(None, "--family", help="Only list this rule family"),
    json_output: bool = typer.Option(False, "--json", help="Output the catalog as JSON"),
):
    """List the detection rules in the catalog."""
    selected = [r for r in RULE_CATALOG.rules() if family is None or r.family == family]

    if json_output:
        typer.echo(json.dumps([r.to_dict() for r in selected], indent=2))
        return

    table = Table(title=f"Rule Catalog v{CATALOG_VERSION} ({len(selected)} rules)")
    table.add_column("ID", style="bold cyan")
    table.add_column("Family")
    table.add_column("Severity")
    table.add_column("Confidence")
    table.add_column("Title")

    for r in selected:
        style = SEVERITY_STYLES[r.default_severity]
        table.add_row(
            r.id,
            r.family.value,
            f"[{style}]{r.default_severity.value.upper()}[/{style}]",
            f"{r.base_confidence:.2f}",
            r.title,
        )

    console.print(table)


if __name__ == "__main__":
    app()
