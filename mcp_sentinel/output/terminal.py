"""Rich terminal rendering of a scan result."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mcp_sentinel.models import SEVERITY_ORDER, ScanResult, Severity

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
}


def _risk_style(score: int) -> str:
    if score >= 70:
        return "bold red"
    if score >= 40:
        return "red"
    if score >= 10:
        return "yellow"
    return "green"


def render_scan_result(result: ScanResult, console: Console | None = None) -> None:
    """Render a Rich-formatted scan report to the console."""
    if console is None:
        console = Console()

    summary = result.summary
    counts = "  ".join(
        f"[{SEVERITY_STYLES[sev]}]{sev.value.upper()}: {summary.counts_by_severity.get(sev, 0)}[/{SEVERITY_STYLES[sev]}]"
        for sev in SEVERITY_ORDER
    )
    risk = _risk_style(summary.risk_score)
    skipped = ", ".join(f"{reason.value}: {n}" for reason, n in summary.skip_reasons.items() if n)
    header = (
        f"[bold]Security Scan Report[/bold]\n\n"
        f"Target: {escape(result.target_path)}\n"
        f"Files: {summary.total_files_scanned} scanned, {summary.total_files_skipped} skipped"
        f"{f' ({skipped})' if skipped else ''} of {summary.total_files_discovered}\n"
        f"Findings: {summary.total_vulnerabilities}  |  "
        f"Risk score: [{risk}]{summary.risk_score}/100[/{risk}]  |  "
        f"Duration: {result.duration_ms}ms\n"
        f"{counts}"
    )
    console.print(Panel(header, title="mcp-sentinel", border_style="blue"))

    for err in result.errors:
        where = f" {err.file}" if err.file else ""
        rule = f" [{err.rule_id}]" if err.rule_id else ""
        console.print(f"[yellow]Warning:[/yellow] {escape(f'{err.kind.value}{where}{rule}: {err.message}')}")

    if not result.vulnerabilities:
        console.print(f"[green]No vulnerabilities found[/green] in {summary.total_files_scanned} files.")
        return

    table = Table(title=f"Vulnerabilities ({len(result.vulnerabilities)} shown)")
    table.add_column("Severity", style="bold")
    table.add_column("ID")
    table.add_column("File:Line")
    table.add_column("Title")
    table.add_column("Confidence")
    table.add_column("Snippet")

    for v in result.vulnerabilities:
        style = SEVERITY_STYLES[v.severity]
        table.add_row(
            f"[{style}]{v.severity.value.upper()}[/{style}]",
            v.id,
            escape(f"{v.location.file}:{v.location.line}"),
            v.title,
            f"{v.confidence:.2f}",
            escape(v.code_snippet[:80]),
        )

    console.print(table)
