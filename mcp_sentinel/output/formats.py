"""Report serializers: JSON, SARIF 2.1.0, and CSV.

Serializers read a finished ScanResult and never reorder findings or touch
severities and counts.
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from typing import Any

from mcp_sentinel.models import ScanResult, Severity, Vulnerability
from mcp_sentinel.rules import CATALOG_VERSION, RULE_CATALOG, RuleCatalog

TOOL_NAME = "mcp-sentinel"
SARIF_VERSION = "2.1.0"
SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"

CSV_COLUMNS = ("id", "severity", "confidence", "family", "file", "line", "column", "title", "code_snippet")

_SARIF_LEVELS = {
    Severity.CRITICAL: "error",
    Severity.HIGH: "error",
    Severity.MEDIUM: "warning",
    Severity.LOW: "note",
    Severity.INFO: "note",
}


class OutputFormat(str, Enum):
    TERMINAL = "terminal"
    JSON = "json"
    SARIF = "sarif"
    CSV = "csv"


def scan_result_to_dict(result: ScanResult) -> dict[str, Any]:
    """The stable JSON schema: scan_id, timestamp, target, vulnerabilities, summary, duration_ms, errors."""
    return {
        "scan_id": result.scan_id,
        "timestamp": result.timestamp.isoformat(),
        "target": result.target_path,
        "vulnerabilities": [v.model_dump(mode="json") for v in result.vulnerabilities],
        "summary": result.summary.model_dump(mode="json"),
        "duration_ms": result.duration_ms,
        "errors": [e.model_dump(mode="json") for e in result.errors],
    }


def scan_result_to_json(result: ScanResult) -> str:
    """Serialize a scan result to JSON."""
    return json.dumps(scan_result_to_dict(result), indent=2)


def _sarif_rule(rule_id: str, catalog: RuleCatalog) -> dict[str, Any]:
    rule = catalog.rule(rule_id)
    descriptor: dict[str, Any] = {
        "id": rule.id,
        "name": rule.title,
        "shortDescription": {"text": rule.title},
        "fullDescription": {"text": rule.render(rule.description_template)},
        "help": {"text": rule.render(rule.remediation_template)},
        "defaultConfiguration": {"level": _SARIF_LEVELS[rule.default_severity]},
        "properties": {
            "family": rule.family.value,
            "severity": rule.default_severity.value,
            "confidence": rule.base_confidence,
        },
    }
    if rule.weakness_reference:
        descriptor["properties"]["tags"] = list(rule.weakness_reference)
    return descriptor


def _sarif_result(vuln: Vulnerability, rule_index: int) -> dict[str, Any]:
    return {
        "ruleId": vuln.rule_id,
        "ruleIndex": rule_index,
        "level": _SARIF_LEVELS[vuln.severity],
        "message": {"text": f"{vuln.title}: {vuln.description}"},
        "locations": [{
            "physicalLocation": {
                "artifactLocation": {"uri": vuln.location.file},
                "region": {
                    "startLine": vuln.location.line,
                    "startColumn": vuln.location.column,
                    "snippet": {"text": vuln.code_snippet},
                },
            },
        }],
        "properties": {
            "id": vuln.id,
            "severity": vuln.severity.value,
            "confidence": vuln.confidence,
            "family": vuln.rule_family.value,
        },
    }


def scan_result_to_sarif(result: ScanResult, catalog: RuleCatalog = RULE_CATALOG) -> str:
    """Serialize a scan result as a single-run SARIF 2.1.0 log."""
    rule_ids: list[str] = []
    for vuln in result.vulnerabilities:
        if vuln.rule_id not in rule_ids:
            rule_ids.append(vuln.rule_id)
    index = {rule_id: i for i, rule_id in enumerate(rule_ids)}

    run = {
        "tool": {
            "driver": {
                "name": TOOL_NAME,
                "version": CATALOG_VERSION,
                "rules": [_sarif_rule(rule_id, catalog) for rule_id in rule_ids],
            },
        },
        "results": [_sarif_result(v, index[v.rule_id]) for v in result.vulnerabilities],
        "invocations": [{
            "executionSuccessful": True,
            "toolExecutionNotifications": [
                {"level": "warning", "message": {"text": f"{e.kind.value}: {e.file} {e.message}".strip()}}
                for e in result.errors
            ],
        }],
        "properties": {
            "scanId": result.scan_id,
            "riskScore": result.summary.risk_score,
        },
    }
    log = {"$schema": SARIF_SCHEMA, "version": SARIF_VERSION, "runs": [run]}
    return json.dumps(log, indent=2)


def scan_result_to_csv(result: ScanResult) -> str:
    """One row per vulnerability under a fixed header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for v in result.vulnerabilities:
        writer.writerow([
            v.id,
            v.severity.value,
            f"{v.confidence:.2f}",
            v.rule_family.value,
            v.location.file,
            v.location.line,
            v.location.column,
            v.title,
            v.code_snippet,
        ])
    return buffer.getvalue()


def render_report(result: ScanResult, fmt: OutputFormat | str) -> str:
    """Serialize ``result`` in any machine-readable format."""
    fmt = OutputFormat(fmt)
    if fmt == OutputFormat.JSON:
        return scan_result_to_json(result)
    if fmt == OutputFormat.SARIF:
        return scan_result_to_sarif(result)
    if fmt == OutputFormat.CSV:
        return scan_result_to_csv(result)
    raise ValueError(f"{fmt.value} output is rendered with Rich, not serialized")
