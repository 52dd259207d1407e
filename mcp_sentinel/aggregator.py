"""Aggregation: dedup raw findings, score them, and summarize a run."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping

from mcp_sentinel.models import (
    SEVERITY_ORDER,
    LexicalContext,
    Location,
    RawFinding,
    RuleFamily,
    ScanSummary,
    Severity,
    SkipReason,
    Vulnerability,
)
from mcp_sentinel.rules import RULE_CATALOG, FamilySpec, Rule, RuleCatalog

# Risk score weight per finding, saturating at 100
SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.CRITICAL: 40,
    Severity.HIGH: 20,
    Severity.MEDIUM: 5,
    Severity.LOW: 1,
    Severity.INFO: 0,
}

MAX_SNIPPET = 300


def risk_score(counts_by_severity: Mapping[Severity, int]) -> int:
    """0-100 score, monotonic in every severity count."""
    score = sum(SEVERITY_WEIGHTS[sev] * max(0, count) for sev, count in counts_by_severity.items())
    return max(0, min(100, score))


def adjusted_confidence(rule: Rule, spec: FamilySpec, context: LexicalContext) -> float:
    """Base confidence less the family's fixed penalty for comments or strings."""
    penalty = 0.0
    if context == LexicalContext.COMMENT:
        penalty = spec.comment_penalty
    elif context == LexicalContext.STRING:
        penalty = spec.string_penalty
    return round(max(0.0, min(1.0, rule.base_confidence - penalty)), 2)


def deduplicate(raw_findings: Iterable[RawFinding]) -> list[RawFinding]:
    """Keep the first finding per (file_path, line, rule_id), in input order."""
    seen: set[tuple[str, int, str]] = set()
    unique: list[RawFinding] = []
    for finding in raw_findings:
        key = (finding.file_path, finding.line, finding.rule_id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(finding)
    return unique


def _sort_key(vuln: Vulnerability) -> tuple:
    return (
        -vuln.severity.rank,
        vuln.location.file,
        vuln.location.line,
        vuln.location.column,
        vuln.rule_id,
    )


def _snippet(text: str) -> str:
    text = text.strip()
    if len(text) > MAX_SNIPPET:
        return text[:MAX_SNIPPET - 3] + "..."
    return text


def build_vulnerability(raw: RawFinding, rule: Rule, spec: FamilySpec, vuln_id: str = "") -> Vulnerability:
    evidence = {
        "language": rule.language,
        "pattern": rule.title,
        "matched_text": raw.matched_text,
        "lexical_context": raw.lexical_context.value,
    }
    if rule.weakness_reference:
        evidence["cwe"] = ", ".join(rule.weakness_reference)

    return Vulnerability(
        id=vuln_id or rule.id,
        rule_id=rule.id,
        rule_family=rule.family,
        severity=rule.default_severity,
        confidence=adjusted_confidence(rule, spec, raw.lexical_context),
        location=Location(file=raw.file_path, line=raw.line, column=raw.column),
        title=f"{rule.title} Detected",
        description=rule.render(rule.description_template),
        impact=spec.impact,
        remediation=rule.render(rule.remediation_template),
        code_snippet=_snippet(raw.line_text or raw.matched_text),
        evidence=evidence,
    )


def _assign_ids(vulns: list[Vulnerability]) -> list[Vulnerability]:
    seq: Counter[str] = Counter()
    numbered = []
    for vuln in vulns:
        seq[vuln.rule_id] += 1
        numbered.append(vuln.model_copy(update={"id": f"{vuln.rule_id}-{seq[vuln.rule_id]:03d}"}))
    return numbered


def aggregate(
    raw_findings: Iterable[RawFinding],
    catalog: RuleCatalog = RULE_CATALOG,
    *,
    files_discovered: int = 0,
    files_scanned: int = 0,
    skip_reasons: Mapping[SkipReason, int] | None = None,
) -> tuple[list[Vulnerability], ScanSummary]:
    """Turn raw findings into the ordered vulnerability list and run summary.

    Input order must be discovery order (file index, then in-file order) so the
    surviving duplicate is deterministic. Severity comes from the rule unchanged.
    Ids are numbered per rule after the final sort, so they do not depend on how
    files were scheduled.
    """
    unique = deduplicate(raw_findings)

    vulns = []
    for raw in unique:
        rule = catalog.rule(raw.rule_id)
        vulns.append(build_vulnerability(raw, rule, catalog.family(rule.family)))

    vulns.sort(key=_sort_key)
    vulns = _assign_ids(vulns)

    severity_counts = Counter(v.severity for v in vulns)
    family_counts = Counter(v.rule_family for v in vulns)
    counts_by_severity = {sev: severity_counts.get(sev, 0) for sev in SEVERITY_ORDER}
    skips = dict(skip_reasons or {})

    summary = ScanSummary(
        total_files_discovered=files_discovered,
        total_files_scanned=files_scanned,
        total_files_skipped=sum(skips.values()),
        skip_reasons=skips,
        total_vulnerabilities=len(vulns),
        counts_by_severity=counts_by_severity,
        counts_by_family={fam: family_counts.get(fam, 0) for fam in RuleFamily},
        risk_score=risk_score(counts_by_severity),
    )
    return vulns, summary


def filter_vulnerabilities(
    vulns: Iterable[Vulnerability],
    min_severity: Severity = Severity.INFO,
    min_confidence: float = 0.0,
) -> list[Vulnerability]:
    """The thresholded view of ``vulns``; order is preserved."""
    return [
        v for v in vulns
        if v.severity.at_least(min_severity) and v.confidence >= min_confidence
    ]
