"""File scan unit: run every enabled rule family over one file's content."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from mcp_sentinel.models import ErrorKind, RawFinding, RuleFamily, ScanError, SkipReason
from mcp_sentinel.rules import RULE_CATALOG, LinePolicy, RuleCatalog
from mcp_sentinel.scanners.evaluator import DEFAULT_RULE_TIMEOUT_MS, LineIndex, evaluate

logger = logging.getLogger(__name__)

# Bytes inspected for NUL when sniffing binary content
BINARY_SNIFF_BYTES = 8192


@dataclass
class FileScanOutcome:
    """Everything one file contributed to a run."""
    file_path: str
    file_index: int = 0
    findings: list[RawFinding] = field(default_factory=list)
    errors: list[ScanError] = field(default_factory=list)
    skip_reason: SkipReason | None = None

    @property
    def scanned(self) -> bool:
        return self.skip_reason is None


def skipped(
    file_path: str,
    reason: SkipReason,
    kind: ErrorKind,
    message: str,
    file_index: int = 0,
) -> FileScanOutcome:
    """Build the outcome for a file that was not scanned."""
    logger.debug("Skipping file %s: %s", file_path, message)
    return FileScanOutcome(
        file_path=file_path,
        file_index=file_index,
        errors=[ScanError(kind=kind, file=file_path, message=message)],
        skip_reason=reason,
    )


def is_binary(content: bytes) -> bool:
    return b"\x00" in content[:BINARY_SNIFF_BYTES]


def scan_file(
    file_path: str,
    content: bytes | str,
    enabled_families: Iterable[RuleFamily] | None = None,
    *,
    catalog: RuleCatalog = RULE_CATALOG,
    max_file_size_bytes: int | None = None,
    rule_timeout_ms: int = DEFAULT_RULE_TIMEOUT_MS,
    context_lines: int = 2,
    file_index: int = 0,
) -> FileScanOutcome:
    """Scan one file's content with every enabled rule family.

    Oversized, binary, and undecodable content is skipped with a recorded reason
    rather than scanned partially. A failing or slow rule is recorded as an error
    and the remaining rules still run.

    Args:
        file_path: Display path recorded on findings.
        content: Raw bytes as read from disk, or already-decoded text.
        enabled_families: Families to run; None runs every family in the catalog.
        catalog: Rule catalog to evaluate.
        max_file_size_bytes: Skip content larger than this many bytes.
        rule_timeout_ms: Per-rule matching budget.
        context_lines: Lines of context kept around each finding.
        file_index: Discovery index of the file.
    """
    size = len(content.encode("utf-8")) if isinstance(content, str) else len(content)
    if max_file_size_bytes is not None and size > max_file_size_bytes:
        return skipped(
            file_path, SkipReason.TOO_LARGE, ErrorKind.FILE_TOO_LARGE,
            f"File too large ({size} bytes > {max_file_size_bytes})", file_index,
        )

    if isinstance(content, bytes):
        if is_binary(content):
            return skipped(
                file_path, SkipReason.BINARY, ErrorKind.BINARY_CONTENT,
                "Binary content", file_index,
            )
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            return skipped(
                file_path, SkipReason.ENCODING, ErrorKind.ENCODING_ERROR,
                f"Not valid UTF-8: {e.reason} at byte {e.start}", file_index,
            )
    else:
        text = content

    enabled = set(enabled_families) if enabled_families is not None else None
    outcome = FileScanOutcome(file_path=file_path, file_index=file_index)
    index = LineIndex(text)
    # Secrets never reach a snippet, whichever family reports the line
    index.mask(r for r in catalog.rules() if r.redact and r.applies_to(file_path))

    for spec in catalog.families:
        if enabled is not None and spec.family not in enabled:
            continue

        claimed: set[int] = set()
        family_hits = 0
        for rule in spec.rules:
            if not rule.applies_to(file_path):
                continue
            evaluation = evaluate(
                rule,
                index,
                file_path,
                time_budget_ms=rule_timeout_ms,
                context_lines=context_lines,
                skip_lines=claimed,
                file_index=file_index,
            )
            if evaluation.error:
                outcome.errors.append(evaluation.error)
            outcome.findings.extend(evaluation.findings)
            family_hits += len(evaluation.findings)
            if spec.line_policy == LinePolicy.FIRST_MATCH:
                claimed.update(f.line for f in evaluation.findings)

        if family_hits:
            logger.debug("%s rules found %d issues in %s", spec.family.value, family_hits, file_path)

    return outcome
