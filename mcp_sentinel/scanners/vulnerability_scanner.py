"""Scan orchestration: fan file scans out to a worker pool and merge the results."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from mcp_sentinel.aggregator import aggregate, filter_vulnerabilities
from mcp_sentinel.config import ScanSettings, settings as default_settings
from mcp_sentinel.models import ErrorKind, RawFinding, ScanError, ScanResult, SkipReason
from mcp_sentinel.rules import RULE_CATALOG, RuleCatalog
from mcp_sentinel.scanners.discovery import DiscoveredFile, discover_files
from mcp_sentinel.scanners.file_scan import FileScanOutcome, scan_file, skipped

logger = logging.getLogger(__name__)


def scan_discovered_file(
    file_index: int,
    discovered: DiscoveredFile,
    scan_settings: ScanSettings,
    catalog: RuleCatalog = RULE_CATALOG,
) -> FileScanOutcome:
    """Read one discovered file and run the file scan unit over it."""
    path = discovered.display_path
    if discovered.size > scan_settings.max_file_size_bytes:
        return skipped(
            path, SkipReason.TOO_LARGE, ErrorKind.FILE_TOO_LARGE,
            f"File too large ({discovered.size} bytes > {scan_settings.max_file_size_bytes})",
            file_index,
        )

    try:
        content = discovered.path.read_bytes()
    except OSError as e:
        return skipped(
            path, SkipReason.UNREADABLE, ErrorKind.FILE_UNREADABLE,
            f"Cannot read file: {e.strerror or e}", file_index,
        )

    logger.debug("Scanning file: %s", path)
    return scan_file(
        path,
        content,
        scan_settings.enabled_rule_families,
        catalog=catalog,
        max_file_size_bytes=scan_settings.max_file_size_bytes,
        rule_timeout_ms=scan_settings.rule_timeout_ms,
        context_lines=scan_settings.context_lines,
        file_index=file_index,
    )


async def run_scan(
    target: str | Path,
    scan_settings: ScanSettings | None = None,
    *,
    catalog: RuleCatalog = RULE_CATALOG,
    files: Sequence[DiscoveredFile] | None = None,
) -> ScanResult:
    """Scan ``target`` and return the complete, ordered report.

    Files are scanned concurrently on up to ``worker_count`` threads. Results are
    merged in discovery order, so output does not depend on completion order.
    When ``timeout_seconds`` elapses no further files are dispatched and the
    partial result carries a scan_timeout error.

    Args:
        target: Directory or single file to scan.
        scan_settings: Options for this run; defaults to the environment settings.
        catalog: Rule catalog to evaluate.
        files: Pre-discovered files; when omitted ``target`` is walked.

    Raises:
        FatalScanError: The target does not exist or cannot be listed.
    """
    scan_settings = scan_settings or default_settings
    started = time.monotonic()
    timestamp = datetime.now(timezone.utc)
    logger.info("Scanning: %s", target)

    discovery_errors: list[ScanError] = []
    if files is None:
        files = discover_files(
            target,
            include_patterns=scan_settings.include_patterns,
            exclude_patterns=scan_settings.exclude_patterns,
            errors=discovery_errors,
        )
    logger.info("Found %d files to scan", len(files))

    deadline = started + scan_settings.timeout_seconds if scan_settings.timeout_seconds else None
    sem = asyncio.Semaphore(scan_settings.worker_count)

    async def _scan_one(file_index: int, discovered: DiscoveredFile) -> FileScanOutcome | None:
        async with sem:
            if deadline is not None and time.monotonic() >= deadline:
                return None
            return await asyncio.to_thread(
                scan_discovered_file, file_index, discovered, scan_settings, catalog
            )

    outcomes = await asyncio.gather(*[_scan_one(i, f) for i, f in enumerate(files)])

    raw: list[RawFinding] = []
    errors: list[ScanError] = list(discovery_errors)
    skip_reasons: Counter[SkipReason] = Counter()
    scanned = 0
    not_dispatched = 0

    for outcome in outcomes:
        if outcome is None:
            not_dispatched += 1
            continue
        raw.extend(outcome.findings)
        errors.extend(outcome.errors)
        if outcome.scanned:
            scanned += 1
        else:
            skip_reasons[outcome.skip_reason] += 1

    if not_dispatched:
        skip_reasons[SkipReason.TIMEOUT] += not_dispatched
        errors.append(ScanError(
            kind=ErrorKind.SCAN_TIMEOUT,
            message=(
                f"Scan timed out after {scan_settings.timeout_seconds}s; "
                f"{not_dispatched} of {len(files)} files were not scanned"
            ),
        ))
        logger.warning("Scan timed out with %d files not scanned", not_dispatched)

    vulns, summary = aggregate(
        raw,
        catalog,
        files_discovered=len(files),
        files_scanned=scanned,
        skip_reasons=skip_reasons,
    )
    visible = filter_vulnerabilities(vulns, scan_settings.min_severity, scan_settings.min_confidence)
    duration_ms = int((time.monotonic() - started) * 1000)

    logger.info(
        "Scan complete: %d issues found in %dms", summary.total_vulnerabilities, duration_ms
    )

    return ScanResult(
        scan_id=str(uuid.uuid4()),
        timestamp=timestamp,
        target_path=str(target),
        summary=summary,
        vulnerabilities=tuple(visible),
        duration_ms=duration_ms,
        errors=tuple(errors),
    )


def scan_vulnerabilities(target: str | Path, scan_settings: ScanSettings | None = None) -> ScanResult:
    """Synchronous entry point around :func:`run_scan`."""
    return asyncio.run(run_scan(target, scan_settings))
