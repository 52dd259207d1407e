"""Shared Pydantic models for mcp-sentinel."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field


# --- Enums ---

class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Ordinal rank, higher is more severe."""
        return _SEVERITY_RANK[self]

    def at_least(self, other: Severity) -> bool:
        return self.rank >= other.rank


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
    Severity.INFO: 0,
}

# Most severe first
SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)


class RuleFamily(str, Enum):
    SECRETS = "secrets"
    COMMAND_INJECTION = "command_injection"
    SENSITIVE_FILE_ACCESS = "sensitive_file_access"
    TOOL_POISONING = "tool_poisoning"
    PROMPT_INJECTION = "prompt_injection"
    CODE_INJECTION = "code_injection"
    DESERIALIZATION = "deserialization"
    PATH_TRAVERSAL = "path_traversal"
    SQL_INJECTION = "sql_injection"
    SSRF = "ssrf"


class SkipReason(str, Enum):
    TOO_LARGE = "too_large"
    BINARY = "binary"
    ENCODING = "encoding"
    UNREADABLE = "unreadable"
    TIMEOUT = "timeout"


class ErrorKind(str, Enum):
    FILE_UNREADABLE = "file_unreadable"
    BINARY_CONTENT = "binary_content"
    FILE_TOO_LARGE = "file_too_large"
    ENCODING_ERROR = "encoding_error"
    RULE_TIMEOUT = "rule_timeout"
    RULE_ERROR = "rule_error"
    SCAN_TIMEOUT = "scan_timeout"


class LexicalContext(str, Enum):
    CODE = "code"
    COMMENT = "comment"
    STRING = "string"


# --- Findings ---

class Location(BaseModel):
    file: str
    line: int = Field(ge=1)
    column: int = Field(default=1, ge=1)

    model_config = {"frozen": True}


class RawFinding(BaseModel):
    """One (file, rule) match before aggregation. Secret material is already redacted."""
    rule_id: str
    file_path: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    matched_text: str
    surrounding_context: str = ""
    line_text: str = ""
    lexical_context: LexicalContext = LexicalContext.CODE
    file_index: int = 0

    model_config = {"frozen": True}


class Vulnerability(BaseModel):
    """An aggregated, externally visible finding."""
    id: str
    rule_id: str
    rule_family: RuleFamily
    severity: Severity
    confidence: float = Field(ge=0.0, le=1.0)
    location: Location
    title: str
    description: str
    impact: str = ""
    remediation: str = ""
    code_snippet: str = ""
    evidence: dict[str, str] = {}

    model_config = {"frozen": True}


class ScanError(BaseModel):
    """A non-fatal problem recorded during a run."""
    kind: ErrorKind
    file: str = ""
    rule_id: str | None = None
    message: str = ""

    model_config = {"frozen": True}


# --- Report ---

class ScanSummary(BaseModel):
    total_files_discovered: int = 0
    total_files_scanned: int = 0
    total_files_skipped: int = 0
    skip_reasons: dict[SkipReason, int] = {}
    total_vulnerabilities: int = 0
    counts_by_severity: dict[Severity, int] = {}
    counts_by_family: dict[RuleFamily, int] = {}
    risk_score: int = Field(default=0, ge=0, le=100)

    model_config = {"frozen": True}


class ScanResult(BaseModel):
    """Top-level report for one scan invocation.

    ``vulnerabilities`` is the view filtered by the run's severity and confidence
    thresholds; ``summary`` always reflects the unfiltered totals.
    """
    scan_id: str
    timestamp: datetime
    target_path: str
    summary: ScanSummary
    vulnerabilities: tuple[Vulnerability, ...] = ()
    duration_ms: int = 0
    errors: tuple[ScanError, ...] = ()

    model_config = {"frozen": True}

    @property
    def duration(self) -> timedelta:
        return timedelta(milliseconds=self.duration_ms)

    def has_issues_at_level(self, threshold: Severity) -> bool:
        """True if any finding (unfiltered) is at or above ``threshold``."""
        return any(
            count > 0 and severity.at_least(threshold)
            for severity, count in self.summary.counts_by_severity.items()
        )
