"""Rule evaluation: apply one compiled rule to one file's text."""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

import regex

from mcp_sentinel.models import ErrorKind, LexicalContext, RawFinding, ScanError
from mcp_sentinel.rules.base import Rule

logger = logging.getLogger(__name__)

DEFAULT_RULE_TIMEOUT_MS = 100
MAX_MATCHED_TEXT = 200

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

# Line prefixes treated as a full-line comment across common languages
_COMMENT_PREFIXES = ("#", "//", "/*", "*", "--", "<!--")
_QUOTES = "\"'`"


class LineIndex:
    """A file's text split on its own line breaks (\\r\\n, \\r or \\n).

    Built once per file and shared by every rule evaluated against it.
    """

    def __init__(self, text: str):
        self.text = text
        self.lines: list[str] = _LINE_BREAK.split(text)
        if len(self.lines) > 1 and self.lines[-1] == "":
            # A trailing newline does not start another line
            self.lines.pop()
        # Same lengths as ``lines``, with secrets masked; used for every snippet
        self.display_lines: list[str] = list(self.lines)
        self._masked_by: set[str] = set()

    def __len__(self) -> int:
        return len(self.lines)

    def line(self, line_no: int) -> str:
        """Get a line by 1-based number, or "" when out of range."""
        if 1 <= line_no <= len(self.lines):
            return self.lines[line_no - 1]
        return ""

    def context(self, line_no: int, radius: int) -> str:
        """Lines ``line_no - radius`` through ``line_no + radius`` joined with \\n."""
        start = max(1, line_no - radius)
        end = min(len(self.lines), line_no + radius)
        return "\n".join(self.display_lines[start - 1:end])

    def is_masked_by(self, rule: Rule) -> bool:
        return rule.id in self._masked_by

    def mask(self, rules: Iterable[Rule]) -> None:
        """Mask every match of ``rules`` in the display lines. Applied once per rule."""
        pending = [r for r in rules if r.id not in self._masked_by]
        if not pending:
            return
        self._masked_by.update(r.id for r in pending)
        self.display_lines = [mask_secrets(line, pending) if line else line for line in self.display_lines]


def redact_secret(value: str) -> str:
    """Redact a secret value, showing only the first 4 and last 4 chars."""
    if len(value) <= 8:
        return "*" * len(value)
    masked = f"{value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"
    if masked == value:
        return "*" * len(value)
    return masked


def _mask_match(match: regex.Match) -> str:
    text = match.group(0)
    if "secret" not in match.re.groupindex or match.start("secret") < 0:
        return redact_secret(text)
    start = match.start("secret") - match.start()
    end = match.end("secret") - match.start()
    return text[:start] + redact_secret(text[start:end]) + text[end:]


def mask_secrets(line: str, rules: Iterable[Rule]) -> str:
    """Redact every match of each rule in ``line``. The result has the same length."""
    for rule in rules:
        line = rule.pattern.sub(_mask_match, line)
    return line


def classify_position(line: str, pos: int) -> LexicalContext:
    """Guess whether ``line[pos]`` sits in code, a comment, or a string literal.

    Purely lexical: tracks quote state from the start of the line and stops at the
    first ``#`` or ``//`` outside quotes. No multi-line comment or string tracking.
    """
    if line.lstrip().startswith(_COMMENT_PREFIXES):
        return LexicalContext.COMMENT

    quote: str | None = None
    i = 0
    while i < pos:
        ch = line[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == "#" or line.startswith("//", i):
            return LexicalContext.COMMENT
        i += 1

    return LexicalContext.STRING if quote else LexicalContext.CODE


def _bound(text: str, limit: int = MAX_MATCHED_TEXT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


@dataclass
class RuleEvaluation:
    """Outcome of one rule against one file."""
    rule_id: str
    findings: list[RawFinding] = field(default_factory=list)
    error: ScanError | None = None


def _make_finding(
    rule: Rule,
    index: LineIndex,
    file_path: str,
    line_no: int,
    line: str,
    match: regex.Match,
    context_lines: int,
    file_index: int,
) -> RawFinding:
    display = index.display_lines[line_no - 1]
    return RawFinding(
        rule_id=rule.id,
        file_path=file_path,
        line=line_no,
        column=match.start() + 1,
        matched_text=_bound(display[match.start():match.end()]),
        surrounding_context=index.context(line_no, context_lines),
        line_text=display,
        lexical_context=classify_position(line, match.start()),
        file_index=file_index,
    )


def _timed_out(rule: Rule, file_path: str, time_budget_ms: int) -> ScanError:
    logger.warning("Rule %s exceeded its %dms budget on %s", rule.id, time_budget_ms, file_path)
    return ScanError(
        kind=ErrorKind.RULE_TIMEOUT,
        file=file_path,
        rule_id=rule.id,
        message=f"Rule evaluation exceeded {time_budget_ms}ms",
    )


def evaluate(
    rule: Rule,
    text: str | LineIndex,
    file_path: str = "",
    *,
    time_budget_ms: int = DEFAULT_RULE_TIMEOUT_MS,
    context_lines: int = 2,
    skip_lines: frozenset[int] | set[int] = frozenset(),
    file_index: int = 0,
) -> RuleEvaluation:
    """Apply ``rule`` to every line of ``text``.

    Never raises for any input. Each match call gets whatever remains of
    ``time_budget_ms``, so a single pathological line cannot overrun it. On a
    timeout or an internal failure the evaluation reports zero findings and
    carries a ScanError instead.

    Snippets and context come from the index's display lines. A redacting rule
    masks its own matches there if the caller has not already done so.

    Args:
        rule: The compiled rule to run.
        text: File content, or a LineIndex already built for it.
        file_path: Path recorded on findings and errors.
        time_budget_ms: Wall-clock budget for this rule on this file.
        context_lines: Lines of surrounding context kept on each finding.
        skip_lines: 1-based line numbers this rule must not report on.
        file_index: Discovery index of the file, carried through for ordering.
    """
    index = text if isinstance(text, LineIndex) else LineIndex(text)
    result = RuleEvaluation(rule_id=rule.id)
    deadline = time.monotonic() + time_budget_ms / 1000.0

    try:
        if rule.redact and not index.is_masked_by(rule):
            index.mask((rule,))
        for line_no, line in enumerate(index.lines, start=1):
            if line_no in skip_lines or not line:
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError
            for match in rule.pattern.finditer(line, timeout=remaining):
                result.findings.append(
                    _make_finding(rule, index, file_path, line_no, line, match, context_lines, file_index)
                )
    except TimeoutError:
        result.findings = []
        result.error = _timed_out(rule, file_path, time_budget_ms)
    except Exception as e:
        logger.warning("Rule %s failed on %s: %s", rule.id, file_path, e)
        result.findings = []
        result.error = ScanError(
            kind=ErrorKind.RULE_ERROR,
            file=file_path,
            rule_id=rule.id,
            message=f"Rule evaluation failed: {e}",
        )

    return result
