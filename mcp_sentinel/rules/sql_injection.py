"""SQL injection patterns (CWE-89)."""

import regex

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import FamilySpec, LinePolicy, _pat

_F = RuleFamily.SQL_INJECTION
_CWE = ("CWE-89",)

_PARAMETERIZE = "Use parameterized queries or prepared statements; never build SQL from strings."


def _sql(rule_id, severity, confidence, source, title, desc, flags=0):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, _PARAMETERIZE,
        cwe=_CWE, flags=flags,
    )


RULES = (
    _sql(
        "SQL-INJ-001", Severity.CRITICAL, 0.85,
        r"\bexecute(?:many)?\s*\(\s*f[\"'][^\"']*\{[^}]*\}",
        "SQL Built With f-string",
        "A query passed to execute() is an f-string with interpolated values.",
    ),
    _sql(
        "SQL-INJ-002", Severity.CRITICAL, 0.85,
        r"\bexecute(?:many)?\s*\([^)]*\+[^)]*\)",
        "SQL Built With Concatenation",
        "A query passed to execute() is built by string concatenation.",
    ),
    _sql(
        "SQL-INJ-003", Severity.CRITICAL, 0.85,
        r"\bexecute(?:many)?\s*\(\s*[\"'][^\"']*[\"']\s*%\s*",
        "SQL Built With %-Formatting",
        "A query passed to execute() is formatted with the % operator instead of bound parameters.",
    ),
    _sql(
        "SQL-INJ-004", Severity.CRITICAL, 0.85,
        r"\bexecute(?:many)?\s*\(\s*[\"'][^\"']*[\"']\s*\.format\s*\(",
        "SQL Built With str.format()",
        "A query passed to execute() is built with str.format().",
    ),
    _sql(
        "SQL-INJ-005", Severity.CRITICAL, 0.85,
        r"\.raw\s*\([^)]*\+[^)]*\)",
        "Raw ORM Query With Concatenation",
        "A raw ORM query is built by string concatenation.",
    ),
    _sql(
        "SQL-INJ-006", Severity.CRITICAL, 0.85,
        r"\bquery\s*\([^)]*\+[^)]*\)",
        "query() With Concatenation",
        "A query() call receives a concatenated string.",
    ),
    _sql(
        "SQL-INJ-007", Severity.CRITICAL, 0.85,
        r"\b(?:query|execute|raw)\s*\(\s*`[^`]*\$\{",
        "SQL Built With Template Literal",
        "A query is built from a JavaScript template literal with interpolation.",
    ),
    _sql(
        "SQL-INJ-008", Severity.HIGH, 0.65,
        r"\bf[\"'](?:SELECT|INSERT\s+INTO|UPDATE|DELETE\s+FROM)\b[^\"']*\{",
        "SQL Statement In f-string",
        "An SQL statement is assembled in an f-string.",
        flags=regex.IGNORECASE,
    ),
    _sql(
        "SQL-INJ-009", Severity.HIGH, 0.60,
        r"[\"']\s*(?:SELECT|INSERT\s+INTO|UPDATE|DELETE\s+FROM)\b[^\"']*[\"']\s*\+\s*\w",
        "SQL Statement Concatenation",
        "An SQL statement literal is concatenated with a variable.",
        flags=regex.IGNORECASE,
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact="Database compromise, data theft, and authentication bypass.",
    line_policy=LinePolicy.FIRST_MATCH,
    comment_penalty=0.40,
    string_penalty=0.0,
)
