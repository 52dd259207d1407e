"""Path traversal patterns (CWE-22)."""

import regex

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import FamilySpec, LinePolicy, _pat

_F = RuleFamily.PATH_TRAVERSAL
_CWE = ("CWE-22", "CWE-23")

_CANONICALIZE = (
    "Validate and sanitize file paths: resolve them with os.path.realpath() or "
    "Path.resolve(), then check the result stays under the intended base directory."
)


def _trav(rule_id, severity, confidence, source, title, desc, flags=0):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, _CANONICALIZE,
        cwe=_CWE, flags=flags,
    )


RULES = (
    _trav(
        "PATH-TRAV-001", Severity.HIGH, 0.80,
        r"\b(?:open|send_file|send_from_directory|sendFile|readFile(?:Sync)?|createReadStream|"
        r"file_get_contents|fopen)\s*\([^)]*(?:request\.|req\.(?:params|query|body)|params\[|\$_(?:GET|POST|REQUEST))",
        "File Access With Request-Controlled Path",
        "A file is opened using a path taken directly from the request.",
    ),
    _trav(
        "PATH-TRAV-002", Severity.HIGH, 0.75,
        r"\bopen\s*\([^)]*\+[^)]*\)",
        "open() With Concatenated Path",
        "A file path passed to open() is built by string concatenation.",
    ),
    _trav(
        "PATH-TRAV-003", Severity.MEDIUM, 0.60,
        r"\bos\.path\.join\s*\([^)]*(?:request\.|user_input|params\[)",
        "Path Join With Untrusted Component",
        "os.path.join() receives request data; an absolute or dotted component escapes the base path.",
    ),
    _trav(
        "PATH-TRAV-004", Severity.HIGH, 0.75,
        r"%2e%2e(?:/|%2f|%5c)",
        "Encoded Traversal Sequence",
        "A URL-encoded directory traversal sequence is present.",
        flags=regex.IGNORECASE,
    ),
    _trav(
        "PATH-TRAV-005", Severity.HIGH, 0.75,
        r"\.\.\.\.//",
        "Filter-Evasion Traversal Sequence",
        "A doubled traversal sequence designed to survive naive '../' stripping is present.",
    ),
    _trav(
        "PATH-TRAV-006", Severity.HIGH, 0.75,
        r"\.\./",
        "Directory Traversal Sequence",
        "A '../' traversal sequence is present.",
    ),
    _trav(
        "PATH-TRAV-007", Severity.HIGH, 0.75,
        r"\.\.\\",
        "Windows Directory Traversal Sequence",
        "A '..\\' traversal sequence is present.",
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact="Attackers can access files outside the intended directory.",
    line_policy=LinePolicy.FIRST_MATCH,
    comment_penalty=0.30,
    string_penalty=0.0,
)
