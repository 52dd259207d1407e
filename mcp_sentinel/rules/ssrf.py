"""Server-side request forgery patterns (CWE-918)."""

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import FamilySpec, LinePolicy, _pat

_F = RuleFamily.SSRF
_CWE = ("CWE-918",)

_ALLOWLIST = (
    "Validate URLs against an allowlist, block internal and link-local addresses, "
    "and use a dedicated HTTP client with restricted redirects."
)


def _ssrf(rule_id, severity, confidence, source, title, desc, language="any"):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, _ALLOWLIST,
        cwe=_CWE, language=language,
    )


RULES = (
    _ssrf(
        "SSRF-001", Severity.HIGH, 0.70,
        r"\brequests\.(?:get|post|put|delete|patch|head|request)\s*\([^)]*\+[^)]*\)",
        "requests Call With Concatenated URL",
        "An outbound request URL is built by concatenation.",
        "Python",
    ),
    _ssrf(
        "SSRF-002", Severity.HIGH, 0.70,
        r"\brequests\.(?:get|post|put|delete|patch|head|request)\s*\(\s*f[\"'][^\"']*\{",
        "requests Call With f-string URL",
        "An outbound request URL is an f-string with interpolated values.",
        "Python",
    ),
    _ssrf(
        "SSRF-003", Severity.HIGH, 0.70,
        r"\bhttpx\.(?:get|post|put|delete|patch|head|request|stream)\s*\((?:[^)]*\+|\s*f[\"'][^\"']*\{)",
        "httpx Call With Dynamic URL",
        "An outbound httpx request URL is built from dynamic parts.",
        "Python",
    ),
    _ssrf(
        "SSRF-004", Severity.HIGH, 0.70,
        r"\burllib\.request\.urlopen\s*\((?:[^)]*\+|\s*f[\"'][^\"']*\{)",
        "urlopen With Dynamic URL",
        "urllib.request.urlopen() receives a dynamically built URL.",
        "Python",
    ),
    _ssrf(
        "SSRF-005", Severity.HIGH, 0.70,
        r"\bfetch\s*\((?:[^)]*\+[^)]*\)|\s*`[^`]*\$\{)",
        "fetch With Dynamic URL",
        "fetch() receives a URL built from concatenation or a template literal.",
        "JavaScript/TypeScript",
    ),
    _ssrf(
        "SSRF-006", Severity.HIGH, 0.70,
        r"\baxios\.(?:get|post|put|delete|request)\s*\((?:[^)]*\+|\s*`[^`]*\$\{)",
        "axios Call With Dynamic URL",
        "An axios request URL is built from dynamic parts.",
        "JavaScript/TypeScript",
    ),
    _ssrf(
        "SSRF-007", Severity.HIGH, 0.70,
        r"\bhttps?\.(?:get|request)\s*\([^)]*\+[^)]*\)",
        "Node http Request With Concatenated URL",
        "A Node http/https request URL is built by concatenation.",
        "JavaScript/TypeScript",
    ),
    _ssrf(
        "SSRF-008", Severity.HIGH, 0.60,
        r"(?:169\.254\.169\.254|metadata\.google\.internal|100\.100\.100\.200)",
        "Cloud Metadata Endpoint",
        "Code references a cloud instance metadata endpoint, a common SSRF target.",
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact="Attackers can make the server issue requests to internal or external resources.",
    line_policy=LinePolicy.FIRST_MATCH,
    comment_penalty=0.30,
    string_penalty=0.0,
)
