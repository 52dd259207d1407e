"""Hardcoded credential patterns (CWE-798).

Rules are ordered most specific first: the family claims a line for the first rule
that matches it, so a provider-specific key never doubles up with the generic
assignment rules further down. Every rule exposes the secret value through the
named group ``secret`` so it can be redacted before leaving the evaluator.
"""

import regex

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import FamilySpec, LinePolicy, _pat

_F = RuleFamily.SECRETS
_CWE = ("CWE-798", "CWE-312")

_ROTATE = (
    "Revoke and rotate this credential immediately, purge it from version control "
    "history, and load it at runtime from the environment or a secrets manager."
)
_ENV = "Move this value to an environment variable or a secrets manager and rotate it."


def _secret(rule_id, severity, confidence, source, title, desc, remediation=_ROTATE, flags=0):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, remediation,
        cwe=_CWE, flags=flags, redact=True,
    )


RULES = (
    _secret(
        "SECRETS-001", Severity.CRITICAL, 0.95,
        r"(?P<secret>\b(?:AKIA|ASIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA)[0-9A-Z]{16}\b)",
        "AWS Access Key ID",
        "An AWS access key ID is hardcoded in source.",
    ),
    _secret(
        "SECRETS-002", Severity.CRITICAL, 0.90,
        r"aws_?secret_?access_?key[\"']?\s*[:=]\s*[\"']?(?P<secret>[A-Za-z0-9/+=]{40})",
        "AWS Secret Access Key",
        "An AWS secret access key is hardcoded in source.",
        flags=regex.IGNORECASE,
    ),
    _secret(
        "SECRETS-003", Severity.CRITICAL, 0.95,
        r"(?P<secret>\bgh[pousr]_[A-Za-z0-9]{36,255}\b)",
        "GitHub Token",
        "A GitHub personal access, OAuth or app token is hardcoded in source.",
    ),
    _secret(
        "SECRETS-004", Severity.CRITICAL, 0.95,
        r"(?P<secret>\bgithub_pat_[A-Za-z0-9_]{60,255})",
        "GitHub Fine-Grained Token",
        "A fine-grained GitHub personal access token is hardcoded in source.",
    ),
    _secret(
        "SECRETS-005", Severity.CRITICAL, 0.95,
        r"(?P<secret>\bsk-ant-[A-Za-z0-9_\-]{20,})",
        "Anthropic API Key",
        "An Anthropic API key is hardcoded in source.",
    ),
    _secret(
        "SECRETS-006", Severity.CRITICAL, 0.85,
        r"(?P<secret>\bsk-(?!ant-)(?:proj-)?[A-Za-z0-9_\-]{20,})",
        "OpenAI API Key",
        "An OpenAI-style secret key is hardcoded in source.",
    ),
    _secret(
        "SECRETS-007", Severity.CRITICAL, 0.95,
        r"(?P<secret>\b(?:sk|rk)_live_[0-9A-Za-z]{24,})",
        "Stripe Live Secret Key",
        "A Stripe live-mode secret or restricted key is hardcoded in source.",
    ),
    _secret(
        "SECRETS-008", Severity.CRITICAL, 0.95,
        r"(?P<secret>-----BEGIN (?:RSA |EC |DSA |OPENSSH |PGP |ENCRYPTED )?PRIVATE KEY(?: BLOCK)?-----)",
        "Private Key",
        "A private key block is embedded in source.",
        "Remove the key from the repository, treat it as compromised and issue a new key pair.",
    ),
    _secret(
        "SECRETS-009", Severity.HIGH, 0.90,
        r"(?P<secret>\bxox[abprs]-[0-9A-Za-z\-]{10,})",
        "Slack Token",
        "A Slack API token is hardcoded in source.",
    ),
    _secret(
        "SECRETS-010", Severity.HIGH, 0.85,
        r"(?P<secret>\bAIza[0-9A-Za-z_\-]{35})",
        "Google API Key",
        "A Google API key is hardcoded in source.",
    ),
    _secret(
        "SECRETS-011", Severity.HIGH, 0.85,
        r"\b(?:postgres(?:ql)?|mysql|mongodb(?:\+srv)?|redis|amqp)://[^\s:/@\"']+:(?P<secret>[^\s@\"']+)@",
        "Database URI With Credentials",
        "A connection string embeds a password.",
        _ENV,
    ),
    _secret(
        "SECRETS-012", Severity.MEDIUM, 0.70,
        r"(?P<secret>\beyJ[A-Za-z0-9_\-]{10,}\.eyJ[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]{10,})",
        "JSON Web Token",
        "A signed JWT is hardcoded in source and may grant access until it expires.",
        "Remove the token and issue tokens at runtime; invalidate the exposed one if it is long-lived.",
    ),
    _secret(
        "SECRETS-013", Severity.HIGH, 0.80,
        r"[\"']Authorization[\"']\s*:\s*[\"']Bearer\s+(?P<secret>[A-Za-z0-9_\-.=]{16,})[\"']",
        "Hardcoded Bearer Token",
        "An Authorization header carries a literal bearer token.",
        _ENV,
        flags=regex.IGNORECASE,
    ),
    _secret(
        "SECRETS-014", Severity.HIGH, 0.70,
        r"(?:api[_-]?key|apikey|api[_-]?secret|access[_-]?token|auth[_-]?token|client[_-]?secret)"
        r"[\"']?\s*[:=]\s*[\"'](?P<secret>[^\"'\s]{8,})[\"']",
        "Hardcoded API Key",
        "An API key or token is assigned a literal value.",
        _ENV,
        flags=regex.IGNORECASE,
    ),
    _secret(
        "SECRETS-015", Severity.HIGH, 0.60,
        r"(?:password|passwd|pwd|secret)[\"']?\s*[:=]\s*[\"'](?P<secret>[^\"'\s]{4,})[\"']",
        "Hardcoded Password",
        "A password or secret is assigned a literal value.",
        _ENV,
        flags=regex.IGNORECASE,
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact=(
        "Anyone with read access to the code or its history can use the credential "
        "to impersonate the application and reach the services it protects."
    ),
    line_policy=LinePolicy.FIRST_MATCH,
    comment_penalty=0.10,
    string_penalty=0.0,
)
