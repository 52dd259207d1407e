"""References to credential stores and other sensitive local files (CWE-552, CWE-200)."""

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import FamilySpec, _pat

_F = RuleFamily.SENSITIVE_FILE_ACCESS
_CWE = ("CWE-552", "CWE-200")

_SCOPE = (
    "Remove the reference, or confine file access to an explicit allowlisted "
    "directory and reject paths that resolve outside it."
)


def _file(rule_id, severity, confidence, source, title, desc, remediation=_SCOPE):
    return _pat(rule_id, _F, severity, confidence, source, title, desc, remediation, cwe=_CWE)


RULES = (
    _file(
        "SENS-FILE-001", Severity.CRITICAL, 0.85,
        r"\.ssh/(?:id_(?:rsa|dsa|ecdsa|ed25519)|identity)\b",
        "SSH Private Key Access",
        "Code references an SSH private key file.",
    ),
    _file(
        "SENS-FILE-002", Severity.HIGH, 0.75,
        r"\.ssh/(?:authorized_keys|known_hosts|config)\b",
        "SSH Configuration Access",
        "Code references SSH configuration or trust files.",
    ),
    _file(
        "SENS-FILE-003", Severity.CRITICAL, 0.85,
        r"\.aws/(?:credentials|config)\b",
        "AWS Credentials File Access",
        "Code references the local AWS credentials store.",
    ),
    _file(
        "SENS-FILE-004", Severity.CRITICAL, 0.80,
        r"/etc/(?:shadow|gshadow|sudoers)\b",
        "System Password Database Access",
        "Code references a privileged system authentication file.",
    ),
    _file(
        "SENS-FILE-005", Severity.MEDIUM, 0.60,
        r"/etc/passwd\b",
        "/etc/passwd Access",
        "Code references the system account list.",
    ),
    _file(
        "SENS-FILE-006", Severity.HIGH, 0.80,
        r"(?:\.kube/config\b|\.docker/config\.json|\.config/gcloud/|\.azure/(?:accessTokens|msal_token_cache)|"
        r"\.netrc\b|\.pgpass\b|\.git-credentials\b)",
        "Cloud or Tool Credential File Access",
        "Code references a credential file used by a cloud CLI or developer tool.",
    ),
    _file(
        "SENS-FILE-007", Severity.HIGH, 0.70,
        r"\b(?:open|readFile(?:Sync)?|read_text|load_dotenv|file_get_contents)\s*\([^)]*[\"'][^\"']*\.env[\"']",
        "Environment File Read",
        "Code reads a .env file, which typically holds secrets.",
        "Only load .env files at process start from a trusted location; never expose their contents.",
    ),
    _file(
        "SENS-FILE-008", Severity.MEDIUM, 0.65,
        r"(?:Login Data|cookies\.sqlite|key4\.db|logins\.json)",
        "Browser Credential Store Access",
        "Code references a browser password or cookie database.",
    ),
    _file(
        "SENS-FILE-009", Severity.HIGH, 0.75,
        r"(?:Library/Keychains|\.gnupg/|wallet\.dat|\.ethereum/keystore|\.bitcoin/)",
        "Keychain or Wallet Access",
        "Code references an OS keychain, GnuPG keyring or cryptocurrency wallet.",
    ),
    _file(
        "SENS-FILE-010", Severity.HIGH, 0.75,
        r"/proc/(?:self|\d+)/environ\b",
        "Process Environment Read",
        "Code reads another process's environment, which commonly holds secrets.",
    ),
    _file(
        "SENS-FILE-011", Severity.HIGH, 0.70,
        r"(?:claude_desktop_config\.json|\.cursor/mcp\.json|\.mcp\.json)",
        "MCP Client Configuration Access",
        "Code references an MCP client configuration, which can hold server credentials.",
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact=(
        "Reading these files exposes credentials or account data that let an "
        "attacker pivot to other systems."
    ),
    comment_penalty=0.30,
    string_penalty=0.0,
)
