"""Insecure deserialization patterns (CWE-502)."""

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import JAVA, JS, PHP, PY, RB, FamilySpec, _pat

_F = RuleFamily.DESERIALIZATION
_CWE = ("CWE-502",)

_SAFE_FORMAT = (
    "For {language}: use a data-only format such as JSON, or apply strict type "
    "checking and an allowlist of permitted classes before deserializing."
)


def _deser(rule_id, severity, source, title, desc, language, extensions, confidence=0.88, remediation=_SAFE_FORMAT):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, remediation,
        cwe=_CWE, language=language, extensions=extensions,
    )


RULES = (
    _deser(
        "DESER-001", Severity.CRITICAL,
        r"\b(?:c?[Pp]ickle|_pickle|dill|cloudpickle)\.(?:loads?|Unpickler)\s*\(",
        "pickle deserialization",
        "Unsafe deserialization using pickle detected.",
        "Python", PY,
    ),
    _deser(
        "DESER-002", Severity.CRITICAL,
        r"\byaml\.load\s*\([^,)]*\)",
        "yaml.load() without SafeLoader",
        "Unsafe YAML deserialization without SafeLoader detected.",
        "Python", PY,
        remediation="Use yaml.safe_load() or pass Loader=yaml.SafeLoader.",
    ),
    _deser(
        "DESER-003", Severity.HIGH,
        r"\byaml\.(?:unsafe_load(?:_all)?\s*\(|load(?:_all)?\s*\([^)]*Loader\s*=\s*(?:yaml\.)?(?:Unsafe|Full)?Loader\b)",
        "yaml.load() with unsafe Loader",
        "YAML is loaded with a loader that can construct arbitrary Python objects.",
        "Python", PY,
        remediation="Use yaml.safe_load() or pass Loader=yaml.SafeLoader.",
    ),
    _deser(
        "DESER-004", Severity.HIGH,
        r"\bmarshal\.loads?\s*\(",
        "marshal deserialization",
        "Unsafe deserialization using marshal detected.",
        "Python", PY,
    ),
    _deser(
        "DESER-005", Severity.MEDIUM,
        r"\bshelve\.open\s*\(",
        "shelve usage",
        "shelve uses pickle internally; opening an untrusted shelf is unsafe deserialization.",
        "Python", PY,
    ),
    _deser(
        "DESER-006", Severity.HIGH,
        r"\bjsonpickle\.decode\s*\(",
        "jsonpickle.decode()",
        "jsonpickle can instantiate arbitrary classes while decoding.",
        "Python", PY,
    ),
    _deser(
        "DESER-007", Severity.MEDIUM,
        r"\btorch\.load\s*\((?![^)]*weights_only\s*=\s*True)",
        "torch.load() without weights_only",
        "torch.load() unpickles the checkpoint unless weights_only=True is set.",
        "Python", PY,
        confidence=0.60,
        remediation="Pass weights_only=True or load checkpoints only from trusted sources.",
    ),
    _deser(
        "DESER-008", Severity.CRITICAL,
        r"ObjectInputStream.*\.readObject\s*\(",
        "ObjectInputStream.readObject()",
        "Unsafe Java object deserialization detected.",
        "Java", JAVA,
    ),
    _deser(
        "DESER-009", Severity.CRITICAL,
        r"(?<![.\w])unserialize\s*\(",
        "unserialize()",
        "Unsafe PHP deserialization detected.",
        "PHP", PHP,
    ),
    _deser(
        "DESER-010", Severity.CRITICAL,
        r"\bMarshal\.load\s*\(",
        "Marshal.load()",
        "Unsafe Ruby deserialization using Marshal detected.",
        "Ruby", RB,
    ),
    _deser(
        "DESER-011", Severity.HIGH,
        r"\b(?:YAML|Psych)\.(?:unsafe_)?load\s*\(",
        "YAML.load()",
        "Ruby YAML.load can instantiate arbitrary objects on older Psych versions.",
        "Ruby", RB,
        remediation="Use YAML.safe_load with an explicit permitted_classes list.",
    ),
    _deser(
        "DESER-012", Severity.CRITICAL,
        r"\bserialize\.unserialize\s*\(",
        "node-serialize unserialize()",
        "Unsafe deserialization using node-serialize detected.",
        "JavaScript/TypeScript", JS,
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact=(
        "Attackers can craft malicious serialized objects that execute arbitrary "
        "code when deserialized, leading to full system compromise."
    ),
    comment_penalty=0.40,
    string_penalty=0.25,
)
