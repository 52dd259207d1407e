"""Dynamic code execution patterns (CWE-94, CWE-95).

Covers Python eval/exec/compile/__import__, the JavaScript Function constructor and
Node's vm module, Ruby *_eval, and PHP assert()/preg_replace /e.
"""

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import JS, PHP, PY, RB, FamilySpec, _pat

_F = RuleFamily.CODE_INJECTION
_CWE = ("CWE-94", "CWE-95")

_NEVER_EVAL = (
    "Never pass untrusted input to {title}. Use a safe alternative such as "
    "ast.literal_eval() or a JSON parser, validate input against an allowlist of "
    "operations, and review the security guidance for {language}."
)


def _code(rule_id, severity, source, title, desc, language, extensions, confidence=0.90):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, _NEVER_EVAL,
        cwe=_CWE, language=language, extensions=extensions,
    )


RULES = (
    _code(
        "CODE-INJ-001", Severity.CRITICAL,
        r"(?<![.\w])eval\s*\(",
        "eval()",
        "Dynamic code evaluation using eval() detected.",
        "Python/JavaScript/Ruby/PHP", PY + JS + RB + PHP,
    ),
    _code(
        "CODE-INJ-002", Severity.CRITICAL,
        r"(?<![.\w])exec\s*\(",
        "exec()",
        "Dynamic code execution using exec() detected.",
        "Python", PY,
    ),
    _code(
        "CODE-INJ-003", Severity.HIGH,
        r"(?<![.\w])compile\s*\(",
        "compile()",
        "Dynamic code compilation using compile() detected.",
        "Python", PY,
    ),
    _code(
        "CODE-INJ-004", Severity.HIGH,
        r"\b__import__\s*\(",
        "__import__()",
        "Dynamic module import using __import__() detected.",
        "Python", PY,
    ),
    _code(
        "CODE-INJ-005", Severity.CRITICAL,
        r"getattr\s*\([^)]*,\s*['\"](?:eval|exec)['\"]\s*\)",
        "eval via getattr",
        "Obfuscated eval()/exec() lookup via getattr detected.",
        "Python", PY,
    ),
    _code(
        "CODE-INJ-006", Severity.CRITICAL,
        r"\bexecfile\s*\(",
        "execfile()",
        "Dynamic file execution using execfile() detected (Python 2).",
        "Python", PY,
    ),
    _code(
        "CODE-INJ-007", Severity.HIGH,
        r"\bcode\.Interactive(?:Interpreter|Console)\b",
        "code.InteractiveInterpreter",
        "An interactive code interpreter is instantiated.",
        "Python", PY,
    ),
    _code(
        "CODE-INJ-008", Severity.CRITICAL,
        r"\bnew\s+Function\s*\(",
        "Function() constructor",
        "Dynamic function creation using the Function() constructor detected.",
        "JavaScript/TypeScript", JS,
    ),
    _code(
        "CODE-INJ-009", Severity.CRITICAL,
        r"(?<!new\s)\bFunction\s*\([^)]*\)\s*\(",
        "Function() without new",
        "Dynamic function creation and immediate invocation via Function() detected.",
        "JavaScript/TypeScript", JS,
    ),
    _code(
        "CODE-INJ-010", Severity.CRITICAL,
        r"\bvm\.runInNewContext\s*\(",
        "vm.runInNewContext",
        "Code execution in a new context using vm.runInNewContext detected.",
        "JavaScript/TypeScript", JS,
    ),
    _code(
        "CODE-INJ-011", Severity.CRITICAL,
        r"\bvm\.runInThisContext\s*\(",
        "vm.runInThisContext",
        "Code execution in the current context using vm.runInThisContext detected.",
        "JavaScript/TypeScript", JS,
    ),
    _code(
        "CODE-INJ-012", Severity.CRITICAL,
        r"\bvm\.runInContext\s*\(",
        "vm.runInContext",
        "Code execution using vm.runInContext detected.",
        "JavaScript/TypeScript", JS,
    ),
    _code(
        "CODE-INJ-013", Severity.HIGH,
        r"\bset(?:Timeout|Interval)\s*\(\s*[\"'`]",
        "setTimeout/setInterval with string",
        "A timer is scheduled with a code string, which is evaluated like eval().",
        "JavaScript/TypeScript", JS,
        confidence=0.75,
    ),
    _code(
        "CODE-INJ-014", Severity.CRITICAL,
        r"\.instance_eval\s*\(",
        "instance_eval",
        "Dynamic code evaluation using instance_eval detected.",
        "Ruby", RB,
    ),
    _code(
        "CODE-INJ-015", Severity.CRITICAL,
        r"\.class_eval\s*\(",
        "class_eval",
        "Dynamic code evaluation using class_eval detected.",
        "Ruby", RB,
    ),
    _code(
        "CODE-INJ-016", Severity.CRITICAL,
        r"\.module_eval\s*\(",
        "module_eval",
        "Dynamic code evaluation using module_eval detected.",
        "Ruby", RB,
    ),
    _code(
        "CODE-INJ-017", Severity.CRITICAL,
        r"\bassert\s*\(\s*['\"]",
        "assert() with code string",
        "Code execution using assert() with a string argument detected.",
        "PHP", PHP,
    ),
    _code(
        "CODE-INJ-018", Severity.CRITICAL,
        r"\bpreg_replace\s*\(\s*['\"]/[^'\"]*/[a-zA-Z]*e[a-zA-Z]*['\"]",
        "preg_replace /e modifier",
        "Code execution using preg_replace with the /e modifier detected.",
        "PHP", PHP,
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact=(
        "Attackers can execute arbitrary code on the server, leading to complete "
        "system compromise, data theft, or service disruption."
    ),
    comment_penalty=0.50,
    string_penalty=0.30,
)
