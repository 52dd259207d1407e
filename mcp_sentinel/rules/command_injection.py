"""OS command injection patterns (CWE-78).

Only shell-interpreted invocations are flagged. Argument-list process calls such as
``subprocess.run(["ls", path])`` never match.
"""

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import GO, JAVA, JS, PHP, PY, RB, FamilySpec, _pat

_F = RuleFamily.COMMAND_INJECTION
_CWE = ("CWE-78", "CWE-77")

_ARGV = (
    "Invoke the program with an argument list and shell=False, validate every "
    "argument against an allowlist, and never interpolate untrusted input into a "
    "command string ({language})."
)


def _cmd(rule_id, severity, confidence, source, title, desc, language, extensions, remediation=_ARGV):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, remediation,
        cwe=_CWE, language=language, extensions=extensions,
    )


RULES = (
    _cmd(
        "CMD-INJ-001", Severity.CRITICAL, 0.85,
        r"\bos\.system\s*\(",
        "os.system() Call",
        "os.system() passes its argument to the system shell.",
        "Python", PY,
    ),
    _cmd(
        "CMD-INJ-002", Severity.HIGH, 0.80,
        r"\bos\.popen[234]?\s*\(",
        "os.popen() Call",
        "os.popen() runs its argument through the system shell.",
        "Python", PY,
    ),
    _cmd(
        "CMD-INJ-003", Severity.CRITICAL, 0.90,
        r"\bsubprocess\.(?:call|run|Popen|check_output|check_call)\s*\([^#\n]*\bshell\s*=\s*True",
        "subprocess With shell=True",
        "A subprocess call is made with shell=True, so the command string is shell-interpreted.",
        "Python", PY,
    ),
    _cmd(
        "CMD-INJ-004", Severity.HIGH, 0.80,
        r"\b(?:subprocess|commands)\.(?:getoutput|getstatusoutput)\s*\(",
        "Shell Output Helper",
        "getoutput()/getstatusoutput() always run their argument through the shell.",
        "Python", PY,
    ),
    _cmd(
        "CMD-INJ-005", Severity.HIGH, 0.80,
        r"\basyncio\.create_subprocess_shell\s*\(",
        "asyncio Shell Subprocess",
        "asyncio.create_subprocess_shell() runs a shell-interpreted command string.",
        "Python", PY,
        "Use asyncio.create_subprocess_exec() with an argument list instead.",
    ),
    _cmd(
        "CMD-INJ-006", Severity.MEDIUM, 0.55,
        r"\bos\.(?:execl|execle|execlp|execlpe|execv|execve|execvp|execvpe|spawnl|spawnle|spawnlp|spawnv|spawnve|spawnvp)\s*\(",
        "os.exec*/os.spawn* Call",
        "A process is replaced or spawned directly; verify the program path is not user-controlled.",
        "Python", PY,
    ),
    _cmd(
        "CMD-INJ-007", Severity.CRITICAL, 0.85,
        r"\b(?:child_process\.)?exec(?:Sync)?\s*\(\s*(?:`[^`]*\$\{|[\"'][^\"']*[\"']\s*\+)",
        "child_process.exec With Dynamic Command",
        "A shell command string is built from a template literal or concatenation.",
        "JavaScript/TypeScript", JS,
        "Use execFile()/spawn() with an argument array and without shell: true.",
    ),
    _cmd(
        "CMD-INJ-008", Severity.HIGH, 0.80,
        r"\bspawn(?:Sync)?\s*\([^)]*\bshell\s*:\s*true",
        "spawn With shell: true",
        "spawn() is called with shell: true, so arguments are shell-interpreted.",
        "JavaScript/TypeScript", JS,
    ),
    _cmd(
        "CMD-INJ-009", Severity.CRITICAL, 0.85,
        r"\b(?:shell_exec|system|passthru|proc_open|popen|exec)\s*\([^)]*\$",
        "PHP Shell Function With Variable",
        "A PHP shell function receives a variable, which may carry untrusted input.",
        "PHP", PHP,
        "Avoid shell functions; if unavoidable wrap every argument in escapeshellarg().",
    ),
    _cmd(
        "CMD-INJ-010", Severity.HIGH, 0.75,
        r"\bRuntime\.getRuntime\(\)\.exec\s*\(",
        "Runtime.exec() Call",
        "Runtime.exec() launches an external process.",
        "Java", JAVA,
        "Use ProcessBuilder with a fixed command and separately validated arguments.",
    ),
    _cmd(
        "CMD-INJ-011", Severity.HIGH, 0.80,
        r"(?:`[^`]*#\{|%x\{[^}]*#\{|\bsystem\s*\(\s*\"[^\"]*#\{)",
        "Ruby Shell Interpolation",
        "A shell command is built with string interpolation.",
        "Ruby", RB,
        "Pass the command and its arguments separately, e.g. system(\"ls\", path).",
    ),
    _cmd(
        "CMD-INJ-012", Severity.HIGH, 0.75,
        r"\bexec\.Command(?:Context)?\s*\([^)]*\"(?:sh|bash|/bin/sh|/bin/bash|cmd|cmd\.exe)\"\s*,\s*\"(?:-c|/c|/C)\"",
        "Go exec.Command Through a Shell",
        "exec.Command() wraps the command in a shell invocation.",
        "Go", GO,
        "Call the target program directly with exec.Command(name, args...).",
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact=(
        "Attackers who control any part of the command string can run arbitrary "
        "commands with the privileges of the server process."
    ),
    comment_penalty=0.40,
    string_penalty=0.25,
)
