"""Hidden instructions planted in MCP tool descriptions (tool poisoning)."""

import regex

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import FamilySpec, _pat

_F = RuleFamily.TOOL_POISONING
_CWE = ("CWE-1427", "CWE-74")

_REVIEW = (
    "Tool descriptions are shown to the model verbatim: keep them to a plain "
    "statement of what the tool does and remove any instruction aimed at the model."
)


def _poison(rule_id, severity, confidence, source, title, desc, remediation=_REVIEW):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, remediation,
        cwe=_CWE, flags=regex.IGNORECASE,
    )


RULES = (
    _poison(
        "TOOL-POISON-001", Severity.HIGH, 0.80,
        r"<\s*(?:IMPORTANT|SYSTEM|HIDDEN|SECRET|INSTRUCTIONS?)\s*>",
        "Hidden Instruction Tag",
        "Text is wrapped in a pseudo-markup tag commonly used to smuggle instructions to the model.",
    ),
    _poison(
        "TOOL-POISON-002", Severity.CRITICAL, 0.85,
        r"\b(?:do\s+not|don'?t|never)\s+(?:tell|inform|mention|reveal|show|alert|notify)\s+"
        r"(?:this\s+(?:to\s+)?)?(?:the\s+)?user\b",
        "Concealment Directive",
        "The text instructs the model to hide its behavior from the user.",
    ),
    _poison(
        "TOOL-POISON-003", Severity.HIGH, 0.80,
        r"\bbefore\s+(?:using|calling|running|invoking)\s+(?:this|any|the)\s+tool\b[^.\n]{0,80}?"
        r"\b(?:read|open|cat|send|include|pass|upload)\b",
        "Pre-Call Side Instruction",
        "The text tells the model to perform an extra action before calling the tool.",
    ),
    _poison(
        "TOOL-POISON-004", Severity.HIGH, 0.70,
        "[\u200b\u200c\u200d\u2060\u202a-\u202e\u2066-\u2069]",
        "Invisible Unicode Characters",
        "Zero-width or bidirectional control characters can hide text from human reviewers.",
        "Strip zero-width and bidirectional control characters from tool metadata.",
    ),
    _poison(
        "TOOL-POISON-005", Severity.HIGH, 0.75,
        r"\b(?:when|whenever|if)\s+(?:the\s+)?(?:user|assistant|agent|model)\s+(?:calls?|uses?|invokes?)\s+"
        r"(?:the\s+)?[\w\-]+\s+tool\b[^.\n]{0,80}?\b(?:instead|also|first|must|always)\b",
        "Cross-Tool Shadowing",
        "The description tries to change how the model uses a different tool.",
    ),
    _poison(
        "TOOL-POISON-006", Severity.HIGH, 0.70,
        r"\b(?:pass|send|include|append|put)\s+(?:its\s+|the\s+|their\s+|all\s+)?"
        r"(?:content|contents|result|output|data|credentials|keys?)\s+(?:as|in|into|to)\s+(?:the\s+)?"
        r"[\"'`]?\w+[\"'`]?\s+(?:parameter|param|argument|field)\b",
        "Data Smuggling Through Parameters",
        "The text asks the model to route data into a tool parameter, a common exfiltration channel.",
    ),
    _poison(
        "TOOL-POISON-007", Severity.MEDIUM, 0.60,
        r"<!--[^>]*\b(?:ignore|instruction|assistant|model|must|always)\b[^>]*-->",
        "Instruction Inside HTML Comment",
        "An HTML comment contains wording aimed at the model.",
    ),
    _poison(
        "TOOL-POISON-008", Severity.CRITICAL, 0.80,
        r"\bdescription\s*[:=]\s*[^\n]*(?:~/\.ssh|\.aws/credentials|\.env\b|id_rsa|mcp\.json)",
        "Tool Description References Sensitive File",
        "A tool description mentions a credential file, a hallmark of exfiltration payloads.",
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact=(
        "A poisoned tool description silently steers the model into leaking data or "
        "misusing other tools while the user only sees a harmless tool name."
    ),
)
