"""Prompt injection payloads and unsafe prompt construction."""

import regex

from mcp_sentinel.models import RuleFamily, Severity
from mcp_sentinel.rules.base import FamilySpec, _pat

_F = RuleFamily.PROMPT_INJECTION
_CWE = ("CWE-1427", "CWE-74")

_SEPARATE = (
    "Keep untrusted text out of instruction positions: pass it as clearly delimited "
    "data, and strip or reject role markers and override phrases."
)


def _inj(rule_id, severity, confidence, source, title, desc, remediation=_SEPARATE):
    return _pat(
        rule_id, _F, severity, confidence, source, title, desc, remediation,
        cwe=_CWE, flags=regex.IGNORECASE,
    )


RULES = (
    _inj(
        "PROMPT-INJ-001", Severity.HIGH, 0.85,
        r"\b(?:ignore|disregard|forget|override)\s+(?:all\s+|any\s+|the\s+|your\s+)?"
        r"(?:previous|prior|above|earlier|preceding|system)\s+(?:instructions?|prompts?|rules|directions|context)\b",
        "Instruction Override Phrase",
        "The text tries to cancel the instructions the model was given.",
    ),
    _inj(
        "PROMPT-INJ-002", Severity.HIGH, 0.70,
        r"\byou\s+are\s+now\s+(?:a|an|in|the|DAN)\b",
        "Role Reassignment",
        "The text tries to assign the model a new persona or mode.",
    ),
    _inj(
        "PROMPT-INJ-003", Severity.HIGH, 0.80,
        r"(?:<\|im_start\|>|<\|im_end\|>|<\|system\|>|\[/?INST\]|<</?SYS>>|</?system>)",
        "Chat Role Delimiter",
        "Chat-template role delimiters can make injected text look like a system message.",
    ),
    _inj(
        "PROMPT-INJ-004", Severity.HIGH, 0.75,
        r"\b(?:reveal|print|show|output|repeat|leak)\s+(?:your|the)\s+"
        r"(?:system\s+prompt|initial\s+instructions|hidden\s+instructions)\b",
        "System Prompt Extraction",
        "The text asks the model to disclose its hidden instructions.",
    ),
    _inj(
        "PROMPT-INJ-005", Severity.MEDIUM, 0.65,
        r"\b(?:DAN\s+mode|developer\s+mode\s+enabled|jailbreak(?:ed)?|do\s+anything\s+now)\b",
        "Jailbreak Keyword",
        "A well-known jailbreak phrase appears in the text.",
    ),
    _inj(
        "PROMPT-INJ-006", Severity.MEDIUM, 0.60,
        r"^\s*(?:#+\s*)?(?:new|updated|real)\s+instructions?\s*:",
        "Replacement Instructions Marker",
        "A heading announces replacement instructions for the model.",
    ),
    _inj(
        "PROMPT-INJ-007", Severity.HIGH, 0.75,
        r"\b(?:bypass|disable|ignore)\s+(?:your\s+|all\s+|the\s+)?(?:safety|content|security)\s+"
        r"(?:filters?|guidelines|policies|restrictions|guardrails)\b",
        "Safety Bypass Request",
        "The text asks the model to switch off its safety behavior.",
    ),
    _inj(
        "PROMPT-INJ-008", Severity.MEDIUM, 0.55,
        r"\b(?:prompt|system_prompt|messages?)\s*(?:\+=|=|\.append\s*\()[^\n]*"
        r"(?:request\.(?:args|form|json|data|GET|POST)|user_input|\binput\s*\(|req\.(?:body|query|params))",
        "Untrusted Input In Prompt",
        "Request or user input is concatenated directly into a prompt.",
        "Wrap user input in a delimited data section and never let it extend the instruction text.",
    ),
)

FAMILY = FamilySpec(
    family=_F,
    rules=RULES,
    impact=(
        "Injected instructions can override the model's intended behavior, leading "
        "to data disclosure or unintended tool calls on the user's behalf."
    ),
)
