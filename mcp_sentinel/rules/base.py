"""Rule and rule-family definitions for the pattern catalog."""

from __future__ import annotations

import regex
from dataclasses import dataclass, field
from enum import Enum

from mcp_sentinel.models import RuleFamily, Severity


class LinePolicy(str, Enum):
    # Every rule of the family runs on every line
    ALL_MATCHES = "all_matches"
    # Rules are tried in catalog order; the first one to match claims the line
    FIRST_MATCH = "first_match"


@dataclass(frozen=True)
class Rule:
    """A single named text-matching check."""
    id: str
    family: RuleFamily
    pattern: regex.Pattern
    default_severity: Severity
    base_confidence: float
    title: str
    description_template: str
    remediation_template: str
    weakness_reference: tuple[str, ...] = ()
    language: str = "any"
    extensions: frozenset[str] = frozenset()  # file extensions this applies to, empty = all
    redact: bool = False

    def applies_to(self, file_path: str) -> bool:
        if not self.extensions:
            return True
        lower = file_path.lower()
        return any(lower.endswith(ext) for ext in self.extensions)

    def render(self, template: str) -> str:
        return template.format(language=self.language, title=self.title)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "family": self.family.value,
            "severity": self.default_severity.value,
            "confidence": self.base_confidence,
            "title": self.title,
            "language": self.language,
            "cwe": list(self.weakness_reference),
        }


@dataclass(frozen=True)
class FamilySpec:
    """A rule family: its compiled rules plus the fixed scoring constants."""
    family: RuleFamily
    rules: tuple[Rule, ...]
    impact: str
    line_policy: LinePolicy = LinePolicy.ALL_MATCHES
    comment_penalty: float = 0.0
    string_penalty: float = 0.0


def _pat(
    rule_id: str,
    family: RuleFamily,
    severity: Severity,
    confidence: float,
    source: str,
    title: str,
    desc: str,
    remediation: str,
    cwe: tuple[str, ...] = (),
    language: str = "any",
    extensions: tuple[str, ...] = (),
    flags: int = 0,
    redact: bool = False,
) -> Rule:
    return Rule(
        id=rule_id,
        family=family,
        pattern=regex.compile(source, flags),
        default_severity=severity,
        base_confidence=confidence,
        title=title,
        description_template=desc,
        remediation_template=remediation,
        weakness_reference=cwe,
        language=language,
        extensions=frozenset(extensions),
        redact=redact,
    )


PY = (".py", ".pyw")
JS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")
RB = (".rb",)
PHP = (".php", ".phtml")
JAVA = (".java", ".kt", ".scala")
GO = (".go",)


@dataclass
class RuleCatalog:
    """The full, read-only rule set for a process, indexed by id and family."""
    families: tuple[FamilySpec, ...]
    _by_id: dict[str, Rule] = field(default_factory=dict, init=False, repr=False)
    _by_family: dict[RuleFamily, FamilySpec] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for spec in self.families:
            if spec.family in self._by_family:
                raise ValueError(f"Duplicate rule family: {spec.family.value}")
            self._by_family[spec.family] = spec
            for rule in spec.rules:
                if rule.id in self._by_id:
                    raise ValueError(f"Duplicate rule id: {rule.id}")
                if rule.family != spec.family:
                    raise ValueError(f"Rule {rule.id} filed under {spec.family.value}")
                if not 0.0 <= rule.base_confidence <= 1.0:
                    raise ValueError(f"Rule {rule.id} confidence out of range")
                self._by_id[rule.id] = rule

    def rule(self, rule_id: str) -> Rule:
        return self._by_id[rule_id]

    def family(self, family: RuleFamily) -> FamilySpec:
        return self._by_family[family]

    def rules(self) -> list[Rule]:
        return [rule for spec in self.families for rule in spec.rules]

    def __len__(self) -> int:
        return len(self._by_id)
