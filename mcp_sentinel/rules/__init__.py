"""The static pattern catalog, built once at import time."""

from mcp_sentinel.rules import (
    code_injection,
    command_injection,
    deserialization,
    path_traversal,
    prompt_injection,
    secrets,
    sensitive_files,
    sql_injection,
    ssrf,
    tool_poisoning,
)
from mcp_sentinel.rules.base import FamilySpec, LinePolicy, Rule, RuleCatalog

CATALOG_VERSION = "1.0.0"


def build_catalog() -> RuleCatalog:
    # Family order is evaluation order inside a file
    return RuleCatalog(families=(
        secrets.FAMILY,
        command_injection.FAMILY,
        sensitive_files.FAMILY,
        tool_poisoning.FAMILY,
        prompt_injection.FAMILY,
        code_injection.FAMILY,
        deserialization.FAMILY,
        path_traversal.FAMILY,
        sql_injection.FAMILY,
        ssrf.FAMILY,
    ))


RULE_CATALOG = build_catalog()

__all__ = [
    "CATALOG_VERSION",
    "FamilySpec",
    "LinePolicy",
    "RULE_CATALOG",
    "Rule",
    "RuleCatalog",
    "build_catalog",
]
