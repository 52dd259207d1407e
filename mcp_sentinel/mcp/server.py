"""FastMCP server exposing mcp-sentinel scans as tools."""

import json

from mcp.server.fastmcp import FastMCP

from mcp_sentinel.config import load_settings
from mcp_sentinel.exceptions import SentinelError
from mcp_sentinel.output.formats import scan_result_to_json
from mcp_sentinel.rules import CATALOG_VERSION, RULE_CATALOG
from mcp_sentinel.scanners.vulnerability_scanner import run_scan

mcp = FastMCP("mcp-sentinel")


def _error_json(target: str, error: Exception) -> str:
    return json.dumps({
        "target": target,
        "vulnerabilities": [],
        "errors": [{"kind": type(error).__name__, "message": str(error)}],
    }, indent=2)


@mcp.tool()
async def scan_directory_tool(target: str, min_severity: str = "info") -> str:
    """Scan a file or directory for security vulnerabilities using lexical rules.

    Detects hardcoded secrets, command and code injection, SQL injection, SSRF,
    path traversal, unsafe deserialization, sensitive file access, and MCP tool
    poisoning / prompt injection text. Secret values are redacted in the report.

    Args:
        target: Path to a file or directory to scan.
        min_severity: Lowest severity to include (critical, high, medium, low, info).
    """
    try:
        settings = load_settings(min_severity=min_severity)
        result = await run_scan(target, settings)
    except SentinelError as e:
        return _error_json(target, e)
    return scan_result_to_json(result)


@mcp.tool()
def list_rules_tool() -> str:
    """List every detection rule in the catalog with its family, severity, and confidence."""
    return json.dumps({
        "catalog_version": CATALOG_VERSION,
        "rules": [r.to_dict() for r in RULE_CATALOG.rules()],
    }, indent=2)


if __name__ == "__main__":
    mcp.run()
