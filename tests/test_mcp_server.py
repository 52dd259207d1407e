"""Tests for the MCP server tool functions."""

import json
from pathlib import Path

import pytest

from mcp_sentinel.mcp.server import list_rules_tool, scan_directory_tool
from mcp_sentinel.rules import CATALOG_VERSION, RULE_CATALOG


FIXTURES = Path(__file__).parent / "fixtures"


class TestMCPTools:
    @pytest.mark.asyncio
    async def test_scan_directory_tool_returns_json(self):
        result = await scan_directory_tool(str(FIXTURES / "sample_vulnerable.py"))
        data = json.loads(result)
        assert data["summary"]["total_files_scanned"] == 1
        assert data["summary"]["total_vulnerabilities"] > 0
        assert len(data["vulnerabilities"]) == data["summary"]["total_vulnerabilities"]
        assert data["errors"] == []

    @pytest.mark.asyncio
    async def test_scan_directory_tool_min_severity(self):
        result = await scan_directory_tool(str(FIXTURES / "sample_vulnerable.py"), min_severity="critical")
        data = json.loads(result)
        assert data["vulnerabilities"]
        assert {v["severity"] for v in data["vulnerabilities"]} == {"critical"}

    @pytest.mark.asyncio
    async def test_scan_tool_nonexistent(self):
        result = await scan_directory_tool("/nonexistent")
        data = json.loads(result)
        assert data["vulnerabilities"] == []
        assert data["errors"][0]["kind"] == "TargetNotFoundError"

    @pytest.mark.asyncio
    async def test_scan_tool_invalid_severity(self):
        result = await scan_directory_tool(str(FIXTURES), min_severity="severe")
        data = json.loads(result)
        assert data["errors"][0]["kind"] == "ConfigError"
        assert "min_severity" in data["errors"][0]["message"]

    def test_list_rules_tool(self):
        data = json.loads(list_rules_tool())
        assert data["catalog_version"] == CATALOG_VERSION
        assert len(data["rules"]) == len(RULE_CATALOG)
        assert {"id", "family", "severity", "confidence", "title"} <= set(data["rules"][0])
