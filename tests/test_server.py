"""
Tests for the MCP tool server.
"""

import asyncio
import json
from typing import get_args

import pytest

from pkgintel import server
from pkgintel.analyzers.trending import CATEGORY_PACKAGES
from pkgintel.core.exceptions import PackageNotFoundError

TOOL_NAMES = {
    "research_package",
    "compare_packages",
    "find_alternatives",
    "check_security",
    "analyze_package_json",
    "get_trending",
}


@pytest.fixture
def tools():
    return {tool.name: tool for tool in asyncio.run(server.mcp.list_tools())}


class TestServer:
    """Tests for tool registration and dispatch."""

    def test_tools_registered(self, tools):
        assert set(tools) == TOOL_NAMES

    def test_tools_are_read_only(self, tools):
        for tool in tools.values():
            assert tool.annotations.readOnlyHint is True
            assert tool.annotations.destructiveHint is False

    def test_category_literal_matches_catalog(self):
        assert set(get_args(server.Category)) == set(CATEGORY_PACKAGES)

    def test_category_schema_is_enum(self, tools):
        schema = tools["get_trending"].inputSchema
        assert schema["required"] == ["category"]
        assert set(schema["properties"]["category"]["enum"]) == set(CATEGORY_PACKAGES)

    def test_framework_schema_is_free_form(self, tools):
        framework = tools["get_trending"].inputSchema["properties"]["framework"]
        assert "enum" not in json.dumps(framework)

    def test_unrecognized_framework_is_ignored(self, monkeypatch, make_generator, make_profile):
        generator = make_generator(
            profiles=[make_profile("zod"), make_profile("yup")],
            weekly={"zod": 200, "yup": 100},
        )
        monkeypatch.setattr(server, "_generator", lambda: generator)

        data = asyncio.run(server.get_trending("validation", "angular"))

        assert data["top_pick"] == "zod"
        assert data["framework"] == "angular"
        assert [p["name"] for p in data["packages"]] == ["zod", "yup"]

    def test_tool_returns_serialized_result(self, monkeypatch, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("zod", "3.23.8")])
        monkeypatch.setattr(server, "_generator", lambda: generator)

        data = asyncio.run(server.check_security("zod"))

        assert data["package"] == "zod"
        assert data["latest_version"] == "3.23.8"
        assert data["total_advisories"] == 0
        assert data["by_severity"] == {"critical": 0, "high": 0, "moderate": 0, "low": 0}

    def test_tool_propagates_errors(self, monkeypatch, make_generator):
        monkeypatch.setattr(server, "_generator", lambda: make_generator())

        with pytest.raises(PackageNotFoundError, match="not found on npm"):
            asyncio.run(server.research_package("no-such-package"))
