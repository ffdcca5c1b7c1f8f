#!/usr/bin/env python3
"""
Test suite for the Primenym MCP Server via MCP Protocol

This tests the server through its actual MCP interface using stdio transport,
verifying that the MCP layer works correctly in addition to the underlying functions.

The server is started with no RapidAPI key, an empty config directory and the
DNS fallback disabled, so every lookup degrades to an "error" result without
touching the network.

Usage:
    source .venv/bin/activate
    python test_mcp_interface.py
"""

import sys

# Check Python version and dependencies early
if sys.version_info < (3, 10):
    print("Error: Python 3.10+ required")
    print()
    print("Activate the virtual environment:")
    print("    source .venv/bin/activate")
    sys.exit(1)

try:
    import anyio
except ImportError:
    print("Error: anyio not found")
    print()
    print("Activate the virtual environment first:")
    print("    source .venv/bin/activate")
    sys.exit(1)

try:
    from mcp import ClientSession
    from mcp.client.stdio import StdioServerParameters, stdio_client
except ImportError as e:
    print(f"Error: {e}")
    print()
    print("Activate the virtual environment first:")
    print("    source .venv/bin/activate")
    sys.exit(1)

import json
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path

ROOT = Path(__file__).parent

EXPECTED_TOOLS = {"version", "get_supported_extensions", "check_domain", "full_report"}


@dataclass
class TestResult:
    """Result of a single test."""
    name: str
    passed: bool
    message: str = ""


@dataclass
class TestRunner:
    """Runs tests and collects results."""
    results: list[TestResult] = field(default_factory=list)
    current_section: str = ""

    def section(self, name: str):
        """Start a new test section."""
        self.current_section = name
        print(f"\n{'=' * 60}")
        print(f"  {name}")
        print(f"{'=' * 60}")

    def test(self, name: str, condition: bool, message: str = ""):
        """Record a test result."""
        result = TestResult(
            name=f"{self.current_section}: {name}",
            passed=condition,
            message=message
        )
        self.results.append(result)

        if condition:
            print(f"  ✓ {name}")
        else:
            print(f"  ❌ {name}")
            if message:
                print(f"    → {message}")

    def test_json(self, name: str, json_str: str, checks: dict):
        """Test JSON response against expected checks."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            self.test(name, False, f"Invalid JSON: {e}")
            return None

        all_passed = True
        messages = []

        for check_name, check_fn in checks.items():
            try:
                if not check_fn(data):
                    all_passed = False
                    messages.append(f"{check_name} failed")
            except Exception as e:
                all_passed = False
                messages.append(f"{check_name} raised {e}")

        self.test(name, all_passed, "; ".join(messages) if messages else "")
        return data

    def summary(self) -> bool:
        """Print summary and return True if all tests passed."""
        passed = sum(1 for r in self.results if r.passed)
        failed = sum(1 for r in self.results if not r.passed)
        total = len(self.results)

        print(f"\n{'=' * 60}")
        print(f"  SUMMARY: {passed}/{total} passed, {failed} failed")
        print(f"{'=' * 60}")

        if failed > 0:
            print("\nFailed tests:")
            for r in self.results:
                if not r.passed:
                    print(f"  ❌ {r.name}")
                    if r.message:
                        print(f"    → {r.message}")

        return failed == 0


def extract_text(result) -> str:
    """Extract text content from MCP CallToolResult."""
    if result.content:
        for content in result.content:
            if hasattr(content, "text"):
                return content.text
    return ""


async def run_mcp_tests(runner: TestRunner, session: ClientSession):
    """Run all tests via MCP interface."""

    # =========================================================================
    # MCP Protocol Tests
    # =========================================================================
    runner.section("MCP Protocol - Tool Discovery")

    tools_result = await session.list_tools()
    tools = {t.name: t for t in tools_result.tools}

    runner.test("list_tools returns tools", len(tools) > 0)
    runner.test("expected tools exposed", set(tools) == EXPECTED_TOOLS, f"Found {sorted(tools)}")

    if "check_domain" in tools:
        props = tools["check_domain"].inputSchema.get("properties", {})
        runner.test("check_domain has name parameter", "name" in props)
        runner.test("check_domain has extension parameter", "extension" in props)
        runner.test("check_domain has refresh parameter", "refresh" in props)

    if "full_report" in tools:
        props = tools["full_report"].inputSchema.get("properties", {})
        runner.test("full_report has extensions parameter", "extensions" in props)

    # =========================================================================
    # get_supported_extensions
    # =========================================================================
    runner.section("get_supported_extensions via MCP")

    result = await session.call_tool("get_supported_extensions", {})
    runner.test_json("returns valid JSON", extract_text(result), {
        "has extensions": lambda d: isinstance(d["extensions"], list),
        "default set": lambda d: d["extensions"] == [".com", ".io", ".net", ".co", ".ai", ".org", ".dev", ".app"],
        "fallback disabled": lambda d: d["providers"]["dnsFallback"] is False,
    })

    # =========================================================================
    # check_domain
    # =========================================================================
    runner.section("check_domain via MCP")

    result = await session.call_tool("check_domain", {"name": ""})
    runner.test_json("empty name returns error", extract_text(result), {
        "has error": lambda d: "error" in d,
    })

    result = await session.call_tool("check_domain", {"name": "Eco Verve!!"})
    runner.test_json("degrades to error result without providers", extract_text(result), {
        "domain normalized": lambda d: d["domain"] == "ecoverve.com",
        "not available": lambda d: d["available"] is False,
        "status error": lambda d: d["status"] == "error",
    })

    # =========================================================================
    # full_report
    # =========================================================================
    runner.section("full_report via MCP")

    result = await session.call_tool("full_report", {"name": "acme", "extensions": ["com", "io"]})
    runner.test_json("report structure", extract_text(result), {
        "baseName": lambda d: d["baseName"] == "acme",
        "two domains": lambda d: [x["domain"] for x in d["domains"]] == ["acme.com", "acme.io"],
        "has socialMedia": lambda d: len(d["socialMedia"]) == 4,
        "has generatedAt": lambda d: "generatedAt" in d,
    })

    result = await session.call_tool("full_report", {"name": "   "})
    runner.test_json("blank name returns error", extract_text(result), {
        "has error": lambda d: "error" in d,
    })


async def main_async() -> bool:
    runner = TestRunner()

    print("\n" + "=" * 60)
    print("  PRIMENYM MCP SERVER - MCP INTERFACE TEST SUITE")
    print("=" * 60)

    start_time = time.time()

    with tempfile.TemporaryDirectory() as config_home:
        server_params = StdioServerParameters(
            command=sys.executable,  # Use the same Python that's running this test
            args=["-m", "primenym"],
            cwd=str(ROOT),
            env={
                "PYTHONPATH": str(ROOT / "src"),
                "XDG_CONFIG_HOME": config_home,
                "PRIMENYM_DNS_FALLBACK": "0",
            },
        )

        # Connect to the server via stdio (suppress server logs by redirecting to devnull)
        print("\nConnecting to MCP server via stdio...")

        with open(os.devnull, "w") as devnull:
            async with stdio_client(server_params, errlog=devnull) as (read_stream, write_stream):
                async with ClientSession(read_stream, write_stream) as session:
                    init_result = await session.initialize()
                    server_version = init_result.serverInfo.version
                    print(f"Connected to: {init_result.serverInfo.name} v{server_version}")

                    runner.section("MCP Connection")
                    runner.test("server initialized", True)
                    runner.test(
                        "server name is 'primenym'",
                        init_result.serverInfo.name == "primenym",
                        f"Got '{init_result.serverInfo.name}'",
                    )
                    runner.test(
                        "server version is set",
                        server_version is not None and server_version != "",
                        f"Got '{server_version}'",
                    )

                    await run_mcp_tests(runner, session)

    elapsed = time.time() - start_time

    all_passed = runner.summary()

    print(f"\nCompleted in {elapsed:.1f} seconds")

    return all_passed


def test_mcp_interface():
    """pytest entry point."""
    assert anyio.run(main_async)


def main():
    result = anyio.run(main_async)
    sys.exit(0 if result else 1)


if __name__ == "__main__":
    main()
