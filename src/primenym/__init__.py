"""
Primenym

Checks whether business name ideas are available as domain names, as an MCP
server or as a small HTTP API.
"""

__version__ = "0.2.0"


def main():
    """Main entry point for the CLI."""
    import sys

    # Handle CLI arguments before importing heavy dependencies
    if "--help" in sys.argv or "-h" in sys.argv:
        print_help()
        sys.exit(0)

    if "--version" in sys.argv or "-V" in sys.argv:
        print(f"primenym {__version__}")
        sys.exit(0)

    if "--setup" in sys.argv:
        run_setup()
        sys.exit(0)

    if "--show-config" in sys.argv:
        show_config()
        sys.exit(0)

    if "--http" in sys.argv:
        run_http(_port_from_argv(sys.argv))
        sys.exit(0)

    # Default: run the MCP server
    from .server import mcp
    mcp.run()


def _port_from_argv(argv: list[str], default: int = 8000) -> int:
    """Read `--port N` from argv, falling back to $PORT and then default."""
    import os

    if "--port" in argv:
        index = argv.index("--port")
        if index + 1 < len(argv) and argv[index + 1].isdigit():
            return int(argv[index + 1])
    port = os.environ.get("PORT", "")
    return int(port) if port.isdigit() else default


def print_help():
    """Print help message."""
    print(f"""primenym {__version__}

Domain availability checks for business name ideas.

Usage:
    primenym                      Run the MCP server (stdio)
    primenym --http [--port N]    Run the HTTP API (default port 8000)
    primenym --setup              Configure the RapidAPI key interactively
    primenym --show-config        Show current configuration
    primenym --version            Show version
    primenym --help               Show this help

Configuration:
    Domain status comes from Domainr via RapidAPI. Without a key the
    Domainr lookup is skipped and only the DNS-over-HTTPS fallback is used
    (it cannot tell registered-but-parked domains from free ones).

    Set your RapidAPI key:
    1. Run: primenym --setup
    2. Or set environment variable: RAPIDAPI_KEY=your-key

    Other settings (environment):
        PRIMENYM_CACHE_TTL       Cache lifetime in seconds (default 300)
        PRIMENYM_EXTENSIONS      Comma-separated extensions for full reports
        PRIMENYM_DNS_FALLBACK    Set to 0 to disable the DNS fallback
        PRIMENYM_HTTP_TIMEOUT    Upstream request timeout in seconds (default 10)
        PRIMENYM_DEBUG           Set to 1 for verbose HTTP logging

Claude Code Setup:
    Add to ~/.claude/settings.json:
    {{
      "mcpServers": {{
        "primenym": {{
          "command": "uvx",
          "args": ["primenym"]
        }}
      }}
    }}
""")


def run_setup():
    """Interactive setup wizard."""
    import getpass
    from .config import get_rapidapi_key, set_rapidapi_key, get_config_file

    print("=" * 50)
    print("Primenym - Setup")
    print("=" * 50)
    print()

    current_key = get_rapidapi_key()
    if current_key:
        masked = mask_key(current_key)
        print(f"Current RapidAPI key: {masked}")
        print()
        response = input("Update API key? [y/N]: ").strip().lower()
        if response != "y":
            print("\nSetup complete. Your current configuration is preserved.")
            return

    print()
    print("RapidAPI key for the Domainr API")
    print("Subscribe at: https://rapidapi.com/domainr/api/domainr")
    print("Press Enter to skip (only the DNS fallback will be used)")
    print()

    key = getpass.getpass("API Key: ").strip()

    if key:
        if set_rapidapi_key(key):
            print(f"\n✓ API key saved ({get_config_file()} or macOS Keychain)")
            test_api_key(key)
        else:
            print("\n✗ Failed to save API key")
    else:
        print("\n✓ Skipped. Only the DNS fallback will be used.")

    print()
    print("Setup complete!")


def show_config():
    """Show current configuration."""
    from .config import get_config_file, get_key_source, load_settings

    print("Configuration")
    print("=" * 50)
    print()

    config_file = get_config_file()
    print(f"Config file: {config_file}")
    print(f"  Exists: {config_file.exists()}")
    print()

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"✗ Invalid setting: {e}")
        return

    if settings.api_key:
        print(f"RapidAPI key: {mask_key(settings.api_key)}")
        print(f"  Source: {get_key_source()}")
    else:
        print("RapidAPI key: Not configured")
        print("  Domainr lookups are disabled")

    print(f"DNS fallback: {'enabled' if settings.dns_fallback else 'disabled'}")
    print(f"Cache TTL: {settings.cache_ttl:g}s")
    print(f"HTTP timeout: {settings.http_timeout:g}s")
    print(f"Extensions: {', '.join(settings.extensions)}")


def run_http(port: int):
    """Serve the FastAPI app with uvicorn."""
    import uvicorn
    from .web import create_app

    uvicorn.run(create_app(), host="0.0.0.0", port=port)


def mask_key(key: str) -> str:
    """Mask an API key for display."""
    if len(key) > 8:
        return key[:4] + "*" * (len(key) - 8) + key[-4:]
    elif len(key) > 4:
        return key[:2] + "*" * (len(key) - 2)
    else:
        return "*" * len(key)


def test_api_key(key: str):
    """Test the RapidAPI key with one Domainr lookup."""
    try:
        import httpx
        from .providers import DOMAINR_API_HOST, DOMAINR_API_URL

        print("\nTesting Domainr API...")

        response = httpx.get(
            DOMAINR_API_URL,
            params={"domain": "example.com"},
            headers={
                "x-rapidapi-key": key,
                "x-rapidapi-host": DOMAINR_API_HOST,
            },
            timeout=10
        )

        if response.is_success and response.json().get("status"):
            print("✓ API key is valid")
        else:
            print(f"✗ API error: HTTP {response.status_code}")

    except Exception as e:
        print(f"✗ Test failed: {e}")
