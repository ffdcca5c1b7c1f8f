"""
Primenym MCP Server

An MCP server for checking whether business name ideas are free as domains:
- Domain status via Domainr (RapidAPI), falling back to DNS-over-HTTPS
- Full reports across the configured extensions, plus simulated social handles
"""

import json
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from . import __version__
from .config import configure_http_logging, debug_enabled, load_settings
from .labels import normalize_extension, normalize_label
from .report import check_domain_payload, full_report_payload
from .resolver import DomainAvailabilityResolver

# Suppress httpx request logging by default (request URLs can carry API keys)
# Set PRIMENYM_DEBUG=1 to enable verbose HTTP logging
configure_http_logging(debug_enabled())

# One resolver (and so one cache) per server process
_resolver: DomainAvailabilityResolver | None = None


def get_resolver() -> DomainAvailabilityResolver:
    """Return the process resolver, building it from settings on first use."""
    global _resolver
    if _resolver is None:
        _resolver = DomainAvailabilityResolver.from_settings(load_settings())
    return _resolver


def set_resolver(resolver: DomainAvailabilityResolver | None) -> None:
    """Replace the process resolver (None rebuilds from settings on next use)."""
    global _resolver
    _resolver = resolver


async def close_resolver() -> None:
    """Close the process resolver's HTTP client and forget it."""
    global _resolver
    if _resolver is not None:
        resolver, _resolver = _resolver, None
        await resolver.aclose()


@asynccontextmanager
async def server_lifespan(server: FastMCP):
    try:
        yield {}
    finally:
        await close_resolver()


# Initialize the MCP server
mcp = FastMCP("primenym", lifespan=server_lifespan)
mcp._mcp_server.version = __version__


# =============================================================================
# MCP Tools
# =============================================================================

@mcp.tool()
def version() -> str:
    """
    Get the version of the Primenym MCP server.

    Returns:
        Version string including server name and version number.
    """
    return f"Primenym MCP Server version {__version__}"


@mcp.tool()
def get_supported_extensions() -> str:
    """
    Get the domain extensions used by full_report().

    Returns:
        JSON with the extension list and which providers are enabled.
    """
    resolver = get_resolver()
    return json.dumps({
        "extensions": resolver.extensions,
        "providers": {
            "domainr": resolver.has_primary,
            "dnsFallback": resolver.dns_fallback,
        },
    })


@mcp.tool()
async def check_domain(name: str, extension: str = ".com", refresh: bool = False) -> str:
    """
    Check whether a business name is available as a domain.

    The name is normalized first ("Eco Verve!!" -> "ecoverve"). Results are
    cached for five minutes.

    Args:
        name: Business name idea
        extension: Domain extension, with or without the dot (default: .com)
        refresh: If true, ignore any cached result and ask the providers again

    Returns:
        JSON with name, domain, available (true/false/null), status and source.
        available is null with status "unknown" when no provider could answer.
    """
    if not name or not name.strip():
        return json.dumps({"error": "No name provided"})

    if not normalize_label(name):
        return json.dumps({"error": f"Name '{name}' has no letters or digits"})

    if not normalize_extension(extension):
        return json.dumps({"error": "No extension provided"})

    payload = await check_domain_payload(get_resolver(), name, extension, force_refresh=refresh)
    return json.dumps(payload)


@mcp.tool()
async def full_report(name: str, extensions: list[str] | None = None) -> str:
    """
    Full availability report for one business name.

    Args:
        name: Business name idea
        extensions: Extensions to check (default: .com, .io, .net, .co, .ai, .org, .dev, .app)

    Returns:
        JSON with name, baseName, one domain entry per extension, simulated
        social media handle results, and generatedAt.
    """
    if not name or not name.strip():
        return json.dumps({"error": "No name provided"})

    if not normalize_label(name):
        return json.dumps({"error": f"Name '{name}' has no letters or digits"})

    if extensions is not None:
        extensions = [e for e in extensions if normalize_extension(e)]
        if not extensions:
            return json.dumps({"error": "No valid extensions specified"})

    payload = await full_report_payload(get_resolver(), name, extensions)
    return json.dumps(payload)
