"""
Response payloads built on top of the resolver.

Both builders return plain dicts ready for json.dumps (MCP tools) or a
FastAPI JSON response.
"""

import random
from datetime import datetime, timezone

from .labels import normalize_label
from .resolver import DomainAvailabilityResolver, DomainCheck
from .socials import simulate_handles


def domain_entry(check: DomainCheck) -> dict:
    """One row of the full report's domain list."""
    return {
        "domain": check.domain,
        "extension": check.extension,
        "available": check.available,
        "status": check.status,
        "source": check.source,
    }


async def check_domain_payload(
    resolver: DomainAvailabilityResolver,
    name: str,
    extension: str = ".com",
    force_refresh: bool = False,
) -> dict:
    """Single-domain check: {name, domain, available, status, source}."""
    check = await resolver.check(name, extension, force_refresh=force_refresh)
    return {
        "name": name,
        "domain": check.domain,
        "available": check.available,
        "status": check.status,
        "source": check.source,
    }


async def full_report_payload(
    resolver: DomainAvailabilityResolver,
    name: str,
    extensions: list[str] | None = None,
    rng: random.Random | None = None,
) -> dict:
    """
    Full report for one name.

    Every extension is looked up independently and concurrently; the social
    media section is simulated.
    """
    base_name = normalize_label(name)
    checks = await resolver.check_extensions(name, extensions)

    return {
        "name": name,
        "baseName": base_name,
        "domains": [domain_entry(c) for c in checks],
        "socialMedia": simulate_handles(base_name, rng),
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }
