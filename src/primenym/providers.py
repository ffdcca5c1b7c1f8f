"""
Upstream domain-status providers.

Each provider answers "what is the status of this domain?" for one domain key
and returns an AvailabilityResult. Providers raise ProviderError for bad HTTP
statuses and malformed payloads; transport failures propagate as
httpx.HTTPError. The resolver decides what to do with either.
"""

from dataclasses import asdict, dataclass

import httpx

DOMAINR_API_URL = "https://domainr.p.rapidapi.com/v2/status"
DOMAINR_API_HOST = "domainr.p.rapidapi.com"
DOH_API_URL = "https://dns.google/resolve"

# DNS RCODEs that actually say something about the name: NOERROR, NXDOMAIN
DNS_ANSWERED_RCODES = (0, 3)

# Result sources
SOURCE_DOMAINR = "domainr"
SOURCE_FALLBACK = "fallback"
SOURCE_NONE = "none"

# Statuses the resolver produces itself
STATUS_AVAILABLE = "available"
STATUS_ACTIVE = "active"
STATUS_UNKNOWN = "unknown"
STATUS_ERROR = "error"
STATUS_INVALID = "invalid"


class PrimenymError(Exception):
    """Base error for this package."""


class ProviderError(PrimenymError):
    """A provider answered, but not with something we can use."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


@dataclass(frozen=True)
class AvailabilityResult:
    """Uniform availability answer for one domain key."""

    available: bool | None
    status: str
    source: str | None = None

    @classmethod
    def from_status(cls, status: str, source: str) -> "AvailabilityResult":
        """Only the literal status "available" counts as available."""
        return cls(available=status == STATUS_AVAILABLE, status=status, source=source)

    @classmethod
    def unknown(cls) -> "AvailabilityResult":
        """Every provider failed and a fallback was part of the chain."""
        return cls(available=None, status=STATUS_UNKNOWN, source=SOURCE_NONE)

    @classmethod
    def error(cls) -> "AvailabilityResult":
        """The primary provider failed and no fallback was configured."""
        return cls(available=False, status=STATUS_ERROR, source=SOURCE_NONE)

    @classmethod
    def invalid(cls) -> "AvailabilityResult":
        return cls(available=False, status=STATUS_INVALID, source=SOURCE_NONE)

    def to_dict(self) -> dict:
        return asdict(self)


def is_usable_api_key(key: str) -> bool:
    """HTTP header values are ASCII; anything else cannot be sent."""
    return key.isascii() and key.isprintable()


class DomainrProvider:
    """
    Domainr status API, reached through RapidAPI.

    Response shape:
        {"status": [{"domain": "acme.com", "zone": "com", "status": "active", ...}]}

    Only the first status entry is used.
    """

    name = SOURCE_DOMAINR

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str = DOMAINR_API_URL,
    ) -> None:
        if not api_key:
            raise ValueError("DomainrProvider requires an API key")
        if not is_usable_api_key(api_key):
            raise ValueError("RapidAPI key must be printable ASCII")
        self._client = client
        self._api_key = api_key
        self._url = url

    async def lookup(self, domain: str) -> AvailabilityResult:
        response = await self._client.get(
            self._url,
            params={"domain": domain},
            headers={
                "x-rapidapi-key": self._api_key,
                "x-rapidapi-host": DOMAINR_API_HOST,
            },
        )

        if not response.is_success:
            raise ProviderError(self.name, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(self.name, f"Invalid JSON: {e}") from e

        statuses = data.get("status") if isinstance(data, dict) else None
        if not isinstance(statuses, list) or not statuses:
            raise ProviderError(self.name, "No status in response")

        first = statuses[0]
        status = first.get("status") if isinstance(first, dict) else None
        if not isinstance(status, str) or not status:
            raise ProviderError(self.name, "No status in response")

        return AvailabilityResult.from_status(status, self.name)


class DnsOverHttpsProvider:
    """
    Fallback provider: DNS-over-HTTPS A-record lookup (Google JSON API).

    Any answer record is read as "taken", no answer as "available". This
    misreports domains that are registered but have no records published.
    DNS error statuses (SERVFAIL, REFUSED, ...) are provider failures.
    """

    name = SOURCE_FALLBACK

    def __init__(self, client: httpx.AsyncClient, url: str = DOH_API_URL) -> None:
        self._client = client
        self._url = url

    async def lookup(self, domain: str) -> AvailabilityResult:
        response = await self._client.get(
            self._url,
            params={"name": domain, "type": "A"},
            headers={"Accept": "application/dns-json"},
        )

        if not response.is_success:
            raise ProviderError(self.name, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(self.name, f"Invalid JSON: {e}") from e

        if not isinstance(data, dict) or "Status" not in data:
            raise ProviderError(self.name, "No Status in response")

        if data["Status"] not in DNS_ANSWERED_RCODES:
            raise ProviderError(self.name, f"DNS status {data['Status']}")

        if data.get("Answer"):
            return AvailabilityResult.from_status(STATUS_ACTIVE, self.name)
        return AvailabilityResult.from_status(STATUS_AVAILABLE, self.name)
