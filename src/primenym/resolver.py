"""
Domain Availability Resolver

Looks up one domain key at a time:

1. fresh cache entry -> return it, no network
2. Domainr (only when an API key is configured)
3. DNS-over-HTTPS fallback (when enabled)
4. nothing worked -> neutral "unknown" result ("error" when no fallback)

Every outcome, including the neutral one, is written back to the cache.
Nothing in here raises to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from .cache import DEFAULT_TTL, TTLCache
from .config import DEFAULT_EXTENSIONS, DEFAULT_HTTP_TIMEOUT, Settings
from .labels import domain_key, normalize_extension, normalize_label
from .providers import (
    AvailabilityResult,
    DnsOverHttpsProvider,
    DomainrProvider,
    ProviderError,
    is_usable_api_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainCheck:
    """A resolved domain key together with the name it came from."""

    name: str
    domain: str
    extension: str
    result: AvailabilityResult

    @property
    def available(self) -> bool | None:
        return self.result.available

    @property
    def status(self) -> str:
        return self.result.status

    @property
    def source(self) -> str | None:
        return self.result.source


class DomainAvailabilityResolver:
    """
    Cache-fronted domain availability lookups with a provider fallback chain.

    The resolver owns its cache and its HTTP client. Pass `transport` (e.g.
    httpx.MockTransport) or a ready `client` to control the network side.

    Usage:
        async with DomainAvailabilityResolver(api_key=key) as resolver:
            check = await resolver.check("Eco Verve", ".com")
            checks = await resolver.check_extensions("acme")
    """

    def __init__(
        self,
        api_key: str | None = None,
        cache: TTLCache[AvailabilityResult] | None = None,
        dns_fallback: bool = True,
        extensions: list[str] | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cache = cache if cache is not None else TTLCache(ttl=DEFAULT_TTL)
        self.dns_fallback = dns_fallback
        self.extensions = [normalize_extension(e) for e in (extensions or DEFAULT_EXTENSIONS)]
        if api_key and not is_usable_api_key(api_key):
            logger.warning("RapidAPI key is not printable ASCII, Domainr lookups disabled")
            api_key = None
        self._api_key = api_key or None
        self._timeout = timeout
        self._transport = transport
        self._client = client
        self._owns_client = client is None
        self._providers: list[DomainrProvider | DnsOverHttpsProvider] | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "DomainAvailabilityResolver":
        return cls(
            api_key=settings.api_key,
            cache=TTLCache(ttl=settings.cache_ttl),
            dns_fallback=settings.dns_fallback,
            extensions=settings.extensions,
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "DomainAvailabilityResolver":
        self._get_client()
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._providers = None

    @property
    def has_primary(self) -> bool:
        """True when the authenticated Domainr provider is part of the chain."""
        return self._api_key is not None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def _get_providers(self) -> list[DomainrProvider | DnsOverHttpsProvider]:
        if self._providers is None:
            client = self._get_client()
            providers: list[DomainrProvider | DnsOverHttpsProvider] = []
            if self._api_key:
                providers.append(DomainrProvider(client, self._api_key))
            if self.dns_fallback:
                providers.append(DnsOverHttpsProvider(client))
            self._providers = providers
        return self._providers

    async def _lookup_upstream(self, key: str) -> AvailabilityResult:
        """Walk the provider chain once; the first provider that answers wins."""
        if not self.has_primary:
            logger.debug("No RapidAPI key configured, skipping Domainr for %s", key)

        for provider in self._get_providers():
            try:
                return await provider.lookup(key)
            except ProviderError as e:
                logger.warning("Domain check for %s failed: %s", key, e)
            except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
                logger.warning(
                    "Domain check for %s failed: %s: %s",
                    key, provider.name, e.__class__.__name__,
                )

        if self.dns_fallback:
            return AvailabilityResult.unknown()
        return AvailabilityResult.error()

    async def check_domain(self, key: str, force_refresh: bool = False) -> AvailabilityResult:
        """
        Resolve availability for a domain key such as "acme.com".

        A fresh cache entry is returned without touching the network unless
        force_refresh is set.
        """
        key = key.strip().lower()
        if not key or key.startswith("."):
            return AvailabilityResult.invalid()

        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                return cached

        result = await self._lookup_upstream(key)
        self.cache.set(key, result)
        return result

    async def check(
        self,
        name: str,
        extension: str = ".com",
        force_refresh: bool = False,
    ) -> DomainCheck:
        """Normalize a name, attach the extension, and resolve the domain key."""
        label = normalize_label(name)
        extension = normalize_extension(extension)
        key = domain_key(label, extension)

        if not label or not extension:
            return DomainCheck(name, key, extension, AvailabilityResult.invalid())

        result = await self.check_domain(key, force_refresh=force_refresh)
        return DomainCheck(name, key, extension, result)

    async def check_extensions(
        self,
        name: str,
        extensions: list[str] | None = None,
        force_refresh: bool = False,
    ) -> list[DomainCheck]:
        """
        Check one name against several extensions concurrently.

        Results come back in extension order. Lookups are independent: one
        extension failing has no effect on the others.
        """
        if extensions is None:
            extensions = self.extensions

        # Duplicates would only race each other for the same cache slot
        extensions = list(dict.fromkeys(normalize_extension(e) for e in extensions))

        tasks = [self.check(name, ext, force_refresh=force_refresh) for ext in extensions]
        return list(await asyncio.gather(*tasks))
