"""Website discovery for organisations over HTTP.

Strategies run in order and the first success wins:

1. direct domain: ``<name>.<tld>`` for each configured TLD
2. domain variations: hyphenated, first word, first two words
3. search discovery: result links from a search page, filtered by name affinity

A candidate URL is accepted when a HEAD request (redirects followed)
answers 2xx/3xx within the per-attempt timeout.
"""

import logging
import re
from typing import Callable
from urllib.parse import unquote, urlparse

import httpx

from config import settings
from models.schemas.company_info import CompanyInfo
from services.enrichment import normalize_company

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]

SKIP_DOMAINS = (
    "google.com", "facebook.com", "linkedin.com", "twitter.com",
    "youtube.com", "wikipedia.org", "crunchbase.com", "glassdoor.com",
)
_RESULT_LINK_RE = re.compile(r'href="/url\?q=([^&"]+)&')
_DIRECT_LINK_RE = re.compile(r'href="(https?://[^"]+)"')


class WebsiteNotFound(Exception):
    """Raised by a discovery strategy that found no reachable site."""


def domain_variations(normalized: str) -> list[str]:
    """Candidate second-level labels beyond the plain concatenation."""
    words = normalized.split()
    if not words:
        return []
    candidates = ["-".join(words), words[0], "".join(words[:2])]
    seen = {"".join(words)}
    variations = []
    for candidate in candidates:
        if candidate and candidate not in seen:
            seen.add(candidate)
            variations.append(candidate)
    return variations


def is_likely_company_site(url: str, normalized: str) -> bool:
    """True when a search hit's host plausibly belongs to the organisation."""
    hostname = (urlparse(url).hostname or "").lower()
    if not hostname or any(skip in hostname for skip in SKIP_DOMAINS):
        return False
    main = hostname.removeprefix("www.").split(".")[0]
    for word in normalized.split():
        if len(word) > 2 and (word in main or main in word):
            return True
    compact_name = re.sub(r"[^a-z0-9]", "", normalized)
    compact_main = re.sub(r"[^a-z0-9]", "", main)
    return bool(compact_main) and (compact_name in compact_main or compact_main in compact_name)


def _default_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.lookup_timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
    )


class CompanyLookupService:
    """Resolves an organisation name to its homepage.

    A name with no reachable site comes back as a bare
    ``CompanyInfo(name=...)``.
    """

    def __init__(self, client_factory: ClientFactory | None = None):
        self._client_factory = client_factory or _default_client

    async def resolve(self, name: str) -> CompanyInfo:
        normalized = normalize_company(name)
        if not normalized:
            return CompanyInfo(name=name)

        async with self._client_factory() as client:
            strategies = (
                self._try_direct_domain,
                self._try_domain_variations,
                self._try_search,
            )
            for strategy in strategies:
                try:
                    website = await strategy(client, normalized)
                except WebsiteNotFound:
                    continue
                logger.info("Found website for %s: %s", name, website)
                return CompanyInfo(
                    name=name, website=website, domain=urlparse(website).hostname
                )

        logger.debug("No website found for %s", name)
        return CompanyInfo(name=name)

    async def is_valid_website(self, client: httpx.AsyncClient, url: str) -> bool:
        try:
            response = await client.head(
                url, timeout=settings.lookup_timeout_seconds, follow_redirects=True
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("HEAD %s failed: %s", url, e)
            return False
        return 200 <= response.status_code < 400

    async def _first_valid(self, client: httpx.AsyncClient, labels: list[str]) -> str:
        for label in labels:
            for tld in settings.lookup_tlds:
                url = f"https://{label}.{tld}"
                if await self.is_valid_website(client, url):
                    return url
        raise WebsiteNotFound(labels)

    async def _try_direct_domain(self, client: httpx.AsyncClient, normalized: str) -> str:
        return await self._first_valid(client, [normalized.replace(" ", "")])

    async def _try_domain_variations(self, client: httpx.AsyncClient, normalized: str) -> str:
        return await self._first_valid(client, domain_variations(normalized))

    async def _try_search(self, client: httpx.AsyncClient, normalized: str) -> str:
        try:
            response = await client.get(
                settings.search_url,
                params={"q": f"{normalized} official website", "num": 5},
                timeout=settings.lookup_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise WebsiteNotFound(normalized) from e

        candidates = [unquote(u) for u in _RESULT_LINK_RE.findall(response.text)]
        candidates += _DIRECT_LINK_RE.findall(response.text)
        hits = [u for u in candidates if is_likely_company_site(u, normalized)]
        for url in hits[: settings.search_result_limit]:
            if await self.is_valid_website(client, url):
                return url
        raise WebsiteNotFound(normalized)
