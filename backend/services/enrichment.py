"""Website enrichment for work experience and education entries.

One pipeline serves both entity kinds. An ``EnrichmentTarget`` supplies the
key extractor, the normaliser and the known-website table; the network
lookup is a ``WebsiteResolver`` collaborator. Lookups are memoised per
normalised name for the lifetime of the pipeline, and a failing lookup only
means "no website".
"""

import asyncio
import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Callable, Mapping, Protocol, TypeVar

from pydantic import BaseModel

from models.schemas.company_info import CompanyInfo
from models.schemas.resume_parsed import Education, WorkExperience

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class WebsiteResolver(Protocol):
    async def resolve(self, name: str) -> CompanyInfo: ...


@dataclass(frozen=True)
class EnrichmentTarget:
    entity_type: str
    get_key: Callable[[BaseModel], str | None]
    normalize_key: Callable[[str], str]
    known_mappings: Mapping[str, str] = field(default_factory=dict)


KNOWN_COMPANIES: dict[str, str] = {
    "google": "https://www.google.com",
    "microsoft": "https://www.microsoft.com",
    "apple": "https://www.apple.com",
    "amazon": "https://www.amazon.com",
    "facebook": "https://www.facebook.com",
    "meta": "https://www.meta.com",
    "netflix": "https://www.netflix.com",
    "spotify": "https://www.spotify.com",
    "airbnb": "https://www.airbnb.com",
    "uber": "https://www.uber.com",
    "lyft": "https://www.lyft.com",
    "tesla": "https://www.tesla.com",
    "kaseya": "https://www.kaseya.com",
    "ainsworth game technology": "https://www.ainsworth.com.au",
    "ainsworth": "https://www.ainsworth.com.au",
    "ibm": "https://www.ibm.com",
    "oracle": "https://www.oracle.com",
    "salesforce": "https://www.salesforce.com",
    "adobe": "https://www.adobe.com",
    "intel": "https://www.intel.com",
    "nvidia": "https://www.nvidia.com",
    "amd": "https://www.amd.com",
    "cisco": "https://www.cisco.com",
    "vmware": "https://www.vmware.com",
    "red hat": "https://www.redhat.com",
    "redhat": "https://www.redhat.com",
    "mongodb": "https://www.mongodb.com",
    "atlassian": "https://www.atlassian.com",
    "slack": "https://slack.com",
    "zoom": "https://zoom.us",
    "dropbox": "https://www.dropbox.com",
    "github": "https://github.com",
    "gitlab": "https://gitlab.com",
    "bitbucket": "https://bitbucket.org",
    "jira": "https://www.atlassian.com/software/jira",
    "confluence": "https://www.atlassian.com/software/confluence",
    "first american title": "https://www.firstam.com",
    "first american": "https://www.firstam.com",
    "enterprise data concepts": "https://edcnow.com",
    "edc": "https://edcnow.com",
}

KNOWN_INSTITUTIONS: dict[str, str] = {
    "university of louisiana at lafayette": "https://www.louisiana.edu",
    "ull": "https://www.louisiana.edu",
    "louisiana": "https://www.louisiana.edu",
    "harvard university": "https://www.harvard.edu",
    "harvard": "https://www.harvard.edu",
    "stanford university": "https://www.stanford.edu",
    "stanford": "https://www.stanford.edu",
    "mit": "https://www.mit.edu",
    "massachusetts institute of technology": "https://www.mit.edu",
    "university of california berkeley": "https://www.berkeley.edu",
    "uc berkeley": "https://www.berkeley.edu",
    "berkeley": "https://www.berkeley.edu",
    "university of texas at austin": "https://www.utexas.edu",
    "ut austin": "https://www.utexas.edu",
    "georgia institute of technology": "https://www.gatech.edu",
    "georgia tech": "https://www.gatech.edu",
    "carnegie mellon university": "https://www.cmu.edu",
    "carnegie mellon": "https://www.cmu.edu",
    "cmu": "https://www.cmu.edu",
    "university of washington": "https://www.washington.edu",
    "uw": "https://www.washington.edu",
    "university of michigan": "https://www.umich.edu",
    "umich": "https://www.umich.edu",
    "michigan": "https://www.umich.edu",
    "yale university": "https://www.yale.edu",
    "yale": "https://www.yale.edu",
    "princeton university": "https://www.princeton.edu",
    "princeton": "https://www.princeton.edu",
    "columbia university": "https://www.columbia.edu",
    "columbia": "https://www.columbia.edu",
    "university of pennsylvania": "https://www.upenn.edu",
    "upenn": "https://www.upenn.edu",
    "penn": "https://www.upenn.edu",
    "cornell university": "https://www.cornell.edu",
    "cornell": "https://www.cornell.edu",
    "caltech": "https://www.caltech.edu",
    "california institute of technology": "https://www.caltech.edu",
    "university of southern california": "https://www.usc.edu",
    "usc": "https://www.usc.edu",
    "new york university": "https://www.nyu.edu",
    "nyu": "https://www.nyu.edu",
}


def _collapse(text: str) -> str:
    text = re.sub(r"[^\w\s]", "", text)
    return re.sub(r"\s+", " ", text).strip()


def normalize_company(name: str) -> str:
    name = re.sub(r"\b(?:inc|corp|corporation|ltd|limited|llc|company|co)\b\.?", "", name.lower())
    return _collapse(name)


def normalize_institution(name: str) -> str:
    name = re.sub(r"\b(?:university|college|institute|school)\b", "", name.lower())
    return _collapse(name)


COMPANY_TARGET = EnrichmentTarget(
    entity_type="company",
    get_key=lambda item: item.company if isinstance(item, WorkExperience) else None,
    normalize_key=normalize_company,
    known_mappings=KNOWN_COMPANIES,
)

INSTITUTION_TARGET = EnrichmentTarget(
    entity_type="institution",
    get_key=lambda item: item.institution if isinstance(item, Education) else None,
    normalize_key=normalize_institution,
    known_mappings=KNOWN_INSTITUTIONS,
)


def match_known(normalized: str, mappings: Mapping[str, str]) -> str | None:
    """First table entry equal to, contained in, or containing the name."""
    if not normalized:
        return None
    for key, website in mappings.items():
        if normalized == key or key in normalized or normalized in key:
            return website
    return None


class EnrichmentPipeline:
    """Attach websites to entities, memoising network lookups by normalised name."""

    def __init__(self, resolver: WebsiteResolver):
        self._resolver = resolver
        self._cache: dict[str, CompanyInfo] = {}
        self._pending: dict[str, asyncio.Future] = {}
        self._lock = threading.Lock()

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    async def enrich(self, items: list[T], target: EnrichmentTarget) -> list[T]:
        """Enrich all items concurrently; results keep the input order."""
        if not items:
            return []
        results = await asyncio.gather(*(self._enrich_item(item, target) for item in items))
        return list(results)

    async def _enrich_item(self, item: T, target: EnrichmentTarget) -> T:
        key = target.get_key(item)
        if not key or not key.strip():
            return item

        normalized = target.normalize_key(key)
        if not normalized:
            return item

        website = match_known(normalized, target.known_mappings)
        if website is not None:
            logger.debug("Known %s website for %s: %s", target.entity_type, key, website)
        else:
            info = await self.lookup(normalized, key)
            website = info.website
        return item.model_copy(update={"website": website})

    async def lookup(self, normalized: str, name: str) -> CompanyInfo:
        """Resolve ``name`` once per normalised key; concurrent callers share one lookup."""
        with self._lock:
            cached = self._cache.get(normalized)
            if cached is not None:
                return cached
            pending = self._pending.get(normalized)
            if pending is None or pending.cancelled():
                pending = asyncio.ensure_future(self._resolve(normalized, name))
                self._pending[normalized] = pending
        return await asyncio.shield(pending)

    async def _resolve(self, normalized: str, name: str) -> CompanyInfo:
        try:
            info = await self._resolver.resolve(name)
        except Exception as e:
            logger.warning("Website lookup failed for %s: %s", name, e)
            info = CompanyInfo(name=name)
        finally:
            with self._lock:
                self._pending.pop(normalized, None)
        with self._lock:
            self._cache[normalized] = info
        return info
