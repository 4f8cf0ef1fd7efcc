"""Tests for the website enrichment pipeline."""

import asyncio

import pytest

from conftest import FakeResolver
from models.schemas.resume_parsed import Education, WorkExperience
from services.enrichment import (
    COMPANY_TARGET,
    INSTITUTION_TARGET,
    KNOWN_COMPANIES,
    EnrichmentPipeline,
    match_known,
    normalize_company,
    normalize_institution,
)


def _work(company, position="Engineer"):
    return WorkExperience(company=company, position=position, description=["Did things"])


def test_normalize_company():
    assert normalize_company("Google Inc.") == "google"
    assert normalize_company("  First American   Title Co. ") == "first american title"
    assert normalize_company("LLC") == ""


def test_normalize_institution():
    assert normalize_institution("Stanford University") == "stanford"
    assert normalize_institution("University of Michigan") == "of michigan"


def test_match_known_fuzzy():
    assert match_known("google", KNOWN_COMPANIES) == "https://www.google.com"
    assert match_known("google cloud", KNOWN_COMPANIES) == "https://www.google.com"
    assert match_known("red", KNOWN_COMPANIES) == "https://www.redhat.com"
    assert match_known("initech", KNOWN_COMPANIES) is None
    assert match_known("", KNOWN_COMPANIES) is None


@pytest.mark.asyncio
async def test_known_company_skips_network(fake_resolver):
    pipeline = EnrichmentPipeline(fake_resolver)
    [result] = await pipeline.enrich([_work("Google Inc.")], COMPANY_TARGET)
    assert result.website == "https://www.google.com"
    assert fake_resolver.calls == []


@pytest.mark.asyncio
async def test_known_institution():
    resolver = FakeResolver()
    pipeline = EnrichmentPipeline(resolver)
    [result] = await pipeline.enrich(
        [Education(institution="University of Michigan")], INSTITUTION_TARGET
    )
    assert result.website == "https://www.umich.edu"
    assert resolver.calls == []


@pytest.mark.asyncio
async def test_unknown_company_uses_resolver():
    resolver = FakeResolver({"Initech": "https://initech.com"})
    pipeline = EnrichmentPipeline(resolver)
    [result] = await pipeline.enrich([_work("Initech")], COMPANY_TARGET)
    assert result.website == "https://initech.com"
    assert resolver.calls == ["Initech"]


@pytest.mark.asyncio
async def test_one_lookup_per_normalised_name():
    resolver = FakeResolver({"Initech": "https://initech.com"}, delay=0.01)
    pipeline = EnrichmentPipeline(resolver)
    items = [_work("Initech"), _work("Initech, Inc."), _work("INITECH LLC")]

    results = await pipeline.enrich(items, COMPANY_TARGET)
    assert resolver.calls == ["Initech"]
    assert [r.website for r in results] == ["https://initech.com"] * 3

    # later calls hit the cache
    await pipeline.enrich([_work("Initech Corp")], COMPANY_TARGET)
    assert resolver.calls == ["Initech"]
    assert pipeline.cache_size == 1


@pytest.mark.asyncio
async def test_misses_are_cached_too(fake_resolver):
    pipeline = EnrichmentPipeline(fake_resolver)
    await pipeline.enrich([_work("Initech")], COMPANY_TARGET)
    await pipeline.enrich([_work("Initech")], COMPANY_TARGET)
    assert fake_resolver.calls == ["Initech"]


@pytest.mark.asyncio
async def test_clear_cache(fake_resolver):
    pipeline = EnrichmentPipeline(fake_resolver)
    await pipeline.enrich([_work("Initech")], COMPANY_TARGET)
    pipeline.clear_cache()
    await pipeline.enrich([_work("Initech")], COMPANY_TARGET)
    assert fake_resolver.calls == ["Initech", "Initech"]


@pytest.mark.asyncio
async def test_failures_never_raise(failing_resolver):
    pipeline = EnrichmentPipeline(failing_resolver)
    items = [_work("Initech"), _work("Globex"), _work("Umbrella")]

    results = await pipeline.enrich(items, COMPANY_TARGET)
    assert results == items
    assert all(r.website is None for r in results)
    assert sorted(failing_resolver.calls) == ["Globex", "Initech", "Umbrella"]


@pytest.mark.asyncio
async def test_order_follows_input_not_completion():
    class SlowFirst:
        async def resolve(self, name):
            import asyncio
            from models.schemas.company_info import CompanyInfo

            await asyncio.sleep(0.05 if name == "Alpha" else 0)
            return CompanyInfo(name=name, website=f"https://{name.lower()}.com")

    pipeline = EnrichmentPipeline(SlowFirst())
    results = await pipeline.enrich([_work("Alpha"), _work("Beta")], COMPANY_TARGET)
    assert [r.website for r in results] == ["https://alpha.com", "https://beta.com"]


@pytest.mark.asyncio
async def test_blank_keys_pass_through(fake_resolver):
    pipeline = EnrichmentPipeline(fake_resolver)
    blank = _work("   ")
    suffix_only = _work("Inc.")
    results = await pipeline.enrich([blank, suffix_only], COMPANY_TARGET)
    assert results[0] is blank
    assert results[1] is suffix_only
    assert fake_resolver.calls == []


@pytest.mark.asyncio
async def test_items_are_copied_not_mutated():
    resolver = FakeResolver({"Initech": "https://initech.com"})
    pipeline = EnrichmentPipeline(resolver)
    original = _work("Initech")
    [result] = await pipeline.enrich([original], COMPANY_TARGET)
    assert original.website is None
    assert result.website == "https://initech.com"
    assert result.company == original.company


@pytest.mark.asyncio
async def test_empty_list(fake_resolver):
    assert await EnrichmentPipeline(fake_resolver).enrich([], COMPANY_TARGET) == []


@pytest.mark.asyncio
async def test_cancelled_caller_leaves_lookup_usable():
    resolver = FakeResolver({"Initech": "https://initech.com"}, delay=0.05)
    pipeline = EnrichmentPipeline(resolver)

    task = asyncio.ensure_future(pipeline.enrich([_work("Initech")], COMPANY_TARGET))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    [result] = await pipeline.enrich([_work("Initech")], COMPANY_TARGET)
    assert result.website == "https://initech.com"
    assert resolver.calls == ["Initech"]


@pytest.mark.asyncio
async def test_cancelled_lookup_is_retried():
    resolver = FakeResolver({"Initech": "https://initech.com"}, delay=0.05)
    pipeline = EnrichmentPipeline(resolver)

    task = asyncio.ensure_future(pipeline.enrich([_work("Initech")], COMPANY_TARGET))
    await asyncio.sleep(0.01)
    pipeline._pending["initech"].cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert pipeline._pending == {}
    assert pipeline.cache_size == 0

    [result] = await pipeline.enrich([_work("Initech")], COMPANY_TARGET)
    assert result.website == "https://initech.com"
    assert resolver.calls == ["Initech", "Initech"]
