"""Shared test configuration, pytest markers and lookup doubles."""

import asyncio

import pytest

from models.schemas.company_info import CompanyInfo


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: runs the full structuring engine on raw resume text"
    )


class FakeResolver:
    """Records every name it is asked to resolve."""

    def __init__(self, websites: dict[str, str] | None = None, delay: float = 0.0):
        self.websites = websites or {}
        self.delay = delay
        self.calls: list[str] = []

    async def resolve(self, name: str) -> CompanyInfo:
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        return CompanyInfo(name=name, website=self.websites.get(name))


class FailingResolver:
    def __init__(self):
        self.calls: list[str] = []

    async def resolve(self, name: str) -> CompanyInfo:
        self.calls.append(name)
        raise TimeoutError(f"lookup timed out for {name}")


@pytest.fixture
def fake_resolver():
    return FakeResolver()


@pytest.fixture
def failing_resolver():
    return FailingResolver()
