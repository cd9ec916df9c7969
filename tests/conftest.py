from __future__ import annotations

import pytest

from fakes import FakeFetcher


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
