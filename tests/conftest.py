from __future__ import annotations

from typing import Callable

import httpx
import pytest

from tests.helpers import Handler


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    def factory(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
