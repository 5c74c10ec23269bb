"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest

from src.ml_client.service import MetaLockedClient
from tests.fakes import FakeWalletProvider, make_client, make_gateway


@pytest.fixture
def provider() -> FakeWalletProvider:
    return FakeWalletProvider()


@pytest.fixture
def gateway() -> AsyncMock:
    return make_gateway()


@pytest.fixture
def ml_client(provider: FakeWalletProvider, gateway: AsyncMock) -> MetaLockedClient:
    return make_client(provider, gateway)
