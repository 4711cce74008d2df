"""Shared test fixtures."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from nacl import encoding, public

from foundry.github.base import GitHubAPI


@pytest.fixture
def github() -> AsyncMock:
    """A fake GitHub capability; every operation is an AsyncMock."""
    return AsyncMock(spec=GitHubAPI)


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def keypair() -> public.PrivateKey:
    """A repository keypair, standing in for GitHub's secret key."""
    return public.PrivateKey.generate()


@pytest.fixture
def public_key_b64(keypair) -> str:
    return keypair.public_key.encode(encoding.Base64Encoder).decode("utf-8")
