"""Test configuration for batchers."""

import pytest

from contract_helper.batchers.base import BatchConfig

from fakes import FakeMulticall


@pytest.fixture
def fake_multicall():
    """Outward multicall that always succeeds."""
    return FakeMulticall()


@pytest.fixture
def fast_config():
    """Batch configuration with short windows and delays."""
    return BatchConfig(
        debounce_window=0.05,
        max_pending_length=10,
        multicall_attempts=5,
        callback_attempts=5,
        retry_delay=0.001,
    )
