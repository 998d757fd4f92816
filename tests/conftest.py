"""
Pytest configuration and shared fixtures.

Resets the process-wide logging and configuration state between tests and
provides a fixed instance token and a mock logger for channel negotiation.
"""

from unittest.mock import Mock

import pytest

from serverless_compat.core.config import clear_cache
from serverless_compat.utils.log import (
    DEFAULT_MAX_FRAMES,
    reset_log_threshold,
    set_max_frames,
)

# 19 characters, so the base-name cap is 247 - 19 - 1 = 227
TEST_TOKEN = "test-guid-1234-5678"


@pytest.fixture(autouse=True)
def fresh_process_state():
    """Give every test a freshly initialised threshold, config and frame cap."""
    reset_log_threshold()
    clear_cache()
    set_max_frames(DEFAULT_MAX_FRAMES)
    yield
    reset_log_threshold()
    clear_cache()
    set_max_frames(DEFAULT_MAX_FRAMES)


@pytest.fixture
def mock_logger():
    """Logger double recording debug/info/warn/error calls."""
    return Mock(spec=["debug", "info", "warn", "error"])


@pytest.fixture
def token_factory():
    """Token source that always returns TEST_TOKEN."""
    return lambda: TEST_TOKEN
