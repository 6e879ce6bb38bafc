"""Test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from foreman.core import clear_settings_cache
from foreman.observability import clear_context, reset_logging, reset_tracing

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_state() -> Generator[None, None, None]:
    """Reset settings and observability state around each test."""
    clear_settings_cache()
    reset_logging()
    reset_tracing()
    clear_context()
    yield
    clear_settings_cache()
    reset_logging()
    reset_tracing()
    clear_context()
