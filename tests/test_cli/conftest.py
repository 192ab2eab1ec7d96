"""Test fixtures for CLI tests."""

import logging
from collections.abc import Generator

import pytest

from keysmith.cli.commands.dependencies import (
    get_firmware_service,
    get_geometry_service,
    get_layout_service,
)


@pytest.fixture(autouse=True)
def fresh_services() -> Generator[None, None, None]:
    """Drop cached services and log handlers bound to the runner's streams."""
    get_layout_service.cache_clear()
    get_geometry_service.cache_clear()
    get_firmware_service.cache_clear()
    yield
    get_layout_service.cache_clear()
    get_geometry_service.cache_clear()
    get_firmware_service.cache_clear()
    logging.getLogger().handlers = []
