"""Shared service factories for CLI commands."""

from functools import lru_cache

import typer

from keysmith.config import KeysmithSettings, create_user_config
from keysmith.core.structlog_logger import get_struct_logger
from keysmith.firmware import FirmwareService, create_firmware_service
from keysmith.geometry import GeometryService, create_geometry_service
from keysmith.layout import LayoutService, create_layout_service


logger = get_struct_logger(__name__)


@lru_cache(maxsize=1)
def get_layout_service() -> LayoutService:
    """Layout service shared by all commands of one CLI session."""
    logger.debug("creating_layout_service")
    return create_layout_service()


@lru_cache(maxsize=4)
def get_geometry_service(row_tolerance: float) -> GeometryService:
    """Geometry service for one row tolerance, so built geometry is reused."""
    logger.debug("creating_geometry_service", row_tolerance=row_tolerance)
    return create_geometry_service(row_tolerance=row_tolerance)


@lru_cache(maxsize=1)
def get_firmware_service() -> FirmwareService:
    logger.debug("creating_firmware_service")
    return create_firmware_service()


def get_settings(ctx: typer.Context) -> KeysmithSettings:
    """Settings loaded by the app callback, or freshly loaded defaults."""
    app_context = ctx.find_root().obj
    if app_context is not None:
        return app_context.user_config.settings  # type: ignore[no-any-return]
    return create_user_config().settings


__all__ = [
    "get_firmware_service",
    "get_geometry_service",
    "get_layout_service",
    "get_settings",
]
