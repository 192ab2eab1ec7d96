"""Physical keyboard geometry and the matrix / LED / visual mapping."""

from keysmith.geometry.builder import (
    DEFAULT_ROW_TOLERANCE,
    GeometryResult,
    build_geometry,
    cluster_rows,
)
from keysmith.geometry.models import (
    HardwareDescription,
    KeyboardGeometry,
    MatrixPosition,
    PhysicalKey,
    VisualKey,
    VisualLayoutMapping,
)
from keysmith.geometry.qmk_info import list_layout_variants, load_qmk_info_json
from keysmith.geometry.service import (
    GeometryService,
    create_geometry_service,
    parse_hardware_data,
)


__all__ = [
    "DEFAULT_ROW_TOLERANCE",
    "GeometryResult",
    "GeometryService",
    "HardwareDescription",
    "KeyboardGeometry",
    "MatrixPosition",
    "PhysicalKey",
    "VisualKey",
    "VisualLayoutMapping",
    "build_geometry",
    "cluster_rows",
    "create_geometry_service",
    "list_layout_variants",
    "load_qmk_info_json",
    "parse_hardware_data",
]
