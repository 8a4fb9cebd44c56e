"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.geometry import (
    Dimensions,
    TrimSize,
    PrintableArea,
    SheetSize,
    SheetPreset,
    SheetSizeSpec,
    MarginConfig,
    resolve_sheet_size,
)
from models.layout import (
    LayoutResult,
    ProductSizeValidation,
    LayoutRequest,
    OptimalSheetRequest,
    SizeValidationRequest,
)
from models.material import MaterialCandidate
from models.compatibility import (
    ExclusionReason,
    DensityRange,
    MaterialConstraints,
    ConstraintOverrides,
    ProductConstraints,
    ResolveSpecs,
    ResolveResultItem,
    ExclusionRecord,
    ResolveResult,
    CompatibleMaterialsRequest,
)

__all__ = [
    # Base
    "BaseSchema",

    # Geometry
    "Dimensions",
    "TrimSize",
    "PrintableArea",
    "SheetSize",
    "SheetPreset",
    "SheetSizeSpec",
    "MarginConfig",
    "resolve_sheet_size",

    # Layout
    "LayoutResult",
    "ProductSizeValidation",
    "LayoutRequest",
    "OptimalSheetRequest",
    "SizeValidationRequest",

    # Material
    "MaterialCandidate",

    # Compatibility
    "ExclusionReason",
    "DensityRange",
    "MaterialConstraints",
    "ConstraintOverrides",
    "ProductConstraints",
    "ResolveSpecs",
    "ResolveResultItem",
    "ExclusionRecord",
    "ResolveResult",
    "CompatibleMaterialsRequest",
]
