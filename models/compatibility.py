"""
Material compatibility schemas.

Constraints mirror the JSON stored in product_configs.constraints:

    {
        "materials": {
            "allowed_categories": ["Бумага"],
            "density": {"min": 200, "max": 350},
            "finishes": ["matte"]
        },
        "overrides": {"include_ids": [], "exclude_ids": [12]}
    }
"""

from pydantic import Field, field_validator, model_validator
from typing import Optional
from enum import Enum

from models.base import BaseSchema
from models.geometry import TrimSize, SheetSizeSpec
from models.material import MaterialCandidate


class ExclusionReason(str, Enum):
    """Why a material was left out of the candidates."""
    EXCLUDED_BY_OVERRIDE = "excluded_by_override"
    NOT_IN_INCLUDE_LIST = "not_in_include_list"
    CATEGORY_NOT_ALLOWED = "category_not_allowed"
    DENSITY_OUT_OF_RANGE = "density_out_of_range"
    FINISH_NOT_ALLOWED = "finish_not_allowed"
    NO_PRINTABLE_AREA = "no_printable_area"
    DOES_NOT_FIT = "does_not_fit"


# ===================
# CONSTRAINTS
# ===================

class DensityRange(BaseSchema):
    """Inclusive density window (g/m²)."""

    min: float
    max: float

    @model_validator(mode="after")
    def check_order(self) -> "DensityRange":
        if self.min > self.max:
            raise ValueError("density min must not exceed max")
        return self

    def contains(self, density: Optional[float]) -> bool:
        """Missing density counts as 0."""
        value = density if density is not None else 0
        return self.min <= value <= self.max


class MaterialConstraints(BaseSchema):
    """Material filters for a product."""

    allowed_categories: list[str] = Field(default_factory=list)
    density: Optional[DensityRange] = None
    finishes: list[str] = Field(default_factory=list)

    @field_validator("allowed_categories", "finishes", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v if v is not None else []


class ConstraintOverrides(BaseSchema):
    """Explicit material include / exclude lists."""

    include_ids: list[int] = Field(default_factory=list)
    exclude_ids: list[int] = Field(default_factory=list)

    @field_validator("include_ids", "exclude_ids", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v if v is not None else []


class ProductConstraints(BaseSchema):
    """All material constraints configured for a product."""

    materials: MaterialConstraints = Field(default_factory=MaterialConstraints)
    overrides: ConstraintOverrides = Field(default_factory=ConstraintOverrides)

    @field_validator("materials", "overrides", mode="before")
    @classmethod
    def none_to_default(cls, v):
        return v if v is not None else {}


# ===================
# RESOLVE REQUEST / RESULT
# ===================

class ResolveSpecs(BaseSchema):
    """
    What to resolve materials for.

    trim_size may be omitted when a product_id is given and the product
    configuration stores one.
    """

    trim_size: Optional[TrimSize] = Field(None, description="Finished item size (mm)")
    quantity: int = Field(..., ge=1, description="Items to print")
    print_sheet: Optional[SheetSizeSpec] = Field(
        None,
        description='Preset name ("SRA3", "A3", "B3", "B2") or {width, height}'
    )
    constraints: Optional[ProductConstraints] = None


class ResolveResultItem(BaseSchema):
    """A compatible material with its layout and score."""

    material: MaterialCandidate
    items_per_sheet: int = Field(..., ge=1)
    sheets_needed: int = Field(..., ge=1)
    efficiency: float = Field(..., description="items_per_sheet / price_per_sheet")


class ExclusionRecord(BaseSchema):
    """A material that was filtered out, with every reason that applied."""

    material_id: int
    material_name: str
    reasons: list[ExclusionReason]


class ResolveResult(BaseSchema):
    """Ranked candidates, the top pick and the exclusion trail."""

    picked: Optional[ResolveResultItem] = None
    candidates: list[ResolveResultItem] = Field(default_factory=list)
    excluded: list[ExclusionRecord] = Field(default_factory=list)


class CompatibleMaterialsRequest(ResolveSpecs):
    """Request body for the compatible materials endpoint."""

    product_id: Optional[int] = Field(None, description="Product whose stored constraints apply")
