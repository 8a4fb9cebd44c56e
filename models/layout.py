"""
Layout (imposition) schemas.

Request bodies and results for the sheet layout calculator.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema
from models.geometry import TrimSize, SheetSize, SheetSizeSpec


class LayoutResult(BaseSchema):
    """
    How a trim size is imposed on one sheet.

    Derived on every call, never persisted.
    """

    items_per_sheet: int = Field(..., ge=0, description="Items that fit on one sheet")
    rows: int = Field(..., ge=0)
    cols: int = Field(..., ge=0)
    fits: bool = Field(..., description="At least one item fits")
    rotated: bool = Field(False, description="Items turned 90° on the sheet")
    waste_percentage: float = Field(100, description="Unused share of the available area")
    cuts_per_sheet: int = Field(0, ge=0, description="Guillotine cuts: cols + rows + 2")
    sheet: Optional[SheetSize] = Field(None, description="Sheet the layout was computed for")


class ProductSizeValidation(BaseSchema):
    """Result of checking a trim size against a product type's size window."""

    is_valid: bool
    message: Optional[str] = None
    recommended_size: Optional[TrimSize] = None


# ===================
# REQUEST BODIES
# ===================

class LayoutRequest(BaseSchema):
    """Lay out a trim size on a preset or explicit sheet."""

    trim_size: TrimSize
    sheet: SheetSizeSpec = Field(..., description='Preset name ("SRA3") or {width, height}')


class OptimalSheetRequest(BaseSchema):
    """Find the best standard sheet for a trim size."""

    trim_size: TrimSize


class SizeValidationRequest(BaseSchema):
    """Check a trim size against a product type."""

    product_type: str = Field(..., min_length=1, examples=["business_cards", "flyers"])
    trim_size: TrimSize
