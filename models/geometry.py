"""
Geometry schemas: trim sizes, sheets and layout margins.

All dimensions are in millimeters.
"""

from pydantic import ConfigDict, Field
from typing import Optional, Union
from enum import Enum

from config.print_sheets import SHEET_PRESETS
from models.base import BaseSchema


class Dimensions(BaseSchema):
    """Width x height rectangle, immutable once built."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(..., gt=0, description="Width (mm)")
    height: float = Field(..., gt=0, description="Height (mm)")

    def rotated(self) -> "Dimensions":
        """Same rectangle turned 90°."""
        return type(self)(width=self.height, height=self.width)


class TrimSize(Dimensions):
    """Finished (cut) product size."""


class PrintableArea(Dimensions):
    """Usable area of a sheet, before layout margins are applied."""


class SheetSize(Dimensions):
    """Nominal stock sheet size."""


class SheetPreset(str, Enum):
    """Named stock sheets."""
    SRA3 = "SRA3"
    A3 = "A3"
    B3 = "B3"
    B2 = "B2"
    A4 = "A4"

    @property
    def size(self) -> SheetSize:
        width, height = SHEET_PRESETS[self.value]
        return SheetSize(width=width, height=height)


# Either a named preset ("SRA3") or explicit {width, height}
SheetSizeSpec = Union[SheetPreset, SheetSize]


def resolve_sheet_size(sheet: Optional[SheetSizeSpec]) -> Optional[SheetSize]:
    """
    Turn a preset name or explicit size into concrete dimensions.

    Args:
        sheet: SheetPreset, SheetSize or None

    Returns:
        SheetSize, or None when no sheet was requested
    """
    if sheet is None:
        return None
    if isinstance(sheet, SheetPreset):
        return sheet.size
    return SheetSize(width=sheet.width, height=sheet.height)


class MarginConfig(BaseSchema):
    """
    Technical margins used by the layout calculator.

    bleed is added on both sides of the layout, gap between items,
    gripper is taken off the sheet width only.
    """

    model_config = ConfigDict(frozen=True)

    bleed: float = Field(2, ge=0, description="Trim-edge allowance (mm)")
    gap: float = Field(2, ge=0, description="Spacing between items (mm)")
    gripper: float = Field(5, ge=0, description="Press grip exclusion on width (mm)")
    safety_margin: float = Field(3, ge=0, description="Extra footprint allowance (mm)")
    tie_break_max_item_loss: int = Field(
        4,
        ge=0,
        description="Max items given up to prefer the rotated layout"
    )
    tie_break_min_clearance: float = Field(
        15,
        ge=0,
        description="Leftover space (mm) below which a layout counts as tight"
    )

    @classmethod
    def from_settings(cls, settings) -> "MarginConfig":
        """Build margins from application settings."""
        return cls(
            bleed=settings.layout_bleed_mm,
            gap=settings.layout_gap_mm,
            gripper=settings.layout_gripper_mm,
            safety_margin=settings.layout_safety_margin_mm,
            tie_break_max_item_loss=settings.layout_tie_break_max_item_loss,
            tie_break_min_clearance=settings.layout_tie_break_min_clearance_mm,
        )
