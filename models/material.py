"""
Material schemas.

MaterialCandidate is a read-only snapshot of one inventory row.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema
from models.geometry import PrintableArea, SheetSize


class MaterialCandidate(BaseSchema):
    """
    Stock material that may be used to print a product.

    Sourced from the materials inventory; never modified here.
    """

    id: int = Field(..., description="Material ID")
    name: str = Field(..., description="Material name")
    category_name: Optional[str] = Field(None, description="Material category, e.g. 'Бумага'")
    density: Optional[float] = Field(None, description="Paper density (g/m²)")
    finish: Optional[str] = Field(None, description="Surface finish, e.g. 'matte'")
    price_per_sheet: float = Field(0, description="Price of a single sheet")
    printable_width: Optional[float] = Field(None, description="Printable width (mm)")
    printable_height: Optional[float] = Field(None, description="Printable height (mm)")
    sheet_width: Optional[float] = Field(None, description="Raw sheet width (mm)")
    sheet_height: Optional[float] = Field(None, description="Raw sheet height (mm)")
    quantity: float = Field(0, description="Sheets in stock")

    @property
    def printable_area(self) -> Optional[PrintableArea]:
        """Own printable area, if both dimensions are set."""
        if (self.printable_width or 0) > 0 and (self.printable_height or 0) > 0:
            return PrintableArea(width=self.printable_width, height=self.printable_height)
        return None

    @property
    def sheet_size(self) -> Optional[SheetSize]:
        """Raw sheet size, if both dimensions are set."""
        if (self.sheet_width or 0) > 0 and (self.sheet_height or 0) > 0:
            return SheetSize(width=self.sheet_width, height=self.sheet_height)
        return None
