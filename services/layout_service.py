"""
Layout calculation service: core imposition logic.

Works out how many identical trimmed items fit on one sheet, trying
both orientations and keeping a safety allowance near the sheet edge.

Formula per side of the sheet:
    step      = item + gap
    count     = floor(available / step)
    footprint = count × step − gap + 2 × bleed + safety_margin
    footprint > available → drop one item and recheck, else 0

The gripper is taken off the sheet width only.
"""

from typing import Optional
import math
import structlog

from config import settings
from config.print_sheets import (
    OPTIMAL_SHEET_CANDIDATES,
    FALLBACK_SHEET,
    PRODUCT_SIZE_RULES,
)
from models.geometry import (
    TrimSize,
    PrintableArea,
    SheetSize,
    SheetPreset,
    MarginConfig,
)
from models.layout import LayoutResult, ProductSizeValidation
from exceptions import InvalidTrimSizeError

logger = structlog.get_logger(__name__)


class LayoutService:
    """
    Sheet layout business logic.

    Pure computation: no database access, no shared state. Each
    instance lays out with its own margins.
    """

    def __init__(self, margins: Optional[MarginConfig] = None):
        self.margins = margins or MarginConfig.from_settings(settings)

    # ===================
    # LAYOUT
    # ===================

    def compute_items_per_sheet(self, trim: TrimSize, printable: PrintableArea) -> int:
        """
        Max number of items of a trim size that fit on a printable area.

        Args:
            trim: Finished item size (mm)
            printable: Usable sheet area (mm)

        Returns:
            Items per sheet, 0 when the item doesn't fit either way

        Raises:
            InvalidTrimSizeError: If trim size is not positive
        """
        return self.calculate_layout(trim, printable).items_per_sheet

    def calculate_layout(
        self,
        trim: TrimSize,
        printable: PrintableArea,
        sheet: Optional[SheetSize] = None
    ) -> LayoutResult:
        """
        Lay out a trim size on a printable area.

        Tries the item as given and turned 90°. When the unrotated layout
        wins by only a few items but sits tight against the sheet edge,
        the rotated layout is used instead.

        Args:
            trim: Finished item size (mm)
            printable: Usable sheet area (mm)
            sheet: Nominal sheet, echoed back in the result

        Returns:
            LayoutResult for the chosen orientation

        Raises:
            InvalidTrimSizeError: If trim size is not positive
        """
        self._check_trim(trim)

        available_width, available_height = self._available_area(printable)

        cols1, rows1 = self._grid(trim.width, trim.height, available_width, available_height)
        cols2, rows2 = self._grid(trim.height, trim.width, available_width, available_height)
        variant1 = cols1 * rows1
        variant2 = cols2 * rows2

        if self._prefer_rotated(trim, variant1, variant2, available_width, available_height):
            rotated = True
        else:
            rotated = variant2 > variant1

        if rotated:
            item_width, item_height, cols, rows = trim.height, trim.width, cols2, rows2
        else:
            item_width, item_height, cols, rows = trim.width, trim.height, cols1, rows1

        items = cols * rows
        result = LayoutResult(
            items_per_sheet=items,
            rows=rows,
            cols=cols,
            fits=items > 0,
            rotated=rotated,
            waste_percentage=self._waste_percentage(
                item_width, item_height, cols, rows, available_width, available_height
            ),
            cuts_per_sheet=cols + rows + 2 if items > 0 else 0,
            sheet=sheet
        )

        logger.debug(
            "layout_calculated",
            trim=f"{trim.width}x{trim.height}",
            printable=f"{printable.width}x{printable.height}",
            unrotated=variant1,
            rotated=variant2,
            chosen=items,
            is_rotated=rotated
        )

        return result

    def find_optimal_sheet_size(self, trim: TrimSize) -> LayoutResult:
        """
        Pick the standard sheet that takes a trim size best.

        Score = items_per_sheet / (waste_percentage + 1).

        Args:
            trim: Finished item size (mm)

        Returns:
            Best LayoutResult, or a non-fitting result on the fallback sheet
        """
        self._check_trim(trim)

        best: Optional[LayoutResult] = None
        best_score = 0.0

        for name in OPTIMAL_SHEET_CANDIDATES:
            sheet = SheetPreset(name).size
            printable = PrintableArea(width=sheet.width, height=sheet.height)
            result = self.calculate_layout(trim, printable, sheet=sheet)

            if not result.fits:
                continue

            score = result.items_per_sheet / (result.waste_percentage + 1)
            if score > best_score:
                best_score = score
                best = result

        if best is None:
            logger.info(
                "no_standard_sheet_fits",
                trim=f"{trim.width}x{trim.height}"
            )
            return LayoutResult(
                items_per_sheet=0,
                rows=0,
                cols=0,
                fits=False,
                waste_percentage=100,
                cuts_per_sheet=0,
                sheet=SheetPreset(FALLBACK_SHEET).size
            )

        return best

    # ===================
    # SIZE VALIDATION
    # ===================

    def validate_product_size(self, product_type: str, trim: TrimSize) -> ProductSizeValidation:
        """
        Check a trim size against the size window of a product type.

        Types without a window are always valid.
        """
        rule = PRODUCT_SIZE_RULES.get(product_type)
        if rule is None:
            return ProductSizeValidation(is_valid=True)

        is_valid = (
            rule["min_width"] <= trim.width <= rule["max_width"]
            and rule["min_height"] <= trim.height <= rule["max_height"]
        )
        if is_valid:
            return ProductSizeValidation(is_valid=True)

        recommended_width, recommended_height = rule["recommended"]
        return ProductSizeValidation(
            is_valid=False,
            message=(
                f"Size must be between {rule['min_width']}x{rule['min_height']} "
                f"and {rule['max_width']}x{rule['max_height']} mm"
            ),
            recommended_size=TrimSize(width=recommended_width, height=recommended_height)
        )

    # ===================
    # HELPERS
    # ===================

    def _check_trim(self, trim: Optional[TrimSize]) -> None:
        if trim is None or trim.width <= 0 or trim.height <= 0:
            raise InvalidTrimSizeError(
                width=getattr(trim, "width", None),
                height=getattr(trim, "height", None)
            )

    def _available_area(self, printable: PrintableArea) -> tuple[float, float]:
        """Gripper comes off the width only."""
        return printable.width - self.margins.gripper, printable.height

    def _footprint(self, count: int, step: float, with_safety: bool = True) -> float:
        """Length taken by `count` items along one side, bleed included."""
        m = self.margins
        total = count * step - m.gap + 2 * m.bleed
        if with_safety:
            total += m.safety_margin
        return total

    def _fit_count(self, item: float, available: float) -> int:
        """
        Items that fit along one side once bleed and safety margin are added.

        Drops at most one item; if the footprint still overflows the side
        yields 0.
        """
        step = item + self.margins.gap
        if available <= 0 or step <= 0:
            return 0

        count = math.floor(available / step)
        if count <= 0:
            return 0

        if self._footprint(count, step) > available:
            count -= 1
            if count <= 0 or self._footprint(count, step) > available:
                return 0

        return count

    def _grid(
        self,
        item_width: float,
        item_height: float,
        available_width: float,
        available_height: float
    ) -> tuple[int, int]:
        """(cols, rows) for one orientation, (0, 0) if it doesn't fit."""
        cols = self._fit_count(item_width, available_width)
        rows = self._fit_count(item_height, available_height)
        if cols == 0 or rows == 0:
            return 0, 0
        return cols, rows

    def _prefer_rotated(
        self,
        trim: TrimSize,
        variant1: int,
        variant2: int,
        available_width: float,
        available_height: float
    ) -> bool:
        """
        Conservative tie-break.

        The unrotated layout is dropped when it beats the rotated one by
        at most `tie_break_max_item_loss` items and its plain grid (no
        safety margin) leaves less than `tie_break_min_clearance` mm on
        either side.
        """
        m = self.margins
        if not (variant1 > variant2 > 0 and variant1 - variant2 <= m.tie_break_max_item_loss):
            return False

        step_w = trim.width + m.gap
        step_h = trim.height + m.gap
        cols = math.floor(available_width / step_w)
        rows = math.floor(available_height / step_h)

        width_clearance = available_width - self._footprint(cols, step_w, with_safety=False)
        height_clearance = available_height - self._footprint(rows, step_h, with_safety=False)

        return (
            width_clearance < m.tie_break_min_clearance
            or height_clearance < m.tie_break_min_clearance
        )

    def _waste_percentage(
        self,
        item_width: float,
        item_height: float,
        cols: int,
        rows: int,
        available_width: float,
        available_height: float
    ) -> float:
        """Unused share of the available area, in percent (2 dp)."""
        total_area = available_width * available_height
        if total_area <= 0 or cols == 0 or rows == 0:
            return 100.0

        gap = self.margins.gap
        used_width = cols * (item_width + gap) - gap
        used_height = rows * (item_height + gap) - gap
        waste = (total_area - used_width * used_height) / total_area * 100
        return round(waste, 2)


# Singleton instance for convenience
_layout_service: Optional[LayoutService] = None

def get_layout_service() -> LayoutService:
    """Get or create LayoutService instance."""
    global _layout_service
    if _layout_service is None:
        _layout_service = LayoutService()
    return _layout_service
