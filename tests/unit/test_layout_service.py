"""
Unit tests for LayoutService.

Run: pytest tests/unit/test_layout_service.py -v

Default margins: bleed 2, gap 2, gripper 5 (width only), safety 3.
SRA3 = 320×450 → available 315×450.
"""

import math
import pytest
from pydantic import ValidationError as PydanticValidationError

from services.layout_service import LayoutService, get_layout_service
from models.geometry import TrimSize, PrintableArea, MarginConfig
from exceptions import InvalidTrimSizeError


SRA3 = PrintableArea(width=320, height=450)

ZERO_MARGINS = MarginConfig(bleed=0, gap=0, gripper=0, safety_margin=0)


def naive_count(trim: TrimSize, printable: PrintableArea, margins: MarginConfig) -> int:
    """Plain grid count (no bleed, no safety margin) for one orientation."""
    cols = math.floor((printable.width - margins.gripper) / (trim.width + margins.gap))
    rows = math.floor(printable.height / (trim.height + margins.gap))
    return max(0, cols) * max(0, rows)


# ===================
# ITEMS PER SHEET
# ===================

class TestComputeItemsPerSheet:
    """Tests for LayoutService.compute_items_per_sheet()"""

    def test_business_card_on_sra3(self, layout_service):
        """
        50×90 on SRA3.

        Unrotated: 6 cols overflow (317 > 315) → 5 cols × 4 rows = 20
        Rotated:   3 cols × 8 rows = 24
        """
        items = layout_service.compute_items_per_sheet(TrimSize(width=50, height=90), SRA3)

        assert items == 24

    def test_orientation_of_input_does_not_matter_here(self, layout_service):
        """90×50 gives the same 24 as 50×90."""
        items = layout_service.compute_items_per_sheet(TrimSize(width=90, height=50), SRA3)

        assert items == 24

    def test_a5_on_sra3(self, layout_service):
        """
        148×210: unrotated 2 × 2 = 4, rotated 1 × 2 = 2.

        The unrotated grid leaves 13mm of width (< 15), so the
        conservative rotated layout is used.
        """
        items = layout_service.compute_items_per_sheet(TrimSize(width=148, height=210), SRA3)

        assert items == 2

    def test_a4_on_sra3_uses_rotation(self, layout_service):
        """210×297 fits once upright, twice turned."""
        items = layout_service.compute_items_per_sheet(TrimSize(width=210, height=297), SRA3)

        assert items == 2

    def test_item_larger_than_sheet_returns_zero(self, layout_service):
        """No exception for non-fitting geometry, just 0."""
        items = layout_service.compute_items_per_sheet(TrimSize(width=400, height=500), SRA3)

        assert items == 0

    def test_item_fits_naively_but_not_with_bleed(self, layout_service):
        """
        310 wide on 315 available: 1 × 312 step fits, but footprint
        312 − 2 + 4 + 3 = 317 > 315, and dropping it leaves 0.
        """
        items = layout_service.compute_items_per_sheet(
            TrimSize(width=310, height=440),
            SRA3
        )

        assert items == 0

    def test_gripper_applies_to_width_only(self):
        """10×10 on 100×100 with a 10mm gripper: 9 cols × 10 rows."""
        service = LayoutService(MarginConfig(bleed=0, gap=0, gripper=10, safety_margin=0))

        items = service.compute_items_per_sheet(
            TrimSize(width=10, height=10),
            PrintableArea(width=100, height=100)
        )

        assert items == 90

    def test_same_input_same_output(self, layout_service):
        """Pure function: repeated calls agree."""
        trim = TrimSize(width=63, height=88)

        first = layout_service.compute_items_per_sheet(trim, SRA3)
        second = layout_service.compute_items_per_sheet(trim, SRA3)

        assert first == second


class TestFitCount:
    """Tests for _fit_count (one side of the sheet)."""

    def test_drops_one_item_when_footprint_overflows(self, layout_service):
        """6 × 52 = 312 fits, footprint 317 > 315 → 5."""
        assert layout_service._fit_count(50, 315) == 5

    def test_keeps_count_when_footprint_fits(self, layout_service):
        """4 × 92 = 368, footprint 373 ≤ 450 → 4."""
        assert layout_service._fit_count(90, 450) == 4

    def test_no_room_returns_zero(self, layout_service):
        assert layout_service._fit_count(500, 315) == 0

    def test_non_positive_available_returns_zero(self):
        service = LayoutService(MarginConfig(gripper=50))

        assert service._fit_count(10, 0) == 0
        assert service._fit_count(10, -5) == 0


# ===================
# TIE-BREAK
# ===================

class TestRotationTieBreak:
    """
    100×140 on SRA3.

    Unrotated: 3 cols × 3 rows = 9, plain grid leaves 7mm of width
    Rotated:   2 cols × 4 rows = 8
    """

    TRIM = TrimSize(width=100, height=140)

    def test_tight_unrotated_layout_prefers_rotated(self, layout_service):
        """Losing 1 item for a roomier layout."""
        result = layout_service.calculate_layout(self.TRIM, SRA3)

        assert result.items_per_sheet == 8
        assert result.rotated is True
        assert (result.cols, result.rows) == (2, 4)

    def test_no_tie_break_when_allowed_loss_is_zero(self):
        """With tie_break_max_item_loss=0 the larger count wins."""
        service = LayoutService(MarginConfig(tie_break_max_item_loss=0))

        result = service.calculate_layout(self.TRIM, SRA3)

        assert result.items_per_sheet == 9
        assert result.rotated is False

    def test_no_tie_break_when_clearance_is_enough(self):
        """With a 5mm clearance threshold the 7mm leftover is fine."""
        service = LayoutService(MarginConfig(tie_break_min_clearance=5))

        assert service.compute_items_per_sheet(self.TRIM, SRA3) == 9

    def test_roomy_unrotated_layout_is_kept(self, layout_service):
        """
        90×50: unrotated 24 vs rotated 20, difference 4, but the plain
        grid leaves 37mm / 32mm, so unrotated stays.
        """
        result = layout_service.calculate_layout(TrimSize(width=90, height=50), SRA3)

        assert result.items_per_sheet == 24
        assert result.rotated is False

    def test_equal_counts_keep_unrotated(self, layout_service):
        """Square items: both orientations give the same count."""
        result = layout_service.calculate_layout(TrimSize(width=100, height=100), SRA3)

        assert result.rotated is False
        assert result.items_per_sheet == 12


# ===================
# LAYOUT DETAILS
# ===================

class TestCalculateLayout:
    """Tests for LayoutService.calculate_layout()"""

    def test_exact_fit_has_no_waste(self):
        """10×10 on 100×100 with no margins: 10 × 10, 0% waste, 22 cuts."""
        service = LayoutService(ZERO_MARGINS)

        result = service.calculate_layout(
            TrimSize(width=10, height=10),
            PrintableArea(width=100, height=100)
        )

        assert result.items_per_sheet == 100
        assert result.fits is True
        assert result.waste_percentage == 0.0
        assert result.cuts_per_sheet == 22

    def test_not_fitting_layout(self, layout_service):
        result = layout_service.calculate_layout(TrimSize(width=400, height=500), SRA3)

        assert result.fits is False
        assert result.items_per_sheet == 0
        assert (result.rows, result.cols) == (0, 0)
        assert result.waste_percentage == 100.0
        assert result.cuts_per_sheet == 0

    def test_waste_percentage_business_card(self, layout_service):
        """
        90×50 unrotated, 3 × 8:
        used = 274 × 414 = 113436, available = 315 × 450 = 141750
        waste = 19.97%
        """
        result = layout_service.calculate_layout(TrimSize(width=90, height=50), SRA3)

        assert result.waste_percentage == 19.97


# ===================
# PROPERTIES
# ===================

class TestLayoutProperties:
    """Invariants checked over a grid of trim sizes."""

    WIDTHS = range(5, 420, 23)
    HEIGHTS = range(7, 520, 29)

    def test_never_more_than_plain_grid(self, layout_service, default_margins):
        """Safety margin and tie-break only ever remove items."""
        for width in self.WIDTHS:
            for height in self.HEIGHTS:
                trim = TrimSize(width=width, height=height)
                items = layout_service.compute_items_per_sheet(trim, SRA3)

                upper = max(
                    naive_count(trim, SRA3, default_margins),
                    naive_count(trim.rotated(), SRA3, default_margins)
                )
                assert 0 <= items <= upper, (width, height)

    def test_never_fewer_than_worse_orientation(self, layout_service, default_margins):
        """
        Lower bound: at least the worse orientation's count once the
        safety margin shrink is applied to both orientations.
        """
        available_width = SRA3.width - default_margins.gripper
        available_height = SRA3.height

        for width in self.WIDTHS:
            for height in self.HEIGHTS:
                trim = TrimSize(width=width, height=height)
                cols1, rows1 = layout_service._grid(width, height, available_width, available_height)
                cols2, rows2 = layout_service._grid(height, width, available_width, available_height)

                items = layout_service.compute_items_per_sheet(trim, SRA3)

                assert items >= min(cols1 * rows1, cols2 * rows2), (width, height)

    def test_lower_bound_against_plain_grid_breaks_on_tie_break(
        self, layout_service, default_margins
    ):
        """
        A5 on SRA3: plain grid counts are 4 and 3, but the tight
        unrotated layout is swapped for the rotated one with 2 items.
        """
        trim = TrimSize(width=148, height=210)

        worse_plain = min(
            naive_count(trim, SRA3, default_margins),
            naive_count(trim.rotated(), SRA3, default_margins)
        )
        items = layout_service.compute_items_per_sheet(trim, SRA3)

        assert worse_plain == 3
        assert items == 2

    def test_too_large_both_ways_is_zero(self, layout_service, default_margins):
        """Items that can't step onto the sheet in either orientation give 0."""
        available_width = SRA3.width - default_margins.gripper
        available_height = SRA3.height

        for width in self.WIDTHS:
            for height in self.HEIGHTS:
                unrotated_blocked = (
                    width + default_margins.gap > available_width
                    or height + default_margins.gap > available_height
                )
                rotated_blocked = (
                    height + default_margins.gap > available_width
                    or width + default_margins.gap > available_height
                )
                if unrotated_blocked and rotated_blocked:
                    trim = TrimSize(width=width, height=height)
                    assert layout_service.compute_items_per_sheet(trim, SRA3) == 0

    def test_fits_matches_item_count(self, layout_service):
        for width in self.WIDTHS:
            for height in self.HEIGHTS:
                result = layout_service.calculate_layout(TrimSize(width=width, height=height), SRA3)

                assert result.fits == (result.items_per_sheet > 0)
                assert result.items_per_sheet == result.rows * result.cols


# ===================
# INVALID INPUT
# ===================

class TestInvalidTrimSize:
    """Non-positive trim sizes are rejected, never laid out."""

    def test_model_rejects_zero_width(self):
        with pytest.raises(PydanticValidationError):
            TrimSize(width=0, height=90)

    def test_model_rejects_negative_height(self):
        with pytest.raises(PydanticValidationError):
            TrimSize(width=50, height=-1)

    def test_service_rejects_unvalidated_trim(self, layout_service):
        """A TrimSize built without validation still can't slip through."""
        trim = TrimSize.model_construct(width=-5, height=90)

        with pytest.raises(InvalidTrimSizeError) as exc_info:
            layout_service.compute_items_per_sheet(trim, SRA3)

        assert exc_info.value.status_code == 422
        assert exc_info.value.code == "INVALID_TRIM_SIZE"


# ===================
# OPTIMAL SHEET
# ===================

class TestFindOptimalSheetSize:
    """Tests for LayoutService.find_optimal_sheet_size()"""

    def test_business_card_prefers_sra3(self, layout_service):
        """SRA3 gives 24 at ~20% waste, beating A3 (20) and A4 (10)."""
        result = layout_service.find_optimal_sheet_size(TrimSize(width=90, height=50))

        assert result.items_per_sheet == 24
        assert (result.sheet.width, result.sheet.height) == (320, 450)

    def test_nothing_fits_returns_fallback(self, layout_service):
        result = layout_service.find_optimal_sheet_size(TrimSize(width=600, height=800))

        assert result.fits is False
        assert result.items_per_sheet == 0
        assert result.waste_percentage == 100
        assert (result.sheet.width, result.sheet.height) == (320, 450)


# ===================
# SIZE VALIDATION
# ===================

class TestValidateProductSize:
    """Tests for LayoutService.validate_product_size()"""

    def test_valid_business_card(self, layout_service):
        result = layout_service.validate_product_size("business_cards", TrimSize(width=90, height=50))

        assert result.is_valid is True
        assert result.message is None

    def test_undersized_business_card(self, layout_service):
        result = layout_service.validate_product_size("business_cards", TrimSize(width=60, height=40))

        assert result.is_valid is False
        assert "85x45" in result.message
        assert (result.recommended_size.width, result.recommended_size.height) == (90, 50)

    def test_unknown_product_type_is_valid(self, layout_service):
        result = layout_service.validate_product_size("stickers", TrimSize(width=1, height=1))

        assert result.is_valid is True


class TestGetLayoutService:
    """Tests for singleton getter."""

    def test_returns_same_instance(self):
        assert get_layout_service() is get_layout_service()
