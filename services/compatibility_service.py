"""
Material compatibility service: core business logic.

Ranks in-stock materials for a product:
1. Filter each material against the product constraints
2. Lay the trim size out on the material's printable area
3. Score survivors: efficiency = items_per_sheet / price_per_sheet
4. Sort by efficiency (desc), then sheets needed (asc)

Every filtered material is kept in an exclusion trail with all the
reasons that applied, not just the first one.
"""

from typing import Optional
import math
import structlog

from config import settings
from config.print_sheets import MIN_PRICE_PER_SHEET
from models.geometry import (
    TrimSize,
    PrintableArea,
    SheetSize,
    MarginConfig,
    resolve_sheet_size,
)
from models.material import MaterialCandidate
from models.compatibility import (
    ExclusionReason,
    ProductConstraints,
    ResolveSpecs,
    ResolveResultItem,
    ExclusionRecord,
    ResolveResult,
)
from services.layout_service import LayoutService, get_layout_service
from services.material_service import get_material_service
from services.product_config_service import get_product_config_service
from exceptions import AppError, InvalidTrimSizeError

logger = structlog.get_logger(__name__)


class CompatibilityService:
    """
    Material compatibility resolver.

    Reads the inventory snapshot and product constraints, never writes.
    Materials in a category listed in `category_margins` are laid out
    with that category's margins.
    """

    def __init__(self, category_margins: Optional[dict[str, MarginConfig]] = None):
        self.material_service = get_material_service()
        self.product_config_service = get_product_config_service()
        self.layout_service = get_layout_service()

        self.category_layouts = {
            category: LayoutService(margins)
            for category, margins in (category_margins or {}).items()
        }
        self.default_top_n = settings.compatibility_default_top_n

    # ===================
    # RESOLVE
    # ===================

    def resolve_compatible_materials(
        self,
        product_id: Optional[int],
        specs: ResolveSpecs,
        top_n: Optional[int] = None
    ) -> ResolveResult:
        """
        Find the best in-stock materials for a product.

        Args:
            product_id: Product whose stored constraints/trim size apply
            specs: Trim size, quantity, sheet and optional constraints
            top_n: Max candidates returned (settings default if None)

        Returns:
            ResolveResult with picked, candidates and excluded

        Raises:
            InvalidTrimSizeError: If no positive trim size is available
        """
        if top_n is None:
            top_n = self.default_top_n

        logger.info(
            "resolving_compatible_materials",
            product_id=product_id,
            quantity=specs.quantity,
            top_n=top_n
        )

        constraints = specs.constraints
        if constraints is None and product_id is not None:
            constraints = self._load_constraints(product_id)

        trim = specs.trim_size
        if trim is None and product_id is not None:
            trim = self._load_trim_size(product_id)
        if trim is None:
            raise InvalidTrimSizeError()

        sheet = resolve_sheet_size(specs.print_sheet)
        materials = self.material_service.get_available_materials()

        candidates: list[ResolveResultItem] = []
        excluded: list[ExclusionRecord] = []

        for material in materials:
            reasons = self._filter_reasons(material, constraints)
            items_per_sheet = 0

            printable = self._printable_area(material, sheet)
            if printable is None:
                reasons.append(ExclusionReason.NO_PRINTABLE_AREA)
            else:
                layout = self.category_layouts.get(material.category_name, self.layout_service)
                items_per_sheet = layout.compute_items_per_sheet(trim, printable)
                if items_per_sheet <= 0:
                    reasons.append(ExclusionReason.DOES_NOT_FIT)

            if reasons:
                excluded.append(ExclusionRecord(
                    material_id=material.id,
                    material_name=material.name,
                    reasons=reasons
                ))
                continue

            candidates.append(self._score(material, items_per_sheet, specs.quantity))

        candidates.sort(key=lambda c: (-c.efficiency, c.sheets_needed))
        top = candidates[:top_n]

        if top:
            logger.info(
                "compatible_materials_resolved",
                product_id=product_id,
                candidates=len(candidates),
                excluded=len(excluded),
                picked_material_id=top[0].material.id
            )
        else:
            logger.info(
                "no_compatible_materials",
                product_id=product_id,
                materials=len(materials),
                excluded=len(excluded)
            )

        return ResolveResult(
            picked=top[0] if top else None,
            candidates=top,
            excluded=excluded
        )

    # ===================
    # HELPERS
    # ===================

    def _load_constraints(self, product_id: int) -> Optional[ProductConstraints]:
        """
        Load stored constraints; any failure means "no constraints".

        Failures are logged as product_constraints_load_failed warnings.
        """
        try:
            return self.product_config_service.get_constraints(product_id)
        except Exception as e:
            logger.warning(
                "product_constraints_load_failed",
                product_id=product_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return None

    def _load_trim_size(self, product_id: int) -> Optional[TrimSize]:
        """Load the stored trim size; a failed lookup counts as none stored."""
        try:
            return self.product_config_service.get_trim_size(product_id)
        except AppError as e:
            logger.warning(
                "product_trim_size_load_failed",
                product_id=product_id,
                error=e.message,
                error_code=e.code
            )
            return None

    def _filter_reasons(
        self,
        material: MaterialCandidate,
        constraints: Optional[ProductConstraints]
    ) -> list[ExclusionReason]:
        """
        All constraint reasons that apply to a material, in fixed order.

        Materials with no category or finish pass those two filters.
        """
        reasons: list[ExclusionReason] = []
        if constraints is None:
            return reasons

        overrides = constraints.overrides
        filters = constraints.materials

        if material.id in overrides.exclude_ids:
            reasons.append(ExclusionReason.EXCLUDED_BY_OVERRIDE)
        if overrides.include_ids and material.id not in overrides.include_ids:
            reasons.append(ExclusionReason.NOT_IN_INCLUDE_LIST)
        if (
            filters.allowed_categories
            and material.category_name
            and material.category_name not in filters.allowed_categories
        ):
            reasons.append(ExclusionReason.CATEGORY_NOT_ALLOWED)
        if filters.density is not None and not filters.density.contains(material.density):
            reasons.append(ExclusionReason.DENSITY_OUT_OF_RANGE)
        if (
            filters.finishes
            and material.finish
            and material.finish not in filters.finishes
        ):
            reasons.append(ExclusionReason.FINISH_NOT_ALLOWED)

        return reasons

    def _printable_area(
        self,
        material: MaterialCandidate,
        sheet: Optional[SheetSize]
    ) -> Optional[PrintableArea]:
        """
        Area to lay out on.

        Material's own printable area, else the requested sheet, else
        the material's raw sheet size.
        """
        if material.printable_area is not None:
            return material.printable_area

        fallback = sheet or material.sheet_size
        if fallback is None:
            return None
        return PrintableArea(width=fallback.width, height=fallback.height)

    def _score(
        self,
        material: MaterialCandidate,
        items_per_sheet: int,
        quantity: int
    ) -> ResolveResultItem:
        """Sheets needed and cost efficiency for a compatible material."""
        sheets_needed = max(1, math.ceil(quantity / items_per_sheet))
        efficiency = items_per_sheet / max(MIN_PRICE_PER_SHEET, material.price_per_sheet)

        return ResolveResultItem(
            material=material,
            items_per_sheet=items_per_sheet,
            sheets_needed=sheets_needed,
            efficiency=efficiency
        )


# Singleton instance for convenience
_compatibility_service: Optional[CompatibilityService] = None

def get_compatibility_service() -> CompatibilityService:
    """Get or create CompatibilityService instance."""
    global _compatibility_service
    if _compatibility_service is None:
        _compatibility_service = CompatibilityService()
    return _compatibility_service
