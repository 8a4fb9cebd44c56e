"""
Material service: read access to the materials inventory.

Stock changes are made elsewhere; this service only reads.
"""

from typing import Optional
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import get_supabase_client
from models.material import MaterialCandidate
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)

# Category name and paper type finish come from embedded relations
MATERIAL_COLUMNS = (
    "id, name, quantity, density, finish, is_active, sheet_price_single, "
    "sheet_width, sheet_height, printable_width, printable_height, "
    "material_categories(name), paper_types(finish)"
)


class MaterialService:
    """
    Materials inventory reads.

    Returns MaterialCandidate snapshots for the compatibility resolver.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "materials"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_available_materials(self) -> list[MaterialCandidate]:
        """
        Get all active materials that have stock.

        A missing is_active flag counts as active. The result is a
        point-in-time snapshot; nothing is locked. Rows that can't be
        read (e.g. no name) are logged and skipped.

        Returns:
            List of MaterialCandidate
        """
        logger.info("getting_available_materials")

        try:
            result = (
                self.db.table(self.table)
                .select(MATERIAL_COLUMNS)
                .or_("is_active.is.null,is_active.eq.true")
                .gt("quantity", 0)
                .order("id")
                .execute()
            )
        except Exception as e:
            logger.error(
                "get_available_materials_failed",
                error=str(e)
            )
            raise DatabaseError("select", str(e))

        materials = []
        for row in result.data:
            try:
                materials.append(self._row_to_candidate(row))
            except PydanticValidationError as e:
                logger.warning(
                    "invalid_material_row_skipped",
                    material_id=row.get("id"),
                    error_count=e.error_count()
                )

        logger.info(
            "available_materials_retrieved",
            count=len(materials),
            skipped=len(result.data) - len(materials)
        )

        return materials

    # ===================
    # HELPERS
    # ===================

    def _row_to_candidate(self, row: dict) -> MaterialCandidate:
        """
        Flatten a materials row with its embedded relations.

        Finish falls back to the paper type's finish, price to 0.
        """
        category = row.get("material_categories") or {}
        paper_type = row.get("paper_types") or {}

        return MaterialCandidate(
            id=row.get("id"),
            name=row.get("name"),
            category_name=category.get("name"),
            density=row.get("density"),
            finish=row.get("finish") or paper_type.get("finish"),
            price_per_sheet=row.get("sheet_price_single") or 0,
            printable_width=row.get("printable_width"),
            printable_height=row.get("printable_height"),
            sheet_width=row.get("sheet_width"),
            sheet_height=row.get("sheet_height"),
            quantity=row.get("quantity") or 0,
        )


# Singleton instance for convenience
_material_service: Optional[MaterialService] = None

def get_material_service() -> MaterialService:
    """Get or create MaterialService instance."""
    global _material_service
    if _material_service is None:
        _material_service = MaterialService()
    return _material_service
