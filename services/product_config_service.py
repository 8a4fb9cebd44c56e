"""
Product configuration service: reads stored product setups.

Each product may have several configs; the newest active one wins.
The constraints and config_data columns hold JSON, either as text
(older rows) or already decoded.
"""

from typing import Any, Optional
import json
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import get_supabase_client
from models.compatibility import ProductConstraints
from models.geometry import TrimSize
from exceptions import (
    ProductConfigNotFoundError,
    InvalidProductConfigError,
    InvalidProductConstraintsError,
    DatabaseError,
)

logger = structlog.get_logger(__name__)


class ProductConfigService:
    """
    Product configuration reads.

    Supplies material constraints and the trim size of a product.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "product_configs"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_latest(self, product_id: int) -> dict:
        """
        Get the newest active config row of a product.

        Args:
            product_id: Product ID

        Returns:
            Raw config row

        Raises:
            ProductConfigNotFoundError: If the product has no active config
        """
        logger.debug("getting_product_config", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select("id, product_id, constraints, config_data")
                .eq("product_id", product_id)
                .eq("is_active", True)
                .order("id", desc=True)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(
                "get_product_config_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

        if not result.data:
            raise ProductConfigNotFoundError(product_id)

        return result.data[0]

    def get_constraints(self, product_id: int) -> Optional[ProductConstraints]:
        """
        Get the material constraints stored for a product.

        Args:
            product_id: Product ID

        Returns:
            ProductConstraints, or None if the product has none

        Raises:
            InvalidProductConstraintsError: If stored JSON is malformed
            DatabaseError: If the query fails
        """
        try:
            row = self.get_latest(product_id)
        except ProductConfigNotFoundError:
            logger.debug("product_config_missing", product_id=product_id)
            return None

        data = self._decode_json(product_id, "constraints", row.get("constraints"))
        if not data:
            return None

        try:
            constraints = ProductConstraints.model_validate(data)
        except PydanticValidationError as e:
            raise InvalidProductConstraintsError(product_id, str(e))

        logger.info(
            "product_constraints_loaded",
            product_id=product_id,
            categories=constraints.materials.allowed_categories,
            include_ids=len(constraints.overrides.include_ids),
            exclude_ids=len(constraints.overrides.exclude_ids)
        )

        return constraints

    def get_trim_size(self, product_id: int) -> Optional[TrimSize]:
        """
        Get the trim size stored in a product's config_data.

        Expects config_data.trim_size = {"width": ..., "height": ...}.

        Returns:
            TrimSize, or None if not configured or not positive

        Raises:
            InvalidProductConfigError: If config_data is malformed JSON
            DatabaseError: If the query fails
        """
        try:
            row = self.get_latest(product_id)
        except ProductConfigNotFoundError:
            return None

        data = self._decode_json(product_id, "config_data", row.get("config_data")) or {}
        trim = data.get("trim_size") if isinstance(data, dict) else None
        if not trim:
            return None

        try:
            return TrimSize.model_validate(trim)
        except PydanticValidationError:
            logger.warning(
                "invalid_stored_trim_size",
                product_id=product_id,
                trim_size=trim
            )
            return None

    # ===================
    # HELPERS
    # ===================

    def _decode_json(self, product_id: int, column: str, value: Any) -> Any:
        """Decode a JSON column that may arrive as text."""
        if value is None or value == "":
            return None
        if not isinstance(value, (str, bytes)):
            return value

        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            if column == "constraints":
                raise InvalidProductConstraintsError(product_id, str(e))
            raise InvalidProductConfigError(product_id, column, str(e))


# Singleton instance for convenience
_product_config_service: Optional[ProductConfigService] = None

def get_product_config_service() -> ProductConfigService:
    """Get or create ProductConfigService instance."""
    global _product_config_service
    if _product_config_service is None:
        _product_config_service = ProductConfigService()
    return _product_config_service
