"""
Business logic services.

Each service handles one domain area.
"""

from services.layout_service import LayoutService, get_layout_service
from services.material_service import MaterialService, get_material_service
from services.product_config_service import (
    ProductConfigService,
    get_product_config_service,
)
from services.compatibility_service import (
    CompatibilityService,
    get_compatibility_service,
)

__all__ = [
    "LayoutService",
    "get_layout_service",
    "MaterialService",
    "get_material_service",
    "ProductConfigService",
    "get_product_config_service",
    "CompatibilityService",
    "get_compatibility_service",
]
