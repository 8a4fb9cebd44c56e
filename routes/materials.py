"""
Materials API routes.

Compatible material lookup for order pricing and product setup.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.compatibility import (
    CompatibleMaterialsRequest,
    ResolveSpecs,
    ResolveResult,
)
from services.compatibility_service import get_compatibility_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.post("/compatible", response_model=ResolveResult)
async def resolve_compatible_materials(
    data: CompatibleMaterialsRequest,
    top_n: Optional[int] = Query(None, ge=1, le=50, description="Max candidates returned")
):
    """
    Rank in-stock materials for a trim size and quantity.

    When product_id is given and no constraints are sent, the product's
    stored constraints apply. An empty candidates list means nothing
    compatible is in stock; see `excluded` for why.
    """
    try:
        service = get_compatibility_service()
        specs = ResolveSpecs(
            trim_size=data.trim_size,
            quantity=data.quantity,
            print_sheet=data.print_sheet,
            constraints=data.constraints
        )
        return service.resolve_compatible_materials(data.product_id, specs, top_n=top_n)

    except Exception as e:
        return handle_error(e)
