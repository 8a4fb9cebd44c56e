"""
Layout API routes.

Sheet imposition: items per sheet, best standard sheet, size checks.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.geometry import PrintableArea, resolve_sheet_size
from models.layout import (
    LayoutResult,
    ProductSizeValidation,
    LayoutRequest,
    OptimalSheetRequest,
    SizeValidationRequest,
)
from services.layout_service import get_layout_service
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

@router.post("/calculate", response_model=LayoutResult)
async def calculate_layout(data: LayoutRequest):
    """
    Lay out a trim size on a sheet.

    The sheet is a preset name ("SRA3", "A3", "B3", "B2", "A4")
    or an explicit {width, height} in mm.
    """
    try:
        service = get_layout_service()
        sheet = resolve_sheet_size(data.sheet)
        printable = PrintableArea(width=sheet.width, height=sheet.height)
        return service.calculate_layout(data.trim_size, printable, sheet=sheet)

    except Exception as e:
        return handle_error(e)


@router.post("/optimal-sheet", response_model=LayoutResult)
async def find_optimal_sheet(data: OptimalSheetRequest):
    """
    Find the standard sheet that takes a trim size best.

    Returns fits=false when no standard sheet takes the product.
    """
    try:
        service = get_layout_service()
        return service.find_optimal_sheet_size(data.trim_size)

    except Exception as e:
        return handle_error(e)


@router.post("/validate-size", response_model=ProductSizeValidation)
async def validate_size(data: SizeValidationRequest):
    """Check a trim size against a product type's allowed sizes."""
    try:
        service = get_layout_service()
        return service.validate_product_size(data.product_type, data.trim_size)

    except Exception as e:
        return handle_error(e)
