"""
Print sheet configuration and product size windows.

Static press constants used by the layout calculator and the
material compatibility resolver. Margin defaults are in settings.
"""

# =============================================================================
# SHEET PRESETS (mm, width x height)
# =============================================================================
# Nominal stock sheets a product can be imposed on.

SHEET_PRESETS = {
    "SRA3": (320, 450),
    "A3": (297, 420),
    "B3": (353, 500),
    "B2": (500, 707),
    "A4": (210, 297),
}

# Sheets tried when searching for the best sheet for a product.
# Order matters: first one wins on equal score.
OPTIMAL_SHEET_CANDIDATES = ("SRA3", "A3", "A4")

# Returned (as non-fitting) when no standard sheet takes the product
FALLBACK_SHEET = "SRA3"


# =============================================================================
# RANKING
# =============================================================================

# Floor for price per sheet when computing efficiency.
# Free stock (price 0) gets a very large but finite score.
MIN_PRICE_PER_SHEET = 0.0001


# =============================================================================
# PRODUCT SIZE WINDOWS (mm)
# =============================================================================
# Allowed trim sizes per product type. Types not listed have no limits.

PRODUCT_SIZE_RULES = {
    "business_cards": {
        "min_width": 85, "max_width": 95,
        "min_height": 45, "max_height": 55,
        "recommended": (90, 50),
    },
    "flyers": {
        "min_width": 100, "max_width": 210,
        "min_height": 140, "max_height": 297,
        "recommended": (105, 148),  # A6
    },
    "posters": {
        "min_width": 200, "max_width": 1000,
        "min_height": 300, "max_height": 1500,
        "recommended": (297, 420),  # A3
    },
}
