"""
Standardized API Response Module

Provides consistent response formatting for every storefront endpoint.

RESPONSE FORMAT:
    Success:
        {
            "data": <response data>,
            "status": "success"
        }

    Error:
        {
            "error": {
                "code": "ERROR_CODE",
                "message": "Human-readable message",
                "details": {...}  # Optional extra context
            },
            "status": "error"
        }

ERROR CODES:
    - SHOP_NOT_FOUND: Host is not mapped or the mapped shop row is missing
    - ROUTE_NOT_FOUND: No route in the shop's table matches the path
    - HANDLER_NOT_FOUND: Matched handler or action is not registered
    - ROUTE_TABLE_MISSING: Shop has no usable route table (deployment error)
    - CONFIG_ERROR: Layered configuration could not be loaded
"""

from typing import Any, Optional


# ============================================================================
# COMMON ERROR CODES
# ============================================================================

class ErrorCodes:
    """Standard error codes for API responses."""

    # Not found errors (404)
    SHOP_NOT_FOUND = "SHOP_NOT_FOUND"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    HANDLER_NOT_FOUND = "HANDLER_NOT_FOUND"

    # Server errors (500)
    ROUTE_TABLE_MISSING = "ROUTE_TABLE_MISSING"
    CONFIG_ERROR = "CONFIG_ERROR"


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def success_response(data: Any) -> dict:
    """Create a standardized success response dict."""
    return {"data": data, "status": "success"}


def error_response(
    code: str,
    message: str,
    details: Optional[dict] = None,
) -> dict:
    """Create a standardized error response dict."""
    response = {
        "error": {
            "code": code,
            "message": message,
        },
        "status": "error",
    }
    if details:
        response["error"]["details"] = details
    return response
