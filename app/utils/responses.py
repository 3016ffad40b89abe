"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi.responses import JSONResponse

from app.schemas.common import ErrorResponse

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status_code
    )
