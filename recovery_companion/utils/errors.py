"""
Error responses shared by the routers
"""
import logging

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def internal_error(operation: str, error: Exception) -> JSONResponse:
    """Log an unexpected error with traceback and return the JSON 500 body"""
    error_type = type(error).__name__
    logger.error("Error in %s: %s: %s", operation, error_type, error, exc_info=error)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "detail": str(error), "error_type": error_type}
    )
