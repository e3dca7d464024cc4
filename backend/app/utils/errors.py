from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    field_errors: Optional[Dict[str, str]] = None,
    code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details.

    The global handler renders it as ``{"error": message}`` plus
    ``field_errors`` when there are any.
    """
    field_errors = field_errors or {}
    if code >= 500:
        logger.error("%s %s", message, field_errors)
    else:
        logger.info("%s %s", message, field_errors)
    detail = {"message": message, "field_errors": field_errors}
    return HTTPException(status_code=code, detail=detail)


def error_body(detail) -> dict:
    """Flatten an HTTPException detail into the public ``{"error": ...}`` shape."""
    if isinstance(detail, dict):
        body = {"error": str(detail.get("message") or "Error")}
        if detail.get("field_errors"):
            body["field_errors"] = detail["field_errors"]
        return body
    return {"error": str(detail)}
