"""Response formatting utilities"""
from typing import Any, Dict, Optional
from uuid import UUID


def format_success_response(message: str, data: Optional[dict] = None, **fields: Any) -> Dict[str, Any]:
    """``{"message": ...}`` with ``data`` (when not empty) and any extra fields"""
    response: Dict[str, Any] = {"message": message}
    if data:
        response["data"] = data
    response.update(fields)
    return response


def format_deleted_response(entity_name: str, entity_id: UUID) -> Dict[str, Any]:
    """
    Body returned by every admin DELETE route.

    Example:
        return format_deleted_response("Legal page", page_id)
    """
    return format_success_response(f"{entity_name} deleted successfully", id=str(entity_id))
