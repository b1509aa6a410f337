"""
API Response Models
Standard success envelope returned by the REST endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """Success envelope wrapping the raw Graph API result"""

    success: bool = Field(default=True, description="Always true; failures use the error envelope")
    result: Optional[Any] = Field(None, description="Graph API response body")


def create_success_response(result: Any) -> Dict[str, Any]:
    """
    Wrap a client result in the success envelope

    Args:
        result: Graph API response body

    Returns:
        ``{"success": True, "result": result}``
    """
    return APIResponse(result=result).model_dump()
