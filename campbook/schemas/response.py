from pydantic import BaseModel
from typing import Optional, Any, Dict

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    success: bool = False
    message: str
    code: str
    details: Optional[Any] = None


def success_response(data: Any = None, message: Optional[str] = None, count: Optional[int] = None) -> Dict[str, Any]:
    """
    Standard success envelope: `{success, data?, message?, count?}`.
    """
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    return body
