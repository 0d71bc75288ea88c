"""Standard API response formats."""
from typing import Any
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str


def error_response(message: str) -> dict[str, Any]:
    """Create an error response."""
    return {"error": message}


# Documented error bodies for routers
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 409, 500, 503)
}
