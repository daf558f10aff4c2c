"""Error envelope schema"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every error response"""

    error: str
    code: int
    message: str
