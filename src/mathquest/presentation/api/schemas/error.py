"""Error envelope schema."""

from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Uniform body of every error response."""

    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
