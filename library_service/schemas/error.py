from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    error_code: str
    details: str | None = None
    validation_errors: list[str] | None = None
