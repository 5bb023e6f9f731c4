"""
Generic response schemas
"""

from pydantic import BaseModel
from typing import Optional, List


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint"""
    error: str
    details: Optional[List[str]] = None
