from typing import Any, Dict, Optional

from pydantic import BaseModel


class AppError(BaseModel):
    """HTTP error payload; details carries the engine context (seat, holder, currencies ...)."""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
