"""Error payload returned by the worker."""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorBody(BaseModel):
    """JSON body of every non-2xx worker response."""

    error: str
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def describe(exc: BaseException) -> str:
    """Return the message of ``exc``, or its class name when it has none."""

    return str(exc) or type(exc).__name__
