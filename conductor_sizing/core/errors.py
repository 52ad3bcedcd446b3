from dataclasses import dataclass
from typing import Optional

from .models import SizingResult


class SizingError(Exception):
    """Base class for failures the engine reports to its callers."""
    code = "sizing_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "field": self.field}


class InvalidInput(SizingError):
    """Non-positive current/length/voltage or a value outside its physical range."""
    code = "invalid_input"


class SizeNotFound(SizingError):
    """A size selector that does not exist in the chosen standard's catalog."""
    code = "size_not_found"


@dataclass(frozen=True)
class SizingOutcome:
    """Either a SizingResult or the SizingError that prevented one."""
    result: Optional[SizingResult] = None
    error: Optional[SizingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> SizingResult:
        if self.error is not None:
            raise self.error
        return self.result
