"""
Tagged result types for the lookup pipeline.

Every pipeline step returns either ``Success`` carrying a value or
``Failure`` carrying the ordered error messages collected so far. Callers
branch on the variant::

    result = get_stored_credential("alice@example.com")
    if isinstance(result, Success):
        use(result.value)
    else:
        print(result.to_dict())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

FAILED_STATUS = "Failed"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful step result."""

    value: T

    @property
    def status(self) -> Literal["Success"]:
        return "Success"

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed step result.

    Attributes:
        errors: Ordered error messages, oldest first
    """

    errors: tuple[str, ...]

    @property
    def status(self) -> Literal["Failed"]:
        return "Failed"

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def of(cls, *errors: str) -> Failure:
        return cls(errors=tuple(errors))

    def to_dict(self) -> dict[str, Any]:
        """Render the failure mapping ``{"Status": "Failed", "ErrorLog": [...]}``."""
        return {"Status": FAILED_STATUS, "ErrorLog": list(self.errors)}


Result = Success[T] | Failure
