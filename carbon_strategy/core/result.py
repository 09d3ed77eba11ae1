"""Tagged success/failure values returned by every resolution step.

The orchestrator composes these by checking ``isinstance(r, Failure)`` and
returning early, so no failure ever yields a partial result.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, TypeVar, Union

T = TypeVar("T")


class FailureKind(str, Enum):
    PRICE_UNAVAILABLE = "PriceUnavailable"
    INVALID_RANGE_SPEC = "InvalidRangeSpec"
    INSUFFICIENT_SPEC = "InsufficientSpec"
    CURVE_COMPUTATION_FAILED = "CurveComputationFailed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_wire(self) -> Dict[str, str]:
        return {"status": "error", "code": self.kind.value, "message": self.message}


Result = Union[Ok[T], Failure]


def price_unavailable(message: str) -> Failure:
    return Failure(FailureKind.PRICE_UNAVAILABLE, message)


def invalid_range(message: str) -> Failure:
    return Failure(FailureKind.INVALID_RANGE_SPEC, message)


def insufficient(message: str) -> Failure:
    return Failure(FailureKind.INSUFFICIENT_SPEC, message)


def curve_failed(message: str) -> Failure:
    return Failure(FailureKind.CURVE_COMPUTATION_FAILED, message)
