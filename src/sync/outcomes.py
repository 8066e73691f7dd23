"""
Results of a request handled by the sync engine.

* a move yields Applied(MoveDelta), Rejected(reason), or Desynced(StateSnapshot)
* a promotion yields Applied(StateSnapshot) or Ignored
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from src.chess.moves import Move
from src.core.models import StateSnapshot
from src.core.shared_types import RejectionReason


@dataclass(frozen=True)
class MoveDelta:
    """Minimal payload broadcast for an ordinary move."""

    move: Move
    fingerprint: int


PayloadType = TypeVar("PayloadType", MoveDelta, StateSnapshot)


@dataclass(frozen=True)
class Applied(Generic[PayloadType]):
    payload: PayloadType


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    fingerprint: int

@dataclass(frozen=True)
class Desynced:
    snapshot: StateSnapshot


@dataclass(frozen=True)
class Ignored:
    pass


MoveOutcome = Applied[MoveDelta] | Rejected | Desynced
PromoteOutcome = Applied[StateSnapshot] | Ignored
