"""Requests, Responses and pushed event payloads"""

from typing import Any, Optional, Self

from pydantic import BaseModel, field_validator

from src.chess.moves import Move
from src.chess.square import Square
from src.core.models import OwnerId, StateSnapshot
from src.core.shared_types import OwnerColor, PieceType, RejectionReason
from src.owners.directory import validate_color, validate_username


# --- REQUEST MODELS ---
class RegisterOwnerRequest(BaseModel):
    username: str
    color: str

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return validate_username(value)

    @field_validator("color")
    @classmethod
    def check_color(cls, value: str) -> str:
        return validate_color(value).value


class MovePayload(BaseModel):
    source: tuple[int, int]
    target: tuple[int, int]
    metadata: dict[str, Any] = {}

    def to_move(self) -> Move:
        return Move(Square(*self.source), Square(*self.target), dict(self.metadata))

    @classmethod
    def from_move(cls, move: Move) -> Self:
        return cls(
            source=(move.source.x, move.source.y),
            target=(move.target.x, move.target.y),
            metadata=dict(move.metadata),
        )


class MoveRequest(BaseModel):
    move: MovePayload
    sum: int


class PromoteRequest(BaseModel):
    x: int
    y: int
    type: PieceType

    @property
    def square(self) -> Square:
        return Square(self.x, self.y)


# --- RESPONSE MODELS ---
class OwnerResponse(BaseModel):
    username: str
    color: OwnerColor


class RegisterOwnerResponse(BaseModel):
    success: bool
    session: Optional[str] = None
    owner: Optional[OwnerId] = None


class MeResponse(BaseModel):
    exists: bool
    owner: Optional[OwnerResponse] = None


# --- PUSHED EVENTS ---
class StateEvent(BaseModel):
    """Full state, sent on connect, on resync, and broadcast after registrations / promotions."""

    owner: Optional[OwnerId] = None
    owners: dict[OwnerId, OwnerResponse]
    state: dict[str, Any]
    sum: int

    @classmethod
    def from_snapshot(
        cls,
        snapshot: StateSnapshot,
        owners: dict[OwnerId, OwnerResponse],
        owner: Optional[OwnerId] = None,
    ) -> Self:
        return cls(owner=owner, owners=owners, state=snapshot.state, sum=snapshot.fingerprint)


class MoveEvent(BaseModel):
    """Delta broadcast after an applied move."""

    move: MovePayload
    sum: int


class MoveRejectedEvent(BaseModel):
    reason: RejectionReason
    sum: int
