"""Defines a single game token"""

from dataclasses import dataclass
from typing import Any, Optional

from src.chess.square import Square
from src.core.models import OwnerId
from src.core.shared_types import PieceType


@dataclass
class Piece:
    x: int
    y: int
    owner: Optional[OwnerId]
    type: PieceType
    alive: bool = True

    @property
    def square(self) -> Square:
        return Square(self.x, self.y)

    def is_at(self, square: Square) -> bool:
        return self.x == square.x and self.y == square.y

    def move_to(self, square: Square) -> None:
        self.x = square.x
        self.y = square.y

    def capture(self) -> None:
        # NOTE: captured pieces stay in the collection, so indexes of the other pieces never shift
        self.alive = False

    def promote_to(self, new_type: PieceType) -> None:
        self.type = new_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "owner": self.owner,
            "type": str(self.type),
            "alive": self.alive,
        }
