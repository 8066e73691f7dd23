"""The BoardState holds every piece that was ever placed on the shared board, alive or captured."""

from dataclasses import dataclass, field
from typing import Any, Optional, Self

from pydantic import BaseModel, ValidationError, model_validator

from src.chess.pieces import Piece
from src.chess.square import STARTING_LAYOUT_DIMENSIONS, Square
from src.core.exceptions import SerializationError
from src.core.models import OwnerId
from src.core.shared_types import PieceType

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

STARTER_SET_SIZE = 2 * len(BACK_RANK)

# Empty row left between the last living piece and a newly allocated starter set
STARTER_SET_GAP = 1


# --- Persisted shape of the board (validated on load) ---
class PieceRecord(BaseModel):
    x: int
    y: int
    owner: Optional[str] = None
    type: PieceType
    alive: bool = True


class BoardRecord(BaseModel):
    pieces: list[PieceRecord]
    move_count: int = 0

    @model_validator(mode="after")
    def check_one_living_piece_per_cell(self) -> Self:
        occupied: set[tuple[int, int]] = set()
        for piece in self.pieces:
            if not piece.alive:
                continue
            if (piece.x, piece.y) in occupied:
                raise ValueError(f"More than one living piece at ({piece.x}, {piece.y})")
            occupied.add((piece.x, piece.y))
        return self


@dataclass
class BoardState:
    pieces: list[Piece] = field(default_factory=list)
    move_count: int = 0

    @classmethod
    def default(cls) -> Self:
        """
        Canonical starting layout: a neutral (ownerless) chess set on an 8x8 block.

        * row 0 and row 7: back ranks
        * row 1 and row 6: pawns
        """
        width, height = STARTING_LAYOUT_DIMENSIONS
        pieces: list[Piece] = []
        for y, row in [(0, BACK_RANK), (height - 1, BACK_RANK)]:
            pieces.extend(Piece(x, y, None, piece_type) for x, piece_type in enumerate(row))
        for y in (1, height - 2):
            pieces.extend(Piece(x, y, None, PieceType.PAWN) for x in range(width))
        return cls(pieces=pieces)

    def create_pieces_for(self, owner: OwnerId) -> list[Piece]:
        """
        Append the starter set of a new owner. Existing pieces are left untouched.

        ---
        NOTE: the fingerprint is stale afterwards. Recomputing it is the caller's job (the sync engine).
        """
        base = self._next_free_row()
        starter_set = [Piece(x, base, owner, PieceType.PAWN) for x in range(len(BACK_RANK))]
        starter_set.extend(
            Piece(x, base + 1, owner, piece_type) for x, piece_type in enumerate(BACK_RANK)
        )
        self.pieces.extend(starter_set)
        return starter_set

    def piece_at(self, square: Square) -> Optional[Piece]:
        """The living piece on a cell (captured pieces may share the cell, but are never returned)."""
        return next(
            (piece for piece in self.pieces if piece.alive and piece.is_at(square)),
            None,
        )

    def living_pieces(self) -> list[Piece]:
        return [piece for piece in self.pieces if piece.alive]

    def pieces_of(self, owner: OwnerId) -> list[Piece]:
        return [piece for piece in self.pieces if piece.owner == owner]

    def serialize(self) -> dict[str, Any]:
        """Structural representation, freshly built on every call (callers never share state with the board)."""
        return {
            "pieces": [piece.to_dict() for piece in self.pieces],
            "move_count": self.move_count,
        }

    @classmethod
    def deserialize(cls, data: Any) -> Self:
        try:
            record = BoardRecord.model_validate(data)
        except ValidationError as e:
            raise SerializationError(f"Invalid board state: {e}") from e
        return cls._from_record(record)

    @classmethod
    def _from_record(cls, record: BoardRecord) -> Self:
        pieces = [
            Piece(p.x, p.y, p.owner, p.type, p.alive) for p in record.pieces
        ]
        return cls(pieces=pieces, move_count=record.move_count)

    def _next_free_row(self) -> int:
        """First row of a new starter set: strictly below every living piece."""
        living = self.living_pieces()
        if not living:
            return 0
        return max(piece.y for piece in living) + 1 + STARTER_SET_GAP


# --- Snapshot primitives for the persistence layer ---
def dump_snapshot(state: BoardState) -> str:
    """Encode a board as JSON text."""
    return BoardRecord.model_validate(state.serialize()).model_dump_json()


def load_snapshot(blob: str | bytes) -> BoardState:
    """Decode JSON text produced by `dump_snapshot`. Raises SerializationError on malformed input."""
    try:
        record = BoardRecord.model_validate_json(blob)
    except ValidationError as e:
        raise SerializationError(f"Invalid snapshot: {e}") from e
    return BoardState._from_record(record)
