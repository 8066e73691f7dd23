"""
Type definitions used across layers
"""

from enum import StrEnum


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


# Fixed palette an owner picks from when registering
class OwnerColor(StrEnum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    BROWN = "brown"


class RejectionReason(StrEnum):
    NO_PIECE_AT_SOURCE = "no piece at source"
    ILLEGAL_MOVE = "illegal move"
