"""
Basic definition of a move request.

A Move only describes a structural transition (which cell to which cell).
Who made it and whether the client was in sync are tracked by the sync engine, not by the Move.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Self

from src.chess.square import Square


@dataclass(frozen=True)
class Move:
    source: Square
    target: Square
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        # Read-only copy: the caller's dict can change later, the move cannot
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def between(cls, from_x: int, from_y: int, to_x: int, to_y: int) -> Self:
        """Convenience constructor from raw coordinates"""
        return cls(Square(from_x, from_y), Square(to_x, to_y))

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"
