"""
A cell on the board

(placed in its own module as multiple other modules need to import it)
"""

from dataclasses import dataclass

# Size of the neutral starting layout. The board itself is unbounded: starter sets are stacked below it.
STARTING_LAYOUT_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
