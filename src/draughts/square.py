"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Draughts board is always 8x8 (Brazilian rules).
BOARD_SIZE = 8

Vector = tuple[int, int]

# up-left, up-right, down-left, down-right. The order fixes the order moves are generated in.
DIAGONALS: tuple[Vector, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


@dataclass(frozen=True, order=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_dict(cls, data: dict[str, int]) -> Square:
        return cls(int(data["row"]), int(data["col"]))

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.col < BOARD_SIZE)

    def is_dark(self) -> bool:
        """Only the dark squares are ever occupied"""
        return (self.row + self.col) % 2 == 1

    def shifted(self, direction: Vector, steps: int = 1) -> Square:
        dr, dc = direction
        return Square(self.row + dr * steps, self.col + dc * steps)


def dark_squares() -> list[Square]:
    return [
        Square(row, col)
        for row in range(BOARD_SIZE)
        for col in range(BOARD_SIZE)
        if (row + col) % 2 == 1
    ]
