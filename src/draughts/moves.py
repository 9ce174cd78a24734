"""
Geometry/Base movement and capturing rules of Brazilian draughts

Key idea: Use strategy pattern to define quiet moves and capture chains for each piece rank.

On top of the per-piece rules sit the two rules that make draughts what it is:
* Mandatory capture: if any piece can capture, quiet moves are not allowed.
* Maximal capture: only the chains that capture the most pieces (over the whole board) are legal.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Self

from src.core.exceptions import IllegalMoveError, InvalidRequestError
from src.core.shared_types import Player, Rank
from src.draughts.board import Board
from src.draughts.pieces import FORWARD, Piece, is_promotion_square
from src.draughts.square import DIAGONALS, Square


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    # the enemy pieces removed along the jump chain, in capture order
    captures: tuple[Square, ...] = field(default=())
    promotion: bool = False

    def __post_init__(self) -> None:
        if len(set(self.captures)) != len(self.captures):
            raise InvalidRequestError(
                f"A piece can only be captured once per move. captures: {self.captures}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Wire format: {"from": {row, col}, "to": {row, col}, "captures": [{row, col}, ...], "isPromotion": bool}"""
        return cls(
            from_square=Square.from_dict(data["from"]),
            to_square=Square.from_dict(data["to"]),
            captures=tuple(Square.from_dict(c) for c in data.get("captures", [])),
            promotion=bool(data.get("isPromotion", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_square.to_dict(),
            "to": self.to_square.to_dict(),
            "captures": [square.to_dict() for square in self.captures],
            "isPromotion": self.promotion,
        }

    @property
    def is_capture(self) -> bool:
        return len(self.captures) > 0


# --- QUIET MOVES (no capture available) ---
def pawn_steps(square: Square, piece: Piece, board: Board) -> list[Move]:
    """A pawn moves a single square diagonally forward. Reaching the far row promotes it."""
    forward = FORWARD[piece.player]
    moves: list[Move] = []
    for dc in (-1, 1):
        target = square.shifted((forward, dc))
        if target.is_within_bounds() and board.is_empty(target):
            moves.append(
                Move(
                    from_square=square,
                    to_square=target,
                    promotion=is_promotion_square(target, piece.player),
                )
            )
    return moves


def king_steps(square: Square, piece: Piece, board: Board) -> list[Move]:
    """
    Raycasting: a king slides along any diagonal until it hits another piece or the edge of the board.
    """
    moves: list[Move] = []
    for direction in DIAGONALS:
        target = square.shifted(direction)
        while target.is_within_bounds() and board.is_empty(target):
            moves.append(Move(from_square=square, to_square=target))
            target = target.shifted(direction)
    return moves


# --- CAPTURE CHAINS ---
@dataclass(frozen=True)
class Chain:
    """The part of a capture sequence reached from some square: where it ends and what it took."""

    to_square: Square
    captures: tuple[Square, ...]
    promotion: bool


def _continue_chain(
    board: Board,
    from_square: Square,
    captured: Square,
    landing: Square,
    piece: Piece,
    captured_so_far: tuple[Square, ...],
) -> list[Chain]:
    """
    Make one jump on a copy of the board and look for further jumps from the landing square.

    A pawn that lands on its promotion row becomes a king right away, and the rest of the chain
    is searched with king geometry.
    """
    promotes = piece.rank == Rank.PAWN and is_promotion_square(landing, piece.player)
    moved_piece = piece.promoted() if promotes else piece
    next_board = board.with_pieces(
        remove=(from_square, captured), place={landing: moved_piece}
    )
    chain_so_far = (*captured_so_far, captured)

    continuations = capture_chains(next_board, landing, moved_piece, chain_so_far)
    if not continuations:
        return [Chain(landing, chain_so_far, promotes)]
    return [
        Chain(c.to_square, c.captures, c.promotion or promotes) for c in continuations
    ]


def pawn_captures(
    square: Square, piece: Piece, board: Board, captured_so_far: tuple[Square, ...]
) -> list[Chain]:
    """A pawn jumps over an adjacent enemy onto the empty square behind it, in any of the four directions."""
    chains: list[Chain] = []
    for direction in DIAGONALS:
        enemy_square = square.shifted(direction)
        landing = square.shifted(direction, steps=2)
        if not landing.is_within_bounds():
            continue
        if enemy_square in captured_so_far:
            continue

        enemy = board.piece(enemy_square)
        if enemy is None or enemy.player == piece.player or not board.is_empty(landing):
            continue

        chains.extend(
            _continue_chain(board, square, enemy_square, landing, piece, captured_so_far)
        )
    return chains


def king_captures(
    square: Square, piece: Piece, board: Board, captured_so_far: tuple[Square, ...]
) -> list[Chain]:
    """
    Flying king capture
    -----

    Scan outward along each diagonal. The first occupied square must hold an enemy (not captured earlier
    in this chain); every empty square after it, up to the next obstruction, is a valid landing.
    Two pieces next to each other (no gap) cannot be jumped.
    """
    chains: list[Chain] = []
    for direction in DIAGONALS:
        enemy_square = None
        target = square.shifted(direction)
        while target.is_within_bounds():
            found = board.piece(target)
            if found is not None:
                if enemy_square is not None:
                    # second piece on the line: can't jump two pieces at once
                    break
                if found.player == piece.player or target in captured_so_far:
                    break
                enemy_square = target
            elif enemy_square is not None:
                chains.extend(
                    _continue_chain(
                        board, square, enemy_square, target, piece, captured_so_far
                    )
                )
            target = target.shifted(direction)
    return chains


# -- STRATEGY PATTERN: MOVEMENT RULES ---
StepMovesFn = Callable[[Square, Piece, Board], list[Move]]
CaptureChainsFn = Callable[[Square, Piece, Board, tuple[Square, ...]], list[Chain]]

STEP_RULES: dict[Rank, StepMovesFn] = {
    Rank.PAWN: pawn_steps,
    Rank.KING: king_steps,
}
CAPTURE_RULES: dict[Rank, CaptureChainsFn] = {
    Rank.PAWN: pawn_captures,
    Rank.KING: king_captures,
}


def capture_chains(
    board: Board,
    square: Square,
    piece: Piece,
    captured_so_far: tuple[Square, ...] = (),
) -> list[Chain]:
    """All capture chains starting at the square, each followed until no further capture is possible."""
    return CAPTURE_RULES[piece.rank](square, piece, board, captured_so_far)


def piece_capture_moves(board: Board, square: Square) -> list[Move]:
    piece = board.piece(square)
    if piece is None:
        return []
    return [
        Move(square, chain.to_square, chain.captures, chain.promotion)
        for chain in capture_chains(board, square, piece)
    ]


def piece_step_moves(board: Board, square: Square) -> list[Move]:
    piece = board.piece(square)
    if piece is None:
        return []
    return STEP_RULES[piece.rank](square, piece, board)


# --- LEGAL MOVES ---
def _unique(moves: list[Move]) -> list[Move]:
    """Different landing paths of a king can produce the same move. Keep the first, preserve order."""
    return list(dict.fromkeys(moves))


def legal_moves(board: Board, player: Player) -> list[Move]:
    """
    Set of legal moves for the player
    ----

    1. Enumerate the maximal capture chains of every piece.
    2. Any capture on the board? Keep the chains whose capture count equals the global maximum (ties included).
    3. No captures at all? The union of the quiet moves of every piece.

    Moves are ordered by square (row by row) and by direction; callers pick among them.
    """
    squares = board.locate_player(player)

    captures = [move for sq in squares for move in piece_capture_moves(board, sq)]
    if captures:
        most_captured = max(len(move.captures) for move in captures)
        return _unique(
            [move for move in captures if len(move.captures) == most_captured]
        )

    return _unique([move for sq in squares for move in piece_step_moves(board, sq)])


def moves_from(board: Board, square: Square) -> list[Move]:
    """The legal moves of the piece standing on the square (empty if it is not allowed to move)."""
    piece = board.piece(square)
    if piece is None:
        return []
    return [move for move in legal_moves(board, piece.player) if move.from_square == square]


def has_legal_move(board: Board, player: Player) -> bool:
    return len(legal_moves(board, player)) > 0


def find_legal_move(board: Board, player: Player, requested: Move) -> Move:
    """
    Match a move coming from a client against the generated legal moves.

    The generator is authoritative: the returned move is the generated one (so e.g. the promotion
    flag cannot be forged). When the capture order is ambiguous, the captured set decides.
    """
    candidates = [
        move
        for move in legal_moves(board, player)
        if move.from_square == requested.from_square
        and move.to_square == requested.to_square
    ]
    for move in candidates:
        if move.captures == requested.captures:
            return move
    for move in candidates:
        if set(move.captures) == set(requested.captures):
            return move
    raise IllegalMoveError(
        f"Move not allowed: {requested.from_square} -> {requested.to_square}"
    )
