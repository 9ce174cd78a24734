"""
Computer opponent: minimax with alpha-beta pruning over the legal-move tree.

The search is CPU-bound and synchronous. `choose_move_async` runs it in a worker thread so the
event loop that serves the players is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional

from src.core.shared_types import Difficulty, Player, Rank
from src.draughts.board import Board
from src.draughts.moves import Move, legal_moves
from src.draughts.pieces import promotion_row
from src.draughts.square import BOARD_SIZE

logger = logging.getLogger(__name__)

DIFFICULTY_DEPTH: dict[Difficulty, int] = {
    Difficulty.EASY: 2,
    Difficulty.MEDIUM: 4,
    Difficulty.HARD: 6,
}

# Easy mode: every so often play one of the first few moves instead of the searched one
EASY_RANDOM_PROBABILITY = 0.3
EASY_RANDOM_CANDIDATES = 3

WIN_SCORE = 10_000
ADVANCEMENT_BONUS = 5
MOBILITY_BONUS = 5

# Center control and advancement, indexed [row][col]. Only dark squares matter.
POSITION_BONUS: tuple[tuple[int, ...], ...] = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (5, 0, 5, 0, 5, 0, 5, 0),
    (0, 5, 0, 10, 0, 10, 0, 5),
    (5, 0, 10, 0, 15, 0, 10, 0),
    (0, 10, 0, 15, 0, 10, 0, 5),
    (5, 0, 10, 0, 10, 0, 5, 0),
    (0, 5, 0, 5, 0, 5, 0, 5),
    (0, 0, 0, 0, 0, 0, 0, 0),
)


def evaluate_board(board: Board, player: Player) -> int:
    """Static evaluation from the point of view of `player`: positive is good for them.

    Sums material, the positional table, pawn advancement and mobility. Opponent pieces count negatively.
    """
    score = 0
    for square, piece in board.position.items():
        value = piece.value + POSITION_BONUS[square.row][square.col]
        if piece.rank == Rank.PAWN:
            rows_to_go = abs(promotion_row(piece.player) - square.row)
            value += (BOARD_SIZE - 1 - rows_to_go) * ADVANCEMENT_BONUS
        score += value if piece.player == player else -value

    own_moves = len(legal_moves(board, player))
    opponent_moves = len(legal_moves(board, player.opponent))
    score += (own_moves - opponent_moves) * MOBILITY_BONUS
    return score


def _most_captures_first(moves: list[Move]) -> list[Move]:
    """Move ordering: longer capture chains first (sorting is stable, so ties keep generation order)"""
    return sorted(moves, key=lambda move: len(move.captures), reverse=True)


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: int
    nodes: int


class AIPlayer:
    """Minimax with Alpha-Beta pruning and a depth budget per difficulty."""

    def __init__(
        self,
        depths: Optional[dict[Difficulty, int]] = None,
        rng: Optional[random.Random] = None,
        random_probability: float = EASY_RANDOM_PROBABILITY,
    ) -> None:
        self.depths = depths or dict(DIFFICULTY_DEPTH)
        # Injected so easy mode is reproducible in tests
        self.rng = rng or random.Random()
        self.random_probability = random_probability

    def choose_move(
        self, board: Board, player: Player, difficulty: Difficulty
    ) -> Optional[Move]:
        """Best move for the player. None only if the player cannot move at all."""
        moves = legal_moves(board, player)
        if not moves:
            return None
        if len(moves) == 1:
            return moves[0]

        if difficulty == Difficulty.EASY and self.rng.random() < self.random_probability:
            move = self.rng.choice(moves[:EASY_RANDOM_CANDIDATES])
            logger.debug("Easy mode: playing unsearched move %s", move)
            return move

        result = self.search(board, player, self.depths[difficulty])
        logger.debug(
            "AI (%s, %s) searched %d nodes, score %d",
            player,
            difficulty,
            result.nodes,
            result.score,
        )
        return result.best_move

    async def choose_move_async(
        self,
        board: Board,
        player: Player,
        difficulty: Difficulty,
        think_delay: float = 0.0,
    ) -> Optional[Move]:
        """Same as choose_move, off the event loop. The delay is only there for a perceived 'thinking' pause."""
        if think_delay > 0:
            await asyncio.sleep(think_delay)
        return await asyncio.to_thread(self.choose_move, board, player, difficulty)

    def search(self, board: Board, player: Player, depth: int) -> SearchResult:
        """Root of the alpha-beta search: score every legal move and keep the first best one."""
        best_move: Optional[Move] = None
        best_score = -(10**9)
        alpha = -(10**9)
        beta = 10**9
        nodes = 0

        for move in _most_captures_first(legal_moves(board, player)):
            score, child_nodes = self._alphabeta(
                board.apply_move(move),
                depth - 1,
                alpha,
                beta,
                maximizing=False,
                ai_player=player,
                to_move=player.opponent,
            )
            nodes += child_nodes + 1
            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, best_score)

        if best_move is None:
            best_score = evaluate_board(board, player)
        return SearchResult(best_move=best_move, score=best_score, nodes=nodes)

    def _alphabeta(
        self,
        board: Board,
        depth: int,
        alpha: int,
        beta: int,
        maximizing: bool,
        ai_player: Player,
        to_move: Player,
    ) -> tuple[int, int]:
        if depth <= 0:
            return evaluate_board(board, ai_player), 1

        moves = legal_moves(board, to_move)
        if not moves:
            # side to move has lost. More remaining depth = reached sooner: win faster, lose later.
            if maximizing:
                return -(WIN_SCORE + depth), 1
            return WIN_SCORE + depth, 1

        nodes = 0
        if maximizing:
            value = -(10**9)
            for move in _most_captures_first(moves):
                score, child_nodes = self._alphabeta(
                    board.apply_move(move),
                    depth - 1,
                    alpha,
                    beta,
                    maximizing=False,
                    ai_player=ai_player,
                    to_move=to_move.opponent,
                )
                nodes += child_nodes + 1
                value = max(value, score)
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
            return value, nodes
        else:
            value = 10**9
            for move in _most_captures_first(moves):
                score, child_nodes = self._alphabeta(
                    board.apply_move(move),
                    depth - 1,
                    alpha,
                    beta,
                    maximizing=True,
                    ai_player=ai_player,
                    to_move=to_move.opponent,
                )
                nodes += child_nodes + 1
                value = min(value, score)
                beta = min(beta, value)
                if alpha >= beta:
                    break
            return value, nodes
