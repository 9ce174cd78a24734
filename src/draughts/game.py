"""
The Game class is the entrypoint into the domain layer for local play (two players on one device, or a player
against the computer). It is responsible for orchestrating the business logic required to play a turn:
legality, executing the move, captured counts, the end of the game, and the undo/redo history.

MatchState is the part of a game that is shared with the networked rooms.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Self

from src.core.exceptions import GameStateError
from src.core.shared_types import Difficulty, GameMode, GameStatus, Player
from src.draughts.board import Board
from src.draughts.game_end import GameEnd, evaluate_game_end
from src.draughts.moves import Move, find_legal_move, legal_moves, moves_from
from src.draughts.square import Square


@dataclass(frozen=True)
class MatchState:
    """Board + side to move + running captured-piece counts. Immutable, like the Board."""

    board: Board
    player_to_move: Player = Player.WHITE
    # number of white/black pieces that have been taken off the board
    captured_white: int = 0
    captured_black: int = 0

    @classmethod
    def starting_position(cls) -> Self:
        return cls(Board.starting_position())

    def legal_moves(self) -> list[Move]:
        return legal_moves(self.board, self.player_to_move)

    def play(self, move: Move) -> Self:
        """State after the player to move makes the move. The move is assumed to be legal."""
        taken = len(move.captures)
        mover = self.player_to_move
        return replace(
            self,
            board=self.board.apply_move(move),
            player_to_move=mover.opponent,
            captured_white=self.captured_white + (taken if mover == Player.BLACK else 0),
            captured_black=self.captured_black + (taken if mover == Player.WHITE else 0),
        )

    def outcome(self) -> GameEnd:
        return evaluate_game_end(self.board, self.player_to_move)


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot after a move (or the starting position, where last_move is None)"""

    state: MatchState
    last_move: Optional[Move] = None


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY THE LOCAL PLAY SERVICE ---

    state: MatchState
    mode: GameMode
    difficulty: Difficulty
    history: list[HistoryEntry] = field(default_factory=list)
    history_index: int = 0
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[Player] = None
    # the computer always plays black against a human
    ai_player: Player = Player.BLACK
    # bumped on every change, so a result computed for an older position can be recognised
    revision: int = 0

    @classmethod
    def new_game(
        cls, mode: GameMode = GameMode.PVP, difficulty: Difficulty = Difficulty.MEDIUM
    ) -> Self:
        state = MatchState.starting_position()
        return cls(
            state=state,
            mode=mode,
            difficulty=difficulty,
            history=[HistoryEntry(state)],
        )

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def player_to_move(self) -> Player:
        return self.state.player_to_move

    @property
    def is_ai_turn(self) -> bool:
        return (
            self.mode == GameMode.PVE
            and self.status == GameStatus.PLAYING
            and self.player_to_move == self.ai_player
        )

    @property
    def can_undo(self) -> bool:
        return self.history_index > 0

    @property
    def can_redo(self) -> bool:
        return self.history_index < len(self.history) - 1

    def legal_moves(self) -> list[Move]:
        if self.status != GameStatus.PLAYING:
            return []
        return self.state.legal_moves()

    def moves_from(self, square: Square) -> list[Move]:
        """Moves to highlight once the player selects one of their pieces"""
        piece = self.board.piece(square)
        if self.status != GameStatus.PLAYING or piece is None:
            return []
        if piece.player != self.player_to_move:
            return []
        return moves_from(self.board, square)

    def make_move(self, move: Move) -> Move:
        """
        Attempt to make a move
        -----

        1. check the game is still going
        2. check the move is legal (the generated move is the one that gets played)
        3. update the board, captured counts and the side to move
        4. drop any undone moves and record the new position
        5. update game status (if needed)
        """
        if self.status != GameStatus.PLAYING:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

        accepted_move = find_legal_move(self.board, self.player_to_move, move)
        self.state = self.state.play(accepted_move)
        self._record(accepted_move)
        self._update_game_status()
        return accepted_move

    def undo(self) -> None:
        """
        Step back in history. Against the computer, step back over the computer's reply as well,
        so it is the human's turn again.
        """
        if not self.can_undo:
            return
        steps_back = 2 if self.mode == GameMode.PVE and self.history_index >= 2 else 1
        self._go_to(max(0, self.history_index - steps_back))

    def redo(self) -> None:
        if not self.can_redo:
            return
        self._go_to(self.history_index + 1)

    def reset(self) -> None:
        """Start over with the same mode and difficulty"""
        fresh = self.new_game(self.mode, self.difficulty)
        self.state = fresh.state
        self.history = fresh.history
        self.history_index = 0
        self.status = GameStatus.PLAYING
        self.winner = None
        self.revision += 1

    # -- PRIVATE HELPERS ---
    def _record(self, move: Move) -> None:
        """truncate-on-branch: a new move after an undo discards the redo entries"""
        self.history = self.history[: self.history_index + 1]
        self.history.append(HistoryEntry(self.state, move))
        self.history_index = len(self.history) - 1
        self.revision += 1

    def _go_to(self, index: int) -> None:
        self.history_index = index
        self.state = self.history[index].state
        self.revision += 1
        self._update_game_status()

    def _update_game_status(self) -> None:
        outcome = self.state.outcome()
        self.status = GameStatus.ENDED if outcome.ended else GameStatus.PLAYING
        self.winner = outcome.winner
