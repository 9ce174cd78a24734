"""
Orchestration of a local game: human moves, computer replies and history navigation.

Local play runs in the client process, so nothing in the server transport reaches this module:
embed it directly (`LocalPlayService.from_settings`) to play against the computer.
"""

import logging
from typing import Optional, Self

from src.core.config import Settings
from src.core.exceptions import NotYourTurnError
from src.core.shared_types import Difficulty, GameMode, GameStatus
from src.draughts.ai import AIPlayer
from src.draughts.game import Game
from src.draughts.moves import Move

logger = logging.getLogger(__name__)


class LocalPlayService:
    """Drives one Game. In player-vs-computer mode the computer plays black."""

    def __init__(
        self,
        game: Optional[Game] = None,
        ai: Optional[AIPlayer] = None,
        think_delay: float = 0.0,
    ) -> None:
        self.game = game or Game.new_game()
        self.ai = ai or AIPlayer()
        self.think_delay = think_delay

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        mode: GameMode = GameMode.PVP,
        difficulty: Difficulty = Difficulty.MEDIUM,
    ) -> Self:
        ai = AIPlayer(
            depths=settings.search_depths,
            random_probability=settings.easy_random_probability,
        )
        return cls(Game.new_game(mode, difficulty), ai=ai, think_delay=settings.ai_think_delay)

    def new_game(
        self, mode: GameMode = GameMode.PVP, difficulty: Difficulty = Difficulty.MEDIUM
    ) -> Game:
        self.game = Game.new_game(mode, difficulty)
        return self.game

    def play_human_move(self, move: Move) -> Move:
        if self.game.is_ai_turn:
            raise NotYourTurnError("It is the computer's turn.")
        return self.game.make_move(move)

    async def play_ai_turn(self) -> Optional[Move]:
        """
        Let the computer reply
        ----

        The search runs in a worker thread. If the game was reset, undone or finished while it was
        thinking, the result is thrown away and None is returned.
        """
        if not self.game.is_ai_turn:
            return None

        game = self.game
        revision = game.revision
        move = await self.ai.choose_move_async(
            game.board, game.player_to_move, game.difficulty, self.think_delay
        )

        if (
            move is None
            or self.game is not game
            or game.revision != revision
            or game.status != GameStatus.PLAYING
        ):
            logger.debug("Discarding computer move %s computed for a stale position", move)
            return None
        return game.make_move(move)

    def undo(self) -> None:
        self.game.undo()

    def redo(self) -> None:
        self.game.redo()

    def reset(self) -> None:
        self.game.reset()
