"""Unit tests for src/services/local_play.py"""

import asyncio
from typing import Optional

import pytest

from src.core.config import Settings
from src.core.exceptions import NotYourTurnError
from src.core.shared_types import Difficulty, GameMode, GameStatus, Player
from src.draughts.ai import AIPlayer
from src.draughts.board import Board
from src.draughts.game import Game, HistoryEntry, MatchState
from src.draughts.moves import Move, legal_moves
from src.services.local_play import LocalPlayService
from tests.helpers import B, W, board_with, move


# --- MOCK DEPENDENCIES ----
class SlowAI(AIPlayer):
    """Plays the first legal move once released, so tests can change the game while it 'thinks'"""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()

    async def choose_move_async(
        self, board: Board, player: Player, difficulty: Difficulty, think_delay: float = 0.0
    ) -> Optional[Move]:
        await self.release.wait()
        moves = legal_moves(board, player)
        return moves[0] if moves else None


@pytest.fixture
def pve_service() -> LocalPlayService:
    ai = AIPlayer(depths={d: 2 for d in Difficulty})
    return LocalPlayService(Game.new_game(GameMode.PVE, Difficulty.EASY), ai=ai)


def test_human_move(pve_service: LocalPlayService) -> None:
    accepted = pve_service.play_human_move(move((2, 1), (3, 2)))
    assert accepted == move((2, 1), (3, 2))
    assert pve_service.game.is_ai_turn


def test_human_cannot_move_for_the_computer(pve_service: LocalPlayService) -> None:
    pve_service.play_human_move(move((2, 1), (3, 2)))
    with pytest.raises(NotYourTurnError):
        pve_service.play_human_move(move((5, 0), (4, 1)))


def test_both_sides_are_human_in_pvp() -> None:
    service = LocalPlayService()
    service.play_human_move(move((2, 1), (3, 2)))
    service.play_human_move(move((5, 0), (4, 1)))
    assert service.game.player_to_move == Player.WHITE


async def test_ai_turn(pve_service: LocalPlayService) -> None:
    pve_service.play_human_move(move((2, 1), (3, 2)))
    reply = await pve_service.play_ai_turn()
    assert reply is not None
    assert reply.from_square.row >= 4
    assert pve_service.game.player_to_move == Player.WHITE
    assert pve_service.game.history[-1].last_move == reply


async def test_ai_turn_when_not_its_turn(pve_service: LocalPlayService) -> None:
    assert await pve_service.play_ai_turn() is None
    assert pve_service.game.player_to_move == Player.WHITE


async def test_ai_can_finish_the_game() -> None:
    start = MatchState(board_with({(4, 3): W, (5, 2): B}), player_to_move=Player.BLACK)
    game = Game.new_game(GameMode.PVE)
    game.state = start
    game.history = [HistoryEntry(start)]
    service = LocalPlayService(game, ai=AIPlayer(depths={d: 2 for d in Difficulty}))

    reply = await service.play_ai_turn()
    assert reply == move((5, 2), (3, 4), ((4, 3),))
    assert game.status == GameStatus.ENDED
    assert game.winner == Player.BLACK


@pytest.mark.parametrize("interruption", ["undo", "reset", "new_game"])
async def test_stale_ai_move_is_discarded(interruption: str) -> None:
    ai = SlowAI()
    service = LocalPlayService(Game.new_game(GameMode.PVE), ai=ai)
    service.play_human_move(move((2, 1), (3, 2)))

    thinking = asyncio.create_task(service.play_ai_turn())
    await asyncio.sleep(0)
    if interruption == "new_game":
        service.new_game(GameMode.PVE)
    else:
        getattr(service, interruption)()
    ai.release.set()

    assert await thinking is None
    assert service.game.player_to_move == Player.WHITE
    assert service.game.board == Board.starting_position()


def test_undo_redo_reset(pve_service: LocalPlayService) -> None:
    pve_service.play_human_move(move((2, 1), (3, 2)))
    pve_service.undo()
    assert pve_service.game.board == Board.starting_position()
    pve_service.redo()
    assert pve_service.game.player_to_move == Player.BLACK
    pve_service.reset()
    assert pve_service.game.board == Board.starting_position()
    assert not pve_service.game.can_redo


def test_new_game_keeps_requested_settings(pve_service: LocalPlayService) -> None:
    game = pve_service.new_game(GameMode.PVP, Difficulty.HARD)
    assert pve_service.game is game
    assert game.mode == GameMode.PVP and game.difficulty == Difficulty.HARD


def test_from_settings() -> None:
    settings = Settings(easy_depth=1, medium_depth=3, hard_depth=5, ai_think_delay=0.0)
    service = LocalPlayService.from_settings(settings, GameMode.PVE, Difficulty.HARD)
    assert service.game.mode == GameMode.PVE
    assert service.ai.depths[Difficulty.HARD] == 5
    assert service.ai.random_probability == settings.easy_random_probability
    assert service.think_delay == 0.0
