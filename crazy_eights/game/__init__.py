# 游戏流程控制模块
from .player import Side
from .game_state import GameState, GameStatus, GameEvent, GameView
from .errors import (
    CrazyEightsError, InvalidTurnError, IllegalMoveError,
    GameNotInProgressError, InvalidStateError, InsufficientCardsError,
)
from .controller import GameController, AIStrategy
from .scheduler import ComputerTurnScheduler
