"""对局双方 - 人类玩家与电脑"""

from enum import Enum


class Side(str, Enum):
    """对局的一方"""
    PLAYER = "player"       # 人类玩家
    COMPUTER = "computer"   # 电脑

    @property
    def opponent(self) -> "Side":
        return Side.COMPUTER if self is Side.PLAYER else Side.PLAYER

    @property
    def display(self) -> str:
        return "你" if self is Side.PLAYER else "电脑"
