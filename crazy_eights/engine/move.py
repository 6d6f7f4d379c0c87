"""一步行动的结构化表示 - 出牌或摸牌"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional

from .card import Card, Suit


class MoveAction(str, Enum):
    """行动类型"""
    PLAY = "play"   # 出牌
    DRAW = "draw"   # 摸牌


@dataclass(frozen=True)
class Move:
    """一步行动；suit 仅在打出 8 且已决定花色时使用"""
    action: MoveAction
    card: Optional[Card] = None
    suit: Optional[Suit] = None

    @classmethod
    def play(cls, card: Card, suit: Optional[Suit] = None) -> "Move":
        return cls(action=MoveAction.PLAY, card=card, suit=suit)

    @classmethod
    def draw(cls) -> "Move":
        return cls(action=MoveAction.DRAW)

    def __repr__(self) -> str:
        if self.action == MoveAction.DRAW:
            return "[DRAW]"
        suit = f" -> {self.suit.value}" if self.suit else ""
        return f"[PLAY] {self.card!r}{suit}"
