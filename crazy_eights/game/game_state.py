"""游戏状态 - 一局疯狂 8 点的不可变状态快照"""

from enum import Enum
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from crazy_eights.engine.card import Card, Suit
from crazy_eights.engine.rules import effective_suit, legal_plays
from crazy_eights.game.player import Side


class GameStatus(str, Enum):
    """游戏阶段"""
    NOT_STARTED = "not_started"       # 等待开始
    IN_PROGRESS = "in_progress"       # 出牌中
    AWAITING_SUIT = "awaiting_suit"   # 玩家打出 8，等待指定花色
    CONCLUDED = "concluded"           # 已结束


@dataclass
class GameEvent:
    """游戏事件记录"""
    action: str                  # "start", "draw", "reshuffle", "forfeit", "play", "declare", "win", "reset"
    side: Optional[Side] = None
    card: Optional[Card] = None
    suit: Optional[Suit] = None
    message: str = ""


@dataclass(frozen=True)
class GameState:
    """一局游戏的完整状态（不可变，每次操作生成新实例）"""
    draw_pile: Tuple[Card, ...] = ()
    discard_pile: Tuple[Card, ...] = ()
    player_hand: Tuple[Card, ...] = ()
    computer_hand: Tuple[Card, ...] = ()
    declared_suit: Optional[Suit] = None
    turn: Side = Side.PLAYER
    status: GameStatus = GameStatus.NOT_STARTED
    winner: Optional[Side] = None
    last_action: str = "欢迎来到疯狂 8 点！"

    # 用于识别过期的延迟操作
    game_id: int = 0
    move_count: int = 0

    @property
    def top_card(self) -> Optional[Card]:
        return self.discard_pile[-1] if self.discard_pile else None

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.CONCLUDED

    @property
    def total_cards(self) -> int:
        return (
            len(self.draw_pile) + len(self.discard_pile)
            + len(self.player_hand) + len(self.computer_hand)
        )

    def hand(self, side: Side) -> Tuple[Card, ...]:
        return self.player_hand if side is Side.PLAYER else self.computer_hand

    def with_hand(self, side: Side, hand: Tuple[Card, ...], **changes) -> "GameState":
        """替换某一方的手牌，同时应用其他字段修改"""
        key = "player_hand" if side is Side.PLAYER else "computer_hand"
        changes[key] = hand
        return replace(self, **changes)

    def all_cards(self) -> List[Card]:
        return [
            *self.draw_pile, *self.discard_pile,
            *self.player_hand, *self.computer_hand,
        ]


@dataclass
class GameView:
    """展示层可见的状态：电脑手牌只暴露张数"""
    draw_pile_size: int
    top_card: Optional[Card]
    declared_suit: Optional[Suit]
    effective_suit: Optional[Suit]
    player_hand: List[Card]
    computer_hand_size: int
    turn: Side
    status: GameStatus
    winner: Optional[Side]
    last_action: str
    legal_cards: List[Card] = field(default_factory=list)

    @classmethod
    def from_state(cls, state: GameState) -> "GameView":
        top = state.top_card
        legal: List[Card] = []
        if (
            top is not None
            and state.status == GameStatus.IN_PROGRESS
            and state.turn is Side.PLAYER
        ):
            legal = legal_plays(state.player_hand, top, state.declared_suit)
        return cls(
            draw_pile_size=len(state.draw_pile),
            top_card=top,
            declared_suit=state.declared_suit,
            effective_suit=effective_suit(top, state.declared_suit) if top else None,
            player_hand=list(state.player_hand),
            computer_hand_size=len(state.computer_hand),
            turn=state.turn,
            status=state.status,
            winner=state.winner,
            last_action=state.last_action,
            legal_cards=legal,
        )
