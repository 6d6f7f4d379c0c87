"""游戏控制器 - 疯狂 8 点的状态机与回合结算"""

import logging
import random
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from crazy_eights.ai.rule_ai import RuleAI
from crazy_eights.engine.card import Card, Suit, SUIT_NAME, build_deck, shuffle
from crazy_eights.engine.move import Move, MoveAction
from crazy_eights.engine.rules import is_legal_play, legal_plays
from crazy_eights.game.errors import (
    GameNotInProgressError,
    IllegalMoveError,
    InsufficientCardsError,
    InvalidStateError,
    InvalidTurnError,
)
from crazy_eights.game.game_state import GameEvent, GameState, GameStatus, GameView
from crazy_eights.game.player import Side

logger = logging.getLogger(__name__)

HAND_SIZE = 8
DECK_SIZE = 52

TurnToken = Tuple[int, int]


class AIStrategy(Protocol):
    """电脑决策接口（策略模式）"""

    def choose_move(
        self, hand: Sequence[Card], top_card: Card, declared_suit: Optional[Suit]
    ) -> Move:
        """决定出哪张牌，或者摸牌"""
        ...

    def choose_suit(self, hand: Iterable[Card]) -> Suit:
        """打出 8 之后决定指定的花色"""
        ...


class GameController:
    """游戏控制器：持有唯一的游戏状态，所有状态变化都经过这里的操作"""

    def __init__(self, strategy: Optional[AIStrategy] = None, rng: Optional[random.Random] = None):
        self.strategy = strategy if strategy is not None else RuleAI(rng=rng)
        self._rng = rng
        self._state = GameState()
        self.events: List[GameEvent] = []
        self._callbacks: List[Callable[[GameEvent], None]] = []  # 事件回调（用于 UI 通知）

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def turn_token(self) -> TurnToken:
        """标识当前状态；任何成功的操作都会改变它"""
        return self._state.game_id, self._state.move_count

    def on_event(self, callback: Callable[[GameEvent], None]) -> None:
        """注册事件回调"""
        self._callbacks.append(callback)

    def _emit(self, event: GameEvent) -> None:
        """触发事件通知"""
        self.events.append(event)
        for cb in self._callbacks:
            cb(event)

    def view(self) -> GameView:
        return GameView.from_state(self._state)

    def legal_plays(self, side: Side) -> List[Card]:
        """某一方当前可出的牌；不是其回合时为空"""
        s = self._state
        if s.status != GameStatus.IN_PROGRESS or s.turn is not side or s.top_card is None:
            return []
        return legal_plays(s.hand(side), s.top_card, s.declared_suit)

    # ============================================================
    #  状态提交
    # ============================================================

    def _commit(self, new_state: GameState, *events: GameEvent) -> GameState:
        """校验不变量后整体替换状态，再通知事件"""
        if new_state.status != GameStatus.NOT_STARTED:
            cards = new_state.all_cards()
            assert len(cards) == DECK_SIZE, f"牌数错误: {len(cards)}"
            assert len(set(cards)) == DECK_SIZE, "同一张牌出现在多个位置"
        assert (new_state.status == GameStatus.CONCLUDED) == (new_state.winner is not None)

        self._state = new_state
        for event in events:
            self._emit(event)
        return new_state

    def _require_turn(self, side: Side) -> GameState:
        s = self._state
        if s.status != GameStatus.IN_PROGRESS:
            raise GameNotInProgressError(f"游戏不在进行中: {s.status.value}")
        if s.turn is not side:
            raise InvalidTurnError(f"现在不是{side.display}的回合")
        return s

    # ============================================================
    #  开局 / 重置
    # ============================================================

    def start(self) -> GameState:
        """洗牌发牌：每人 8 张，再翻一张作为弃牌堆顶牌"""
        s = self._state
        if s.status not in (GameStatus.NOT_STARTED, GameStatus.CONCLUDED):
            raise InvalidStateError(f"游戏进行中，不能重新开局: {s.status.value}")

        deck = build_deck(self._rng)
        needed = 2 * HAND_SIZE + 1
        if len(deck) < needed:
            raise InsufficientCardsError(f"牌堆只有 {len(deck)} 张，发牌需要 {needed} 张")

        player_hand = tuple(deck[:HAND_SIZE])
        computer_hand = tuple(deck[HAND_SIZE:2 * HAND_SIZE])
        rest = deck[2 * HAND_SIZE:]
        first_discard = rest.pop()

        new_state = GameState(
            draw_pile=tuple(rest),
            discard_pile=(first_discard,),
            player_hand=player_hand,
            computer_hand=computer_hand,
            turn=Side.PLAYER,
            status=GameStatus.IN_PROGRESS,
            last_action="游戏开始！你的回合。",
            game_id=s.game_id + 1,
        )
        logger.info("第 %d 局开始，首张牌 %s", new_state.game_id, first_discard)
        self.events = []  # 只保留本局历史
        return self._commit(new_state, GameEvent("start", message=new_state.last_action))

    def reset(self) -> GameState:
        """放弃当前对局，回到未开始状态"""
        s = self._state
        new_state = GameState(game_id=s.game_id + 1)
        logger.info("对局已重置 (game_id=%d)", new_state.game_id)
        self.events = []
        return self._commit(new_state, GameEvent("reset", message=new_state.last_action))

    # ============================================================
    #  摸牌
    # ============================================================

    def draw(self, side: Side) -> GameState:
        """摸一张牌并交出回合；摸牌堆空时先把弃牌堆（顶牌除外）洗回去"""
        s = self._require_turn(side)
        events: List[GameEvent] = []
        draw_pile = list(s.draw_pile)
        discard_pile = s.discard_pile

        if not draw_pile:
            if len(discard_pile) <= 1:
                # 无牌可摸，直接交出回合
                message = "摸牌堆已空，无法摸牌！"
                logger.info("%s 无牌可摸，跳过回合", side.value)
                new_state = replace(
                    s,
                    turn=side.opponent,
                    last_action=message,
                    move_count=s.move_count + 1,
                )
                return self._commit(new_state, GameEvent("forfeit", side=side, message=message))

            top = discard_pile[-1]
            draw_pile = shuffle(discard_pile[:-1], self._rng)
            discard_pile = (top,)
            logger.info("摸牌堆已空，弃牌堆 %d 张洗回摸牌堆", len(draw_pile))
            events.append(GameEvent("reshuffle", side=side, message="弃牌堆已洗回摸牌堆。"))

        card = draw_pile.pop()
        message = f"{side.display} 摸了一张牌。"
        new_state = s.with_hand(
            side,
            s.hand(side) + (card,),
            draw_pile=tuple(draw_pile),
            discard_pile=discard_pile,
            turn=side.opponent,
            last_action=message,
            move_count=s.move_count + 1,
        )
        logger.debug("%s 摸牌 %s", side.value, card)
        events.append(GameEvent("draw", side=side, card=card, message=message))
        return self._commit(new_state, *events)

    # ============================================================
    #  出牌
    # ============================================================

    def play(self, side: Side, card: Card, suit: Optional[Suit] = None) -> GameState:
        """
        出一张牌。
        玩家打出 8 后进入等待指定花色状态；电脑打出 8 时立即指定花色
        （suit 为空则由策略决定）。出完手牌即获胜。
        """
        s = self._require_turn(side)
        hand = s.hand(side)
        if card not in hand:
            raise IllegalMoveError(f"{side.display}手中没有 {card.display}")
        if not is_legal_play(card, s.top_card, s.declared_suit):
            raise IllegalMoveError(f"{card.display} 不能打在 {s.top_card.display} 上")
        if suit is not None and side is Side.PLAYER:
            raise IllegalMoveError("玩家需要通过 declare_suit 指定花色")

        new_hand = tuple(c for c in hand if c != card)
        message = f"{side.display} 打出了 {card.display}。"
        events = [GameEvent("play", side=side, card=card, message=message)]
        changes = dict(
            discard_pile=s.discard_pile + (card,),
            declared_suit=None,
            move_count=s.move_count + 1,
        )

        if not new_hand:
            message += f"{side.display}赢了！"
            changes.update(status=GameStatus.CONCLUDED, winner=side)
            events.append(GameEvent("win", side=side, message=message))
            logger.info("第 %d 局结束，%s 获胜", s.game_id, side.value)
        elif card.is_wild and side is Side.PLAYER:
            message += "请指定花色。"
            changes.update(status=GameStatus.AWAITING_SUIT)
        elif card.is_wild:
            chosen = suit if suit is not None else self.strategy.choose_suit(new_hand)
            message += f"{side.display} 指定花色为 {SUIT_NAME[chosen]}。"
            changes.update(declared_suit=chosen, turn=side.opponent)
            events.append(GameEvent("declare", side=side, suit=chosen, message=message))
        else:
            changes.update(turn=side.opponent)

        logger.debug("%s 出牌 %s", side.value, card)
        new_state = s.with_hand(side, new_hand, last_action=message, **changes)
        return self._commit(new_state, *events)

    def declare_suit(self, suit: Suit) -> GameState:
        """玩家打出 8 后指定花色，回合交给电脑"""
        s = self._state
        if s.status != GameStatus.AWAITING_SUIT:
            raise InvalidStateError(f"当前不需要指定花色: {s.status.value}")

        message = f"你指定花色为 {SUIT_NAME[suit]}。"
        new_state = replace(
            s,
            declared_suit=suit,
            status=GameStatus.IN_PROGRESS,
            turn=s.turn.opponent,
            last_action=message,
            move_count=s.move_count + 1,
        )
        return self._commit(new_state, GameEvent("declare", side=s.turn, suit=suit, message=message))

    # ============================================================
    #  电脑回合
    # ============================================================

    def is_computer_turn(self) -> bool:
        s = self._state
        return s.status == GameStatus.IN_PROGRESS and s.turn is Side.COMPUTER

    def _is_stale(self, token: Optional[TurnToken]) -> bool:
        if token is not None and token != self.turn_token:
            logger.info("丢弃过期的电脑操作: %s != %s", token, self.turn_token)
            return True
        if not self.is_computer_turn():
            logger.info("当前不是电脑回合，忽略电脑操作")
            return True
        return False

    def decide_computer_move(self) -> Move:
        s = self._state
        return self.strategy.choose_move(s.computer_hand, s.top_card, s.declared_suit)

    def apply_computer_move(self, move: Move, token: Optional[TurnToken] = None) -> Optional[GameState]:
        """执行已决定的电脑行动；状态已变化时丢弃并返回 None"""
        if self._is_stale(token):
            return None
        if move.action == MoveAction.DRAW:
            return self.draw(Side.COMPUTER)
        return self.play(Side.COMPUTER, move.card, move.suit)

    def run_computer_turn(self, token: Optional[TurnToken] = None) -> Optional[GameState]:
        """由策略决定并执行一次电脑行动"""
        if self._is_stale(token):
            return None
        return self.apply_computer_move(self.decide_computer_move())
