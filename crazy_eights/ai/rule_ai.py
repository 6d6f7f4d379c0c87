"""规则引擎 AI - 基于简单规则的电脑策略，不依赖 LLM"""

import random
from typing import Iterable, Optional, Sequence
from collections import Counter

from crazy_eights.engine.card import Card, Suit
from crazy_eights.engine.move import Move
from crazy_eights.engine.rules import legal_plays


# 花色数量相同时的优先顺序（靠前优先）
SUIT_PRIORITY = (Suit.SPADES, Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS)


class RuleAI:
    """基于简单规则的 AI 策略"""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def choose_move(
        self,
        hand: Sequence[Card],
        top_card: Card,
        declared_suit: Optional[Suit],
    ) -> Move:
        """
        出牌决策。
        没有可出的牌就摸牌；优先随机出一张非 8 的牌，实在没有才出 8。
        """
        legal = legal_plays(hand, top_card, declared_suit)
        if not legal:
            return Move.draw()

        non_wild = [c for c in legal if not c.is_wild]
        if non_wild:
            return Move.play(self._rng.choice(non_wild))

        # 只剩 8 可出，取手牌中的第一张
        return Move.play(legal[0])

    def choose_suit(self, hand: Iterable[Card]) -> Suit:
        """指定花色：选剩余手牌中数量最多的花色，平局按固定优先级"""
        counts = Counter(c.suit for c in hand)
        return max(SUIT_PRIORITY, key=lambda s: (counts[s], -SUIT_PRIORITY.index(s)))
