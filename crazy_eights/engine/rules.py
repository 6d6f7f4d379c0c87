"""出牌规则 - 判断一张牌能否打在弃牌堆顶牌上"""

from typing import Iterable, List, Optional

from .card import Card, Suit


def effective_suit(top_card: Card, declared_suit: Optional[Suit]) -> Suit:
    """当前生效花色：指定花色优先，否则为顶牌花色"""
    return declared_suit if declared_suit is not None else top_card.suit


def is_legal_play(card: Card, top_card: Card, declared_suit: Optional[Suit]) -> bool:
    """
    判断出牌是否合法。
    8 任何时候都能出；其他牌需与生效花色相同，或与顶牌点数相同。
    """
    if card.is_wild:
        return True
    return card.suit == effective_suit(top_card, declared_suit) or card.rank == top_card.rank


def legal_plays(
    hand: Iterable[Card], top_card: Card, declared_suit: Optional[Suit]
) -> List[Card]:
    """列出手牌中所有可出的牌（保持手牌顺序）"""
    return [c for c in hand if is_legal_play(c, top_card, declared_suit)]
