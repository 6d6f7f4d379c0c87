"""牌的定义 - 疯狂 8 点使用的 52 张标准扑克牌"""

from enum import Enum
from dataclasses import dataclass
from typing import List, Optional, Sequence
import random


class Suit(str, Enum):
    """花色枚举"""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Rank(str, Enum):
    """点数枚举（只区分成员，不比较大小；8 是万能牌）"""
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


# 万能牌点数
WILD_RANK = Rank.EIGHT

# 花色显示映射
SUIT_SYMBOL = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

SUIT_NAME = {
    Suit.HEARTS: "红桃",
    Suit.DIAMONDS: "方块",
    Suit.CLUBS: "梅花",
    Suit.SPADES: "黑桃",
}

RED_SUITS = frozenset({Suit.HEARTS, Suit.DIAMONDS})


@dataclass(frozen=True)
class Card:
    """一张扑克牌，身份由 (点数, 花色) 决定"""
    rank: Rank
    suit: Suit

    @property
    def is_wild(self) -> bool:
        return self.rank == WILD_RANK

    @property
    def display(self) -> str:
        return f"{SUIT_SYMBOL[self.suit]}{self.rank.value}"

    @property
    def key(self) -> str:
        """传输用的字符串键（如 8-hearts），仅用于前端通信"""
        return f"{self.rank.value}-{self.suit.value}"

    def __repr__(self) -> str:
        return self.display


def card_from_key(key: str) -> Card:
    """解析 Card.key；格式错误时抛出 ValueError"""
    rank_text, sep, suit_text = key.partition("-")
    if not sep:
        raise ValueError(f"无法解析卡牌: {key!r}")
    return Card(rank=Rank(rank_text), suit=Suit(suit_text))


def parse_suit(text: str) -> Suit:
    """从英文名、符号或中文名解析花色"""
    text = text.strip()
    for suit in Suit:
        if text.lower() == suit.value or text in (SUIT_SYMBOL[suit], SUIT_NAME[suit]):
            return suit
    raise ValueError(f"未知花色: {text!r}")


def shuffle(cards: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """洗牌：返回新的列表，不修改传入序列"""
    shuffled = list(cards)
    (rng or random).shuffle(shuffled)
    return shuffled


def build_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """创建一副洗好的 52 张牌"""
    deck = [Card(rank=rank, suit=suit) for suit in Suit for rank in Rank]
    assert len(set(deck)) == 52, f"牌数错误: {len(deck)}"
    return shuffle(deck, rng)
