# 牌与规则模块
from .card import (
    Card, Rank, Suit, WILD_RANK, SUIT_NAME, SUIT_SYMBOL,
    build_deck, shuffle, card_from_key, parse_suit,
)
from .rules import is_legal_play, legal_plays, effective_suit
from .move import Move, MoveAction
