"""出牌规则单元测试 - 覆盖所有花色/点数组合"""

import itertools

import pytest

from crazy_eights.engine.card import Card, Rank, Suit
from crazy_eights.engine.rules import effective_suit, is_legal_play, legal_plays


ALL_CARDS = [Card(r, s) for s in Suit for r in Rank]
DECLARED_OPTIONS = [None, *Suit]


def c(rank: Rank, suit: Suit = Suit.SPADES) -> Card:
    """快捷构造一张牌"""
    return Card(rank=rank, suit=suit)


class TestEffectiveSuit:

    def test_top_card_suit_without_declaration(self):
        assert effective_suit(c(Rank.FIVE, Suit.CLUBS), None) == Suit.CLUBS

    def test_declared_suit_overrides(self):
        assert effective_suit(c(Rank.EIGHT, Suit.CLUBS), Suit.HEARTS) == Suit.HEARTS


class TestIsLegalPlay:

    def test_same_suit(self):
        assert is_legal_play(c(Rank.TWO, Suit.HEARTS), c(Rank.KING, Suit.HEARTS), None)

    def test_same_rank(self):
        assert is_legal_play(c(Rank.KING, Suit.CLUBS), c(Rank.KING, Suit.HEARTS), None)

    def test_no_match(self):
        assert not is_legal_play(c(Rank.TWO, Suit.CLUBS), c(Rank.KING, Suit.HEARTS), None)

    def test_declared_suit_replaces_top_suit(self):
        top = c(Rank.EIGHT, Suit.HEARTS)
        assert is_legal_play(c(Rank.TWO, Suit.SPADES), top, Suit.SPADES)
        assert not is_legal_play(c(Rank.TWO, Suit.HEARTS), top, Suit.SPADES)

    def test_rank_match_still_counts_with_declared_suit(self):
        top = c(Rank.NINE, Suit.HEARTS)
        assert is_legal_play(c(Rank.NINE, Suit.CLUBS), top, Suit.SPADES)

    def test_eight_always_legal(self):
        """8 对任何顶牌、任何指定花色都合法"""
        for suit, top, declared in itertools.product(Suit, ALL_CARDS, DECLARED_OPTIONS):
            assert is_legal_play(Card(Rank.EIGHT, suit), top, declared)

    def test_non_eight_matches_formula(self):
        """非 8 的牌：花色等于生效花色，或点数等于顶牌点数"""
        for card, top, declared in itertools.product(ALL_CARDS, ALL_CARDS, DECLARED_OPTIONS):
            if card.rank == Rank.EIGHT:
                continue
            target = declared if declared is not None else top.suit
            expected = card.suit == target or card.rank == top.rank
            assert is_legal_play(card, top, declared) is expected


class TestLegalPlays:

    def test_keeps_hand_order(self):
        hand = [
            c(Rank.EIGHT, Suit.DIAMONDS), c(Rank.TWO, Suit.CLUBS),
            c(Rank.FIVE, Suit.HEARTS), c(Rank.KING, Suit.CLUBS),
        ]
        result = legal_plays(hand, c(Rank.FIVE, Suit.CLUBS), None)
        assert result == [hand[0], hand[1], hand[2], hand[3]]

    def test_filters_illegal(self):
        hand = [c(Rank.TWO, Suit.HEARTS), c(Rank.THREE, Suit.CLUBS)]
        assert legal_plays(hand, c(Rank.FIVE, Suit.CLUBS), None) == [hand[1]]

    @pytest.mark.parametrize("declared", DECLARED_OPTIONS)
    def test_empty_hand(self, declared):
        assert legal_plays([], c(Rank.FIVE), declared) == []
