import random
from collections import Counter

import pytest

from patience import common as C
from patience.modes import spider as spider_mode
from patience.modes.spider import SpiderLevel, SpiderTableau, new_spider_pile
from patience.piles import CardSequence


def card(rank: int, suit: C.Suit) -> C.Card:
    return C.Card(C.Rank.from_number(rank), suit)


def hearts_king_to(low: int):
    """Top-first run low..King of hearts."""
    return [card(r, C.Suit.HEART) for r in range(low, 14)]


def test_pile_shows_only_the_topmost_card():
    pile = new_spider_pile()
    cards = C.shuffled(C.full_deck(), random.Random(1))[:6]
    for c in reversed(cards):
        pile.push(c)
    pile.show_only_top()

    assert not pile.is_empty
    assert pile.size == 6
    assert pile.top == cards[0]
    assert pile.visible_cards == (cards[0],)
    assert pile.visible_count == 1


def test_drop_ignores_suit():
    pile = new_spider_pile()
    rest = [card(6, C.Suit.HEART), card(8, C.Suit.HEART), card(11, C.Suit.HEART)]
    for c in reversed(rest):
        pile.push(c)
    pile.show_only_top()

    five = card(5, C.Suit.SPADE)
    seq = CardSequence.detached([five])
    assert pile.can_drop(seq)
    assert pile.drop(seq)
    assert pile.top == five
    assert pile.visible_cards == (five, rest[0])
    assert not pile.drop(CardSequence.detached([card(3, C.Suit.SPADE)]))


def test_empty_pile_accepts_any_card():
    pile = new_spider_pile()
    assert pile.drop(CardSequence.detached([card(9, C.Suit.CLUB)]))


def test_draggable_run_needs_same_suit():
    pile = new_spider_pile()
    for c in (card(13, C.Suit.HEART), card(11, C.Suit.HEART), card(9, C.Suit.HEART)):
        pile.push(c)
    pile.show_only_top()
    for c in (card(7, C.Suit.HEART), card(6, C.Suit.HEART), card(5, C.Suit.HEART)):
        pile.push(c)
    assert pile.longest_draggable_sequence == 3

    pile.push(card(4, C.Suit.SPADE))
    assert pile.longest_draggable_sequence == 1
    assert pile.sequence(2) is None


def test_completed_suit_is_collected_by_hook():
    pile = new_spider_pile()
    pile.push(card(10, C.Suit.DIAMOND))
    pile.push(card(3, C.Suit.CLUB))
    pile.show_only_top()
    for c in reversed(hearts_king_to(1)):
        pile.push(c)
    assert pile.size == 15

    pile.after_modification()
    assert pile.cards == (card(3, C.Suit.CLUB), card(10, C.Suit.DIAMOND))
    assert pile.visible_count == 1


def test_dropping_the_ace_completes_the_suit():
    completed = []
    pile = new_spider_pile(lambda p, suit: completed.append((p, suit)))
    pile.push(card(12, C.Suit.SPADE))
    pile.show_only_top()
    for c in reversed(hearts_king_to(2)):
        pile.push(c)

    assert pile.drop(CardSequence.detached([card(1, C.Suit.HEART)]))
    assert pile.cards == (card(12, C.Suit.SPADE),)
    assert pile.visible_count == 1
    assert completed == [(pile, C.Suit.HEART)]


def buried_run_pile(run, on_suit_completed=None):
    """10D hidden, then ``run`` visible, with a 5S dealt on top."""
    pile = new_spider_pile(on_suit_completed)
    pile.push(card(10, C.Suit.DIAMOND))
    pile.show_only_top()
    for c in reversed(run):
        pile.push(c)
    pile.push(card(5, C.Suit.SPADE))
    return pile


def test_dragging_a_card_off_a_finished_run_collects_it():
    completed = []
    source = buried_run_pile(hearts_king_to(1), lambda p, suit: completed.append((p, suit)))
    target = new_spider_pile()
    target.push(card(6, C.Suit.CLUB))

    assert target.drop(source.sequence(1))
    assert target.cards == (card(5, C.Suit.SPADE), card(6, C.Suit.CLUB))
    assert source.cards == (card(10, C.Suit.DIAMOND),)
    assert source.visible_count == 1
    assert completed == [(source, C.Suit.HEART)]


def test_removal_over_a_broken_run_keeps_the_pile():
    run = hearts_king_to(1)
    run[5] = card(6, C.Suit.SPADE)
    source = buried_run_pile(run)
    target = new_spider_pile()
    target.push(card(6, C.Suit.CLUB))

    assert target.drop(source.sequence(1))
    assert source.cards == (*run, card(10, C.Suit.DIAMOND))
    assert source.visible_count == 14


def test_mixed_suit_run_is_not_collected():
    pile = new_spider_pile()
    run = hearts_king_to(1)
    run[5] = card(6, C.Suit.SPADE)
    for c in reversed(run):
        pile.push(c)
    pile.after_modification()
    assert pile.size == 13


@pytest.mark.parametrize("level", list(SpiderLevel))
def test_every_level_has_104_cards(level):
    pool = level.card_pool()
    assert len(pool) == spider_mode.POOL_SIZE == 104


def test_level_pools():
    easy = Counter(c.suit for c in SpiderLevel.EASY.card_pool())
    assert easy == {C.Suit.HEART: 104}
    medium = Counter(c.suit for c in SpiderLevel.MEDIUM.card_pool())
    assert medium == {C.Suit.HEART: 52, C.Suit.SPADE: 52}
    hard = Counter(SpiderLevel.HARD.card_pool())
    assert len(hard) == 52 and set(hard.values()) == {2}


def test_deal_and_layout():
    t = SpiderTableau(SpiderLevel.HARD, rng=random.Random(5))
    assert [p.size for p in t.piles] == [6, 6, 6, 6, 5, 5, 5, 5, 5, 5]
    assert all(p.visible_count == 1 for p in t.piles)
    assert t.reserve.size == 50
    assert (t.row_count, t.column_count) == (2, 10)
    placed = t.all_piles
    assert [p for _, _, p in placed[:10]] == t.piles
    assert placed[10] == (0, 1, t.reserve)
    assert t.row_heights == [4, 1]


def test_reserve_click_deals_one_card_per_pile():
    t = SpiderTableau(SpiderLevel.EASY, rng=random.Random(9))
    expected = t.reserve.cards[:10]
    t.pile_clicked(t.reserve, 1)
    assert tuple(p.top for p in t.piles) == expected
    assert t.reserve.size == 40
    assert all(p.visible_count == 2 for p in t.piles)


def test_reserve_click_is_refused_with_an_empty_pile():
    t = SpiderTableau(SpiderLevel.MEDIUM, rng=random.Random(9))
    t.piles[3].clear()
    sizes = [p.size for p in t.piles]
    t.pile_clicked(t.reserve, 1)
    assert t.reserve.size == 50
    assert [p.size for p in t.piles] == sizes


def test_clicking_a_cascade_does_nothing():
    t = SpiderTableau(rng=random.Random(2))
    before = [p.cards for p in t.piles]
    t.pile_clicked(t.piles[0], 2)
    assert [p.cards for p in t.piles] == before
    assert t.reserve.size == 50


def test_pool_of_wrong_size_is_rejected(monkeypatch):
    monkeypatch.setattr(SpiderLevel, "card_pool", lambda self: C.full_deck())
    with pytest.raises(ValueError):
        SpiderTableau(SpiderLevel.EASY)
