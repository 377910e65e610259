import random

from patience import common as C
from patience.modes.freecell import FreeCellTableau, new_freecell_pile
from patience.piles import CardSequence, PileKind


def card(rank: int, suit: C.Suit) -> C.Card:
    return C.Card(C.Rank.from_number(rank), suit)


def new_tableau(seed=11):
    return FreeCellTableau(rng=random.Random(seed))


def test_deal_uses_whole_deck_face_up():
    t = new_tableau()
    sizes = [p.size for p in t.piles]
    assert sizes == [7, 7, 7, 7, 6, 6, 6, 6]
    assert sum(sizes) == 52
    assert all(p.hidden_count == 0 for p in t.piles)
    cards = [c for p in t.piles for c in p.cards]
    assert len(set(cards)) == 52
    assert all(c.is_empty for c in t.cells)
    assert all(f.is_empty for f in t.foundations)


def test_layout():
    t = new_tableau()
    assert (t.row_count, t.column_count) == (2, 8)
    kinds = [(x, y, p.kind) for x, y, p in t.all_piles]
    assert kinds[:4] == [(x, 0, PileKind.CELL) for x in range(4)]
    assert kinds[4:8] == [(x, 0, PileKind.FOUNDATION) for x in range(4, 8)]
    assert kinds[8:] == [(x, 1, PileKind.CASCADE) for x in range(8)]
    assert t.row_heights == [1, 4]


def test_only_single_cards_are_dragged():
    t = new_tableau()
    pile = t.piles[0]
    assert pile.longest_draggable_sequence == 1
    assert pile.sequence(2) is None
    assert pile.sequence(1).bottom_card == pile.top


def test_cascade_builds_down_alternating_colors():
    pile = new_freecell_pile()
    pile.push(card(9, C.Suit.CLUB))
    assert pile.drop(CardSequence.detached([card(8, C.Suit.DIAMOND)]))
    assert not pile.drop(CardSequence.detached([card(7, C.Suit.HEART)]))
    assert not pile.drop(CardSequence.detached([card(6, C.Suit.SPADE)]))
    assert pile.drop(CardSequence.detached([card(7, C.Suit.SPADE)]))
    assert pile.size == 3


def test_empty_cascade_accepts_any_card():
    pile = new_freecell_pile()
    assert pile.drop(CardSequence.detached([card(4, C.Suit.HEART)]))
    assert pile.visible_count == 1


def test_move_through_a_free_cell():
    t = new_tableau()
    source = t.piles[0]
    moving = source.top
    cell = t.cells[2]

    assert cell.drop(source.sequence(1))
    assert cell.cards == (moving,)
    assert source.size == 6
    assert source.hidden_count == 0

    # occupied cell refuses another card
    assert not t.cells[2].drop(t.piles[1].sequence(1))
    assert t.piles[1].size == 7

    empty = t.piles[7]
    empty.clear()
    assert empty.drop(cell.sequence(1))
    assert cell.is_empty
    assert empty.top == moving
