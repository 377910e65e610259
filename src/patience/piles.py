"""Piles and card sequences.

A pile is an ordered stack of cards where index 0 is the top card. The first
``visible_count`` cards are face up; the rest are hidden. What a pile accepts
and how many cards can be dragged off it is decided by its :class:`PileRules`,
so every kind of pile (cascade, foundation, cell, waste, stock) is the same
:class:`Pile` type carrying different rules.

Moves happen in two steps. ``pile.sequence(count)`` describes a candidate run
of top cards without touching the pile. ``target.drop(sequence)`` checks the
target's rules and, only if the move is legal, removes the run from its origin
and places it on the target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from patience.common import Card, Rank

logger = logging.getLogger(__name__)


class PileError(ValueError):
    """Base class for misuse of piles and sequences."""


class EmptySequenceError(PileError):
    pass


class StaleSequenceError(PileError):
    """The origin pile no longer holds the cards a sequence describes."""


class PileKind(Enum):
    CASCADE = "cascade"
    FOUNDATION = "foundation"
    CELL = "cell"
    WASTE = "waste"
    STOCK = "stock"


DropRule = Callable[["Pile", "CardSequence"], bool]
RunRule = Callable[["Pile"], int]
ModificationHook = Callable[["Pile"], None]
Adjacency = Callable[[Card, Card], bool]


@dataclass(frozen=True)
class PileRules:
    kind: PileKind
    can_drop: DropRule
    longest_run: RunRule
    show_as_cascade: bool = True
    after_modification: Optional[ModificationHook] = None


class CardSequence:
    """A non-empty run of top cards taken from ``origin``.

    The sequence only describes the cards (origin, start index, length); the
    origin keeps them until a drop calls ``origin.remove(sequence)``. Sequences
    handed out by :meth:`Pile.sequence` always start at 0.
    """

    __slots__ = ("origin", "start", "cards")

    def __init__(self, origin: Optional["Pile"], cards: Iterable[Card], start: int = 0):
        cards = tuple(cards)
        if not cards:
            raise EmptySequenceError("empty sequence")
        self.origin = origin
        self.start = start
        self.cards: Tuple[Card, ...] = cards

    @classmethod
    def detached(cls, cards: Iterable[Card]) -> "CardSequence":
        """A sequence with no origin pile; dropping it removes nothing."""
        return cls(None, cards)

    @property
    def bottom_card(self) -> Card:
        return self.cards[-1]

    @property
    def is_suited(self) -> bool:
        first = self.cards[0].suit
        return all(c.suit == first for c in self.cards)

    def __len__(self):
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __getitem__(self, index):
        return self.cards[index]

    def __repr__(self):
        return f"CardSequence({list(self.cards)!r})"


class Pile:
    def __init__(self, rules: PileRules, cards: Iterable[Card] = ()):
        self.rules = rules
        self._cards: List[Card] = list(cards)
        self._visible_count = 0

    # ----- Read-only state -----
    @property
    def kind(self) -> PileKind:
        return self.rules.kind

    @property
    def show_as_cascade(self) -> bool:
        return self.rules.show_as_cascade

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def visible_count(self) -> int:
        return self._visible_count

    @property
    def size(self) -> int:
        return len(self._cards)

    @property
    def hidden_count(self) -> int:
        return self.size - self._visible_count

    @property
    def is_empty(self) -> bool:
        return not self._cards

    @property
    def top(self) -> Optional[Card]:
        return self._cards[0] if self._cards else None

    @property
    def visible_cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards[:self._visible_count])

    @property
    def hidden_cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards[self._visible_count:])

    @property
    def longest_draggable_sequence(self) -> int:
        return self.rules.longest_run(self)

    # ----- Moves -----
    def sequence(self, count: int) -> Optional[CardSequence]:
        if count < 1 or count > self.longest_draggable_sequence:
            return None
        return CardSequence(self, self._cards[:count])

    def can_drop(self, sequence: CardSequence) -> bool:
        return self.rules.can_drop(self, sequence)

    def drop(self, sequence: CardSequence) -> bool:
        if not self.can_drop(sequence):
            return False
        if sequence.origin is not None:
            sequence.origin.remove(sequence)
        self._cards[0:0] = sequence.cards
        self._visible_count += len(sequence)
        self.after_modification()
        return True

    def remove(self, sequence: CardSequence):
        """Take ``sequence`` off this pile, then run the pile's hook.

        The cards must still sit at ``sequence.start``; otherwise nothing
        changes and :class:`StaleSequenceError` is raised.
        """
        if sequence.origin is not self:
            raise StaleSequenceError("sequence belongs to another pile")
        start, count = sequence.start, len(sequence)
        if start < 0 or tuple(self._cards[start:start + count]) != sequence.cards:
            logger.debug("Refusing stale removal of %r from %s pile", sequence, self.kind.value)
            raise StaleSequenceError("pile no longer holds the sequence")
        self._pop(start, count)
        self.after_modification()

    def after_modification(self):
        hook = self.rules.after_modification
        if hook is not None:
            hook(self)

    def _pop(self, start: int, count: int):
        visible_removed = max(0, min(start + count, self._visible_count) - start)
        del self._cards[start:start + count]
        # a non-empty pile always shows its new top
        self._visible_count = 0 if not self._cards else max(self._visible_count - visible_removed, 1)

    # ----- Dealing -----
    def push(self, card: Card):
        self._cards.insert(0, card)
        self._visible_count += 1

    def clear(self):
        self._cards.clear()
        self._visible_count = 0

    def show_only_top(self):
        self._visible_count = 1 if self._cards else 0

    def take(self, count: int) -> List[Card]:
        """Remove up to ``count`` cards from the top, top card first."""
        taken = self._cards[:count]
        del self._cards[:count]
        self._visible_count = min(self._visible_count, len(self._cards))
        return taken

    def take_one(self) -> Optional[Card]:
        taken = self.take(1)
        return taken[0] if taken else None

    def push_all(self, cards: Sequence[Card]):
        """Put ``cards`` back on top in reverse order (recycling a waste)."""
        self._cards[0:0] = list(reversed(cards))

    def __repr__(self):
        return f"<Pile {self.kind.value} size={self.size} visible={self._visible_count}>"


def deal_to_piles(piles: Sequence[Pile], cards: Iterable[Card]):
    for i, card in enumerate(cards):
        piles[i % len(piles)].push(card)


# ---------- Rule building blocks ----------
def longest_sequence(pile: Pile, adjacent: Adjacency) -> int:
    """Length of the visible run from the top where each pair satisfies ``adjacent``.

    ``adjacent(previous, card)`` is called with the upper card first.
    """
    visible = pile.visible_cards
    if not visible:
        return 0
    count = 1
    previous = visible[0]
    for card in visible[1:]:
        if not adjacent(previous, card):
            break
        count += 1
        previous = card
    return count


def single_card_run(pile: Pile) -> int:
    return 0 if pile.is_empty else 1


def no_run(pile: Pile) -> int:
    return 0


def never_drop(pile: Pile, sequence: CardSequence) -> bool:
    return False


def alternate_color_drop(on_empty: Callable[[Card], bool]) -> DropRule:
    """Build-down rule by alternating colors; ``on_empty`` decides empty targets."""
    def can_drop(pile: Pile, sequence: CardSequence) -> bool:
        top = pile.top
        bottom = sequence.bottom_card
        if top is None:
            return on_empty(bottom)
        return bottom.color == top.color.opposite and bottom.rank.is_previous(top.rank)
    return can_drop


def alternate_color_descending(previous: Card, card: Card) -> bool:
    return card.color == previous.color.opposite and previous.rank.is_previous(card.rank)


def _by_suit_foundation_drop(pile: Pile, sequence: CardSequence) -> bool:
    card = sequence.bottom_card
    top = pile.top
    if top is None:
        return card.rank is Rank.ACE
    return card.suit == top.suit and top.rank.is_previous(card.rank)


def _cell_drop(pile: Pile, sequence: CardSequence) -> bool:
    return pile.is_empty and len(sequence) == 1


FOUNDATION_RULES = PileRules(
    kind=PileKind.FOUNDATION,
    can_drop=_by_suit_foundation_drop,
    longest_run=no_run,
    show_as_cascade=False,
)

CELL_RULES = PileRules(
    kind=PileKind.CELL,
    can_drop=_cell_drop,
    longest_run=single_card_run,
    show_as_cascade=False,
)

WASTE_RULES = PileRules(
    kind=PileKind.WASTE,
    can_drop=never_drop,
    longest_run=single_card_run,
    show_as_cascade=False,
)

STOCK_RULES = PileRules(
    kind=PileKind.STOCK,
    can_drop=never_drop,
    longest_run=no_run,
    show_as_cascade=False,
)


def cascade_rules(
    can_drop: DropRule,
    longest_run: RunRule,
    after_modification: Optional[ModificationHook] = None,
) -> PileRules:
    return PileRules(
        kind=PileKind.CASCADE,
        can_drop=can_drop,
        longest_run=longest_run,
        show_as_cascade=True,
        after_modification=after_modification,
    )


def new_foundation() -> Pile:
    return Pile(FOUNDATION_RULES)


def new_cell() -> Pile:
    return Pile(CELL_RULES)


def new_waste() -> Pile:
    return Pile(WASTE_RULES)


def new_stock(cards: Iterable[Card] = ()) -> Pile:
    """Undealt reserve; its cards stay face down (``visible_count`` 0)."""
    return Pile(STOCK_RULES, cards)
