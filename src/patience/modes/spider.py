# spider.py - Spider rules, levels and reserve dealing
import logging
import random
from enum import Enum
from typing import Callable, List, Optional

from patience import common as C
from patience.piles import Pile, PileRules, cascade_rules, deal_to_piles, longest_sequence, new_stock
from patience.tableau import Tableau

logger = logging.getLogger(__name__)

POOL_SIZE = 104
INITIAL_DEAL = 54

SuitCompletedListener = Callable[[Pile, C.Suit], None]


class SpiderLevel(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    def card_pool(self) -> List[C.Card]:
        """The unshuffled cards for this level; 104 for every level."""
        if self is SpiderLevel.EASY:
            return C.cards_of_suit(C.Suit.HEART) * 8
        if self is SpiderLevel.MEDIUM:
            return C.cards_of_suit(C.Suit.HEART) * 4 + C.cards_of_suit(C.Suit.SPADE) * 4
        return C.decks(2)

    def new_cards(self, rng: Optional[random.Random] = None) -> List[C.Card]:
        return C.shuffled(self.card_pool(), rng)


def _spider_can_drop(pile: Pile, sequence) -> bool:
    top = pile.top
    return top is None or sequence.bottom_card.rank.is_previous(top.rank)


def _same_suit_descending(previous: C.Card, card: C.Card) -> bool:
    return card.suit == previous.suit and previous.rank.is_previous(card.rank)


def spider_pile_rules(on_suit_completed: Optional[SuitCompletedListener] = None) -> PileRules:
    def collect_completed_suit(pile: Pile):
        seq = pile.sequence(C.CARDS_IN_SUIT)
        if seq is None or not seq.is_suited:
            return
        pile.remove(seq)
        suit = seq.bottom_card.suit
        logger.info("Completed a run of %s", suit)
        if on_suit_completed is not None:
            on_suit_completed(pile, suit)

    return cascade_rules(
        can_drop=_spider_can_drop,
        longest_run=lambda pile: longest_sequence(pile, _same_suit_descending),
        after_modification=collect_completed_suit,
    )


SPIDER_PILE_RULES = spider_pile_rules()


def new_spider_pile(on_suit_completed: Optional[SuitCompletedListener] = None) -> Pile:
    if on_suit_completed is None:
        return Pile(SPIDER_PILE_RULES)
    return Pile(spider_pile_rules(on_suit_completed))


class SpiderTableau(Tableau):
    def __init__(
        self,
        level: SpiderLevel = SpiderLevel.MEDIUM,
        rng: Optional[random.Random] = None,
        on_suit_completed: Optional[SuitCompletedListener] = None,
    ):
        super().__init__(2, 10)
        self.level = level
        cards = level.new_cards(rng)
        if len(cards) != POOL_SIZE:
            raise ValueError(f"{level.value} pool has {len(cards)} cards, expected {POOL_SIZE}")
        self.piles: List[Pile] = [new_spider_pile(on_suit_completed) for _ in range(10)]
        self.reserve = new_stock(cards[INITIAL_DEAL:])

        deal_to_piles(self.piles, cards[:INITIAL_DEAL])
        for pile in self.piles:
            pile.show_only_top()
        logger.debug("Spider (%s) dealt, %d cards in reserve", level.value, self.reserve.size)

    def build_layout(self):
        return [*self.piles, self.reserve]

    @property
    def has_empty_piles(self) -> bool:
        return any(p.is_empty for p in self.piles)

    def deal(self) -> bool:
        """Deal one reserve card onto every pile; refused while any pile is empty."""
        if self.has_empty_piles or self.reserve.is_empty:
            return False
        for pile, card in zip(self.piles, self.reserve.take(len(self.piles))):
            pile.push(card)
        return True

    def pile_clicked(self, pile: Pile, click_count: int):
        if pile is self.reserve:
            self.deal()
