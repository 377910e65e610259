# klondike.py - Klondike rules, deal and stock cycling
import logging
import random
from typing import List, Optional

from patience import common as C
from patience.piles import (
    Pile,
    alternate_color_descending,
    alternate_color_drop,
    cascade_rules,
    longest_sequence,
    new_foundation,
    new_stock,
    new_waste,
)
from patience.tableau import Tableau

logger = logging.getLogger(__name__)


KLONDIKE_PILE_RULES = cascade_rules(
    can_drop=alternate_color_drop(lambda card: card.rank is C.Rank.KING),
    longest_run=lambda pile: longest_sequence(pile, alternate_color_descending),
)


def new_klondike_pile() -> Pile:
    return Pile(KLONDIKE_PILE_RULES)


class KlondikeTableau(Tableau):
    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__(2, 7)
        self.waste = new_waste()
        self.stock = new_stock(C.shuffled(C.full_deck(), rng))
        self.foundations: List[Pile] = [new_foundation() for _ in range(4)]
        self.piles: List[Pile] = [new_klondike_pile() for _ in range(7)]

        # Triangle: round s deals to the first 7 - s piles, so pile i ends with 7 - i cards
        for s in range(len(self.piles)):
            for n in range(len(self.piles) - s):
                self.piles[n].push(self.stock.take_one())
        for pile in self.piles:
            pile.show_only_top()
        logger.debug("Klondike dealt, %d cards left in stock", self.stock.size)

    def build_layout(self):
        return [self.stock, self.waste, None, *self.foundations, *self.piles]

    def deal(self):
        """Turn one stock card onto the waste, or recycle the waste when the stock is out."""
        card = self.stock.take_one()
        if card is not None:
            self.waste.push(card)
            return
        if self.waste.is_empty:
            return
        logger.debug("Recycling %d waste cards into stock", self.waste.size)
        self.stock.push_all(self.waste.cards)
        self.waste.clear()

    def pile_clicked(self, pile: Pile, click_count: int):
        if pile is self.stock:
            self.deal()
        elif click_count == 2:
            self.send_to_foundation(pile)

    def send_to_foundation(self, pile: Pile) -> bool:
        seq = pile.sequence(1)
        if seq is None:
            return False
        # First foundation in layout order wins
        for foundation in self.foundations:
            if foundation.can_drop(seq):
                return foundation.drop(seq)
        return False
