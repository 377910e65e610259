# freecell.py - FreeCell rules and deal
import logging
import random
from typing import List, Optional

from patience import common as C
from patience.piles import (
    Pile,
    alternate_color_drop,
    cascade_rules,
    deal_to_piles,
    new_cell,
    new_foundation,
    single_card_run,
)
from patience.tableau import Tableau

logger = logging.getLogger(__name__)

# Any card may start an empty column; only one card moves at a time
FREECELL_PILE_RULES = cascade_rules(
    can_drop=alternate_color_drop(lambda card: True),
    longest_run=single_card_run,
)


def new_freecell_pile() -> Pile:
    return Pile(FREECELL_PILE_RULES)


class FreeCellTableau(Tableau):
    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__(2, 8)
        self.cells: List[Pile] = [new_cell() for _ in range(4)]
        self.foundations: List[Pile] = [new_foundation() for _ in range(4)]
        self.piles: List[Pile] = [new_freecell_pile() for _ in range(8)]

        deal_to_piles(self.piles, C.shuffled(C.full_deck(), rng))
        logger.debug("FreeCell dealt: %s", [p.size for p in self.piles])

    def build_layout(self):
        return [*self.cells, *self.foundations, *self.piles]
