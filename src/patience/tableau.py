# tableau.py - fixed grid of piles shared by every game
from typing import List, Optional, Sequence, Tuple

from patience.piles import Pile

# Rows holding a fanned pile are drawn this many card heights tall
CASCADE_ROW_HEIGHT = 4
FLAT_ROW_HEIGHT = 1


class Tableau:
    """
    Base class for a game's table. Subclasses create their piles, then return
    them from build_layout() as a row-major list where None leaves a slot empty.
    The grid is built on first use and never changes shape afterwards.
    """

    def __init__(self, row_count: int, column_count: int):
        self.row_count = row_count
        self.column_count = column_count
        self._table: Optional[List[List[Optional[Pile]]]] = None
        self._all_piles: Optional[List[Tuple[int, int, Pile]]] = None

    def build_layout(self) -> Sequence[Optional[Pile]]:
        raise NotImplementedError

    @property
    def table(self) -> List[List[Optional[Pile]]]:
        if self._table is None:
            layout = list(self.build_layout())
            if len(layout) > self.row_count * self.column_count:
                raise ValueError(
                    f"layout has {len(layout)} slots, grid holds {self.row_count}x{self.column_count}"
                )
            table: List[List[Optional[Pile]]] = [[None] * self.column_count for _ in range(self.row_count)]
            for i, pile in enumerate(layout):
                table[i // self.column_count][i % self.column_count] = pile
            self._table = table
        return self._table

    @property
    def all_piles(self) -> List[Tuple[int, int, Pile]]:
        """(column, row, pile) for every occupied slot, in layout order."""
        if self._all_piles is None:
            self._all_piles = [
                (x, y, pile)
                for y, row in enumerate(self.table)
                for x, pile in enumerate(row)
                if pile is not None
            ]
        return list(self._all_piles)

    @property
    def row_heights(self) -> List[int]:
        return [
            CASCADE_ROW_HEIGHT if any(p is not None and p.show_as_cascade for p in row) else FLAT_ROW_HEIGHT
            for row in self.table
        ]

    def pile_clicked(self, pile: Pile, click_count: int):
        pass
