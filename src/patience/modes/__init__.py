"""Game selection: build a fresh tableau for a variant by name."""

from __future__ import annotations

import logging
import random
from typing import Optional, Union

from patience.modes.freecell import FreeCellTableau
from patience.modes.klondike import KlondikeTableau
from patience.modes.spider import SpiderLevel, SpiderTableau
from patience.tableau import Tableau

logger = logging.getLogger(__name__)

# Menu order
GAME_NAMES = ["freecell", "klondike", "spider"]

GAME_LABELS = {
    "freecell": "FreeCell",
    "klondike": "Klondike",
    "spider": "Spider",
}


def parse_spider_level(level: Union[SpiderLevel, str, None]) -> SpiderLevel:
    if level is None:
        return SpiderLevel.MEDIUM
    if isinstance(level, SpiderLevel):
        return level
    key = str(level).strip().upper()
    try:
        return SpiderLevel[key]
    except KeyError:
        raise ValueError(f"unknown Spider level: {level!r}") from None


def new_game(
    name: str,
    level: Union[SpiderLevel, str, None] = None,
    rng: Optional[random.Random] = None,
) -> Tableau:
    key = str(name).strip().lower()
    if key not in GAME_NAMES:
        raise ValueError(f"unknown game: {name!r}")
    if key != "spider" and level is not None:
        raise ValueError(f"{GAME_LABELS[key]} has no levels")

    if key == "freecell":
        tableau: Tableau = FreeCellTableau(rng=rng)
    elif key == "klondike":
        tableau = KlondikeTableau(rng=rng)
    else:
        tableau = SpiderTableau(parse_spider_level(level), rng=rng)
    logger.info("New game: %s", describe_game(key, level))
    return tableau


def describe_game(name: str, level: Union[SpiderLevel, str, None] = None) -> str:
    label = GAME_LABELS.get(str(name).lower(), str(name))
    if str(name).lower() == "spider":
        return f"{label} - {parse_spider_level(level).value}"
    return label


__all__ = [
    "GAME_NAMES",
    "GAME_LABELS",
    "FreeCellTableau",
    "KlondikeTableau",
    "SpiderLevel",
    "SpiderTableau",
    "describe_game",
    "new_game",
    "parse_spider_level",
]
