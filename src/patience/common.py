# common.py - cards, decks, settings and logging shared by every game
import json
import logging
import os
import random
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


# ---------- Cards ----------
class Color(Enum):
    RED = "Red"
    BLACK = "Black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.RED else Color.RED


class Suit(Enum):
    HEART = ("Heart", Color.RED)
    SPADE = ("Spade", Color.BLACK)
    DIAMOND = ("Diamond", Color.RED)
    CLUB = ("Club", Color.BLACK)

    def __init__(self, label: str, color: Color):
        self.label = label
        self.color = color

    def __str__(self):
        return self.label


CARDS_IN_SUIT = 13


class Rank(Enum):
    ACE = ("A", "Ace", 1)
    DEUCE = ("2", "2", 2)
    THREE = ("3", "3", 3)
    FOUR = ("4", "4", 4)
    FIVE = ("5", "5", 5)
    SIX = ("6", "6", 6)
    SEVEN = ("7", "7", 7)
    EIGHT = ("8", "8", 8)
    NINE = ("9", "9", 9)
    TEN = ("10", "10", 10)
    JACK = ("J", "Jack", 11)
    QUEEN = ("Q", "Queen", 12)
    KING = ("K", "King", 13)

    def __init__(self, short_name: str, long_name: str, value: int):
        self.short_name = short_name
        self.long_name = long_name
        # Enum reserves .value for the whole tuple
        self.number = value

    def is_previous(self, other: "Rank") -> bool:
        """True if this rank sits directly below ``other`` (Six is previous of Seven)."""
        return self.number == other.number - 1

    @classmethod
    def from_number(cls, number: int) -> "Rank":
        for rank in cls:
            if rank.number == number:
                return rank
        raise ValueError(f"no rank with value {number}")

    def __str__(self):
        return self.long_name


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    @property
    def color(self) -> Color:
        return self.suit.color

    def __str__(self):
        return f"{self.rank.long_name} of {self.suit.label}"

    def __repr__(self):
        return f"{self.rank.short_name}{self.suit.label[0]}"


# ---------- Decks ----------
def cards_of_suit(suit: Suit) -> List[Card]:
    return [Card(rank, suit) for rank in Rank]


def full_deck() -> List[Card]:
    return [card for suit in Suit for card in cards_of_suit(suit)]


def decks(count: int) -> List[Card]:
    out: List[Card] = []
    for _ in range(count):
        out.extend(full_deck())
    return out


def shuffled(cards: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Return a shuffled copy; pass ``rng`` for a reproducible deal."""
    out = list(cards)
    (rng or random).shuffle(out)
    return out


# ---------- Settings ----------
_DEFAULT_SETTINGS = {
    "game": "klondike",        # freecell | klondike | spider
    "spider_level": "medium",  # easy | medium | hard
    "log_level": "WARNING",
}

_ENV_OVERRIDES = {
    "game": "PATIENCE_GAME",
    "spider_level": "PATIENCE_SPIDER_LEVEL",
    "log_level": "PATIENCE_LOG_LEVEL",
}

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)


def _settings_dir() -> str:
    # Prefer %APPDATA% on Windows, else ~/.patience
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "Patience")
    return os.path.join(os.path.expanduser("~"), ".patience")


def settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")


def get_current_settings() -> dict:
    """Current settings with environment overrides applied."""
    out = dict(_CURRENT_SETTINGS)
    for key, var in _ENV_OVERRIDES.items():
        value = os.environ.get(var, "").strip()
        if value:
            out[key] = value
    return out


def load_settings(path: Optional[str] = None) -> dict:
    path = path or settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return get_current_settings()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return get_current_settings()
    if isinstance(data, dict):
        _CURRENT_SETTINGS.update({k: str(data[k]) for k in _DEFAULT_SETTINGS if k in data})
    else:
        logger.warning("Ignoring settings file %s: expected an object", path)
    return get_current_settings()


def save_settings(new_values: dict, path: Optional[str] = None):
    # Merge known keys and write to disk
    _CURRENT_SETTINGS.update({k: str(new_values[k]) for k in _DEFAULT_SETTINGS if k in new_values})
    path = path or settings_path()
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(_CURRENT_SETTINGS, f, indent=2)
    except OSError as exc:
        logger.warning("Could not save settings to %s: %s", path, exc)


def reset_settings():
    _CURRENT_SETTINGS.clear()
    _CURRENT_SETTINGS.update(_DEFAULT_SETTINGS)


# ---------- Logging ----------
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING"):
    """Configure the root logger once for the application."""
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger().setLevel(numeric_level)
