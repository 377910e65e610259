"""Patience: Klondike, FreeCell and Spider solitaire."""

__version__ = "0.1.0"
