# ui.py - pygame view of a tableau: drawing, hit-testing and drag/drop
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import pygame

from patience import common as C
from patience.piles import CardSequence, Pile
from patience.tableau import Tableau

logger = logging.getLogger(__name__)

# ---------- Configuration ----------
SCREEN_W, SCREEN_H = 1280, 800
TABLE_BG = (2, 100, 40)

CARD_W, CARD_H = 100, 140
CARD_RADIUS = 10
CARD_GAP_X = 18
CARD_GAP_Y = 26
CASCADE_DY = 24
MARGIN = 12
STATUS_BAR_H = 36

DOUBLE_CLICK_MS = 400
DRAG_THRESHOLD_PX = 4

# Colors
BLACK = (20, 20, 20)
WHITE = (245, 245, 245)
RED = (200, 20, 20)
BLUE = (34, 96, 200)
LIGHT = (220, 220, 220)
SLOT = (255, 255, 255)

# Fonts are initialized via setup_fonts() AFTER pygame.init()
FONT_UI = None
FONT_CORNER_RANK = None


def setup_fonts():
    global FONT_UI, FONT_CORNER_RANK
    name = pygame.font.get_default_font()
    FONT_UI = pygame.font.SysFont(name, 24, bold=True)
    FONT_CORNER_RANK = pygame.font.SysFont(name, 28, bold=True)


# ---------- Card surfaces ----------
_card_face_cache: Dict[C.Card, pygame.Surface] = {}
_card_back_cache: Optional[pygame.Surface] = None


def invalidate_card_caches():
    global _card_back_cache
    _card_face_cache.clear()
    _card_back_cache = None


def draw_suit_shape(surface, center, suit: C.Suit, color, size=42):
    x, y = center
    if suit is C.Suit.DIAMOND:
        half = size // 2
        points = [(x, y - half), (x + half, y), (x, y + half), (x - half, y)]
        pygame.draw.polygon(surface, color, points)
    elif suit is C.Suit.HEART:
        r = size // 3
        pygame.draw.circle(surface, color, (x - r, y - r), r)
        pygame.draw.circle(surface, color, (x + r, y - r), r)
        tri = [(x - 2 * r, y - r), (x + 2 * r, y - r), (x, y + 2 * r)]
        pygame.draw.polygon(surface, color, tri)
    elif suit is C.Suit.SPADE:
        r = size // 3
        pygame.draw.circle(surface, color, (x - r, y), r)
        pygame.draw.circle(surface, color, (x + r, y), r)
        tri = [(x - 2 * r, y), (x + 2 * r, y), (x, y - 2 * r)]
        pygame.draw.polygon(surface, color, tri)
        stem_w = max(6, size // 6)
        pygame.draw.rect(surface, color, (x - stem_w // 2, y + r, stem_w, size // 2))
    else:  # club
        r = size // 3
        pygame.draw.circle(surface, color, (x, y - r), r)
        pygame.draw.circle(surface, color, (x - r, y + r // 3), r)
        pygame.draw.circle(surface, color, (x + r, y + r // 3), r)
        stem_w = max(6, size // 6)
        pygame.draw.rect(surface, color, (x - stem_w // 2, y + r, stem_w, size // 2))


def get_card_surface(card: C.Card) -> pygame.Surface:
    cached = _card_face_cache.get(card)
    if cached is not None:
        return cached
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0, 0, CARD_W, CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0, 0, CARD_W, CARD_H), width=3, border_radius=CARD_RADIUS)
    color = RED if card.color is C.Color.RED else BLACK
    margin = 10
    rtxt = FONT_CORNER_RANK.render(card.rank.short_name, True, color)
    surf.blit(rtxt, (margin, margin))
    draw_suit_shape(surf, (margin + 10, margin + rtxt.get_height() + 14), card.suit, color, size=18)
    r180 = pygame.transform.rotate(rtxt, 180)
    surf.blit(r180, (CARD_W - margin - r180.get_width(), CARD_H - margin - r180.get_height()))
    draw_suit_shape(surf, (CARD_W // 2, CARD_H // 2), card.suit, color, size=56)
    _card_face_cache[card] = surf
    return surf


def get_back_surface() -> pygame.Surface:
    global _card_back_cache
    if _card_back_cache is not None:
        return _card_back_cache
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0, 0, CARD_W, CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0, 0, CARD_W, CARD_H), width=3, border_radius=CARD_RADIUS)
    inset = 8
    inner_rect = pygame.Rect(inset, inset, CARD_W - 2 * inset, CARD_H - 2 * inset)
    pygame.draw.rect(surf, BLUE, inner_rect, border_radius=8)
    for i in range(-CARD_H, CARD_W, 12):
        pygame.draw.line(surf, LIGHT, (i, 8), (i + CARD_H, CARD_H - 8), 1)
    _card_back_cache = surf
    return surf


# ---------- Tableau view ----------
@dataclass
class Drag:
    pile: Pile
    sequence: CardSequence
    grab_offset: Tuple[int, int]
    press_pos: Tuple[int, int]
    moved: bool = False


class TableauView:
    """
    Draws a Tableau and turns mouse input into pile.sequence / pile.drop /
    tableau.pile_clicked calls. Only the public Tableau and Pile API is used.
    """

    def __init__(self, tableau: Tableau):
        self.tableau = tableau
        self.drag: Optional[Drag] = None
        self.mouse_pos: Tuple[int, int] = (0, 0)
        self._press: Optional[Tuple[Pile, Tuple[int, int]]] = None
        self._last_click: Optional[Tuple[Pile, int]] = None  # (pile, ticks)

    # ----- Geometry -----
    def _horizontal_gap(self) -> float:
        cols = self.tableau.column_count
        if cols <= 1:
            return CARD_GAP_X
        content_w = SCREEN_W - 2 * MARGIN - cols * CARD_W
        return max(CARD_GAP_X, content_w / (cols - 1))

    def grid_origin(self, column: int, row: int) -> Tuple[int, int]:
        above = sum(self.tableau.row_heights[:row])
        x = MARGIN + (CARD_W + self._horizontal_gap()) * column
        y = MARGIN + CARD_H * above + CARD_GAP_Y * row
        return int(x), int(y)

    def pile_rect(self, pile: Pile, origin: Tuple[int, int]) -> pygame.Rect:
        height = CARD_H
        if pile.show_as_cascade:
            height += max(0, pile.size - 1) * CASCADE_DY
        return pygame.Rect(origin[0], origin[1], CARD_W, height)

    def card_rect(self, origin: Tuple[int, int], slot: int) -> pygame.Rect:
        # slot 0 is the deepest card of a fanned pile
        return pygame.Rect(origin[0], origin[1] + slot * CASCADE_DY, CARD_W, CARD_H)

    def pile_at(self, pos) -> Optional[Pile]:
        for x, y, pile in self.tableau.all_piles:
            if self.pile_rect(pile, self.grid_origin(x, y)).collidepoint(pos):
                return pile
        return None

    def card_count_at(self, pos) -> Optional[Tuple[Pile, int]]:
        """Return (pile, number of cards from its top down to the card under pos)."""
        for x, y, pile in self.tableau.all_piles:
            origin = self.grid_origin(x, y)
            if not self.pile_rect(pile, origin).collidepoint(pos):
                continue
            if pile.is_empty or not pile.show_as_cascade:
                return pile, 1
            for slot in reversed(range(pile.size)):
                if self.card_rect(origin, slot).collidepoint(pos):
                    return pile, pile.size - slot
        return None

    # ----- Events -----
    def handle_event(self, e):
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            self._on_press(e.pos)
        elif e.type == pygame.MOUSEMOTION:
            self.mouse_pos = e.pos
            if self.drag is not None:
                px, py = self.drag.press_pos
                if abs(e.pos[0] - px) > DRAG_THRESHOLD_PX or abs(e.pos[1] - py) > DRAG_THRESHOLD_PX:
                    self.drag.moved = True
        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            self._on_release(e.pos)

    def _on_press(self, pos):
        self.mouse_pos = pos
        self.drag = None
        hit = self.card_count_at(pos)
        if hit is None:
            self._press = None
            return
        pile, count = hit
        self._press = (pile, pos)
        seq = pile.sequence(count)
        if seq is not None:
            r = self._top_of_sequence_rect(pile, len(seq))
            self.drag = Drag(pile, seq, (pos[0] - r.x, pos[1] - r.y), pos)

    def _on_release(self, pos):
        drag, press = self.drag, self._press
        self.drag = None
        self._press = None
        if drag is not None and drag.moved:
            target = self.pile_at(pos)
            if target is not None and target is not drag.pile and not target.drop(drag.sequence):
                logger.debug("Rejected drop of %r", drag.sequence)
            return
        if press is None:
            return
        pile = press[0]
        if self.pile_at(pos) is not pile:
            return
        now = pygame.time.get_ticks()
        clicks = 1
        if self._last_click is not None:
            last_pile, last_ticks = self._last_click
            if last_pile is pile and now - last_ticks <= DOUBLE_CLICK_MS:
                clicks = 2
        self._last_click = None if clicks == 2 else (pile, now)
        self.tableau.pile_clicked(pile, clicks)

    def _top_of_sequence_rect(self, pile: Pile, count: int) -> pygame.Rect:
        for x, y, p in self.tableau.all_piles:
            if p is pile:
                origin = self.grid_origin(x, y)
                if not pile.show_as_cascade:
                    return pygame.Rect(origin[0], origin[1], CARD_W, CARD_H)
                return self.card_rect(origin, pile.size - count)
        return pygame.Rect(0, 0, CARD_W, CARD_H)

    # ----- Drawing -----
    def _dragged_from(self, pile: Pile) -> int:
        if self.drag is not None and self.drag.moved and self.drag.pile is pile:
            return len(self.drag.sequence)
        return 0

    def draw(self, screen):
        for x, y, pile in self.tableau.all_piles:
            self._draw_pile(screen, pile, self.grid_origin(x, y))
        if self.drag is not None and self.drag.moved:
            mx, my = self.mouse_pos
            gx, gy = self.drag.grab_offset
            # sequence cards are top-first; draw the deepest first
            for i, card in enumerate(reversed(self.drag.sequence.cards)):
                screen.blit(get_card_surface(card), (mx - gx, my - gy + i * CASCADE_DY))

    def _draw_pile(self, screen, pile: Pile, origin: Tuple[int, int]):
        dragged = self._dragged_from(pile)
        remaining = pile.size - dragged
        if remaining <= 0:
            pygame.draw.rect(screen, SLOT, (origin[0], origin[1], CARD_W, CARD_H), width=2, border_radius=CARD_RADIUS)
            return
        cards = pile.cards
        visible = pile.visible_count
        if pile.show_as_cascade:
            for slot in range(remaining):
                k = pile.size - 1 - slot
                surf = get_card_surface(cards[k]) if k < visible else get_back_surface()
                screen.blit(surf, self.card_rect(origin, slot).topleft)
        elif visible - dragged > 0:
            screen.blit(get_card_surface(cards[dragged]), origin)
        else:
            screen.blit(get_back_surface(), origin)


def draw_status_bar(screen, text: str):
    bar = pygame.Rect(0, SCREEN_H - STATUS_BAR_H, SCREEN_W, STATUS_BAR_H)
    pygame.draw.rect(screen, (0, 60, 24), bar)
    t = FONT_UI.render(text, True, WHITE)
    screen.blit(t, (MARGIN, bar.centery - t.get_height() // 2))
