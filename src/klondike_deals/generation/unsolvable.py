"""Structural construction of deals the greedy solver cannot open.

Every Ace sits at the bottom of one of the four deepest columns with a King
directly on top of it. A King only moves into an empty column, and the
solver never moves a run off the bottom of a column, so no column can be
emptied and no Ace can surface. Nothing here runs the solver: the deal is
unsolvable by construction relative to that move ladder, not proven
unwinnable for an optimal player.
"""

from __future__ import annotations

import random
from typing import List

from klondike_deals.generation.layouts import Layout, of_ranks
from klondike_deals.model.deck import build_deck, shuffle_deck
from klondike_deals.model.schema import Rank, TABLEAU_COLUMNS
from klondike_deals.model.state import Card

BURIAL_COLUMNS = (3, 4, 5, 6)
STOCK_ADJACENT_SWAPS = 10


def unsolvable_layout(rng: random.Random) -> Layout:
    """Deal a layout with every Ace buried under a King."""
    deck = build_deck()
    aces = shuffle_deck(of_ranks(deck, (Rank.ACE,)), rng)
    kings = shuffle_deck(of_ranks(deck, (Rank.KING,)), rng)
    twos = shuffle_deck(of_ranks(deck, (Rank.TWO,)), rng)
    faces = shuffle_deck(of_ranks(deck, (Rank.QUEEN, Rank.JACK)), rng)
    others = shuffle_deck(
        [card for card in deck if card.rank not in (Rank.ACE, Rank.KING, Rank.TWO, Rank.QUEEN, Rank.JACK)],
        rng,
    )

    tableau: List[List[Card]] = [[] for _ in range(TABLEAU_COLUMNS)]
    filler = faces + others
    for col in range(TABLEAU_COLUMNS):
        for row in range(col + 1):
            if col in BURIAL_COLUMNS and row == 0:
                card = aces.pop()
            elif col in BURIAL_COLUMNS and row == 1:
                card = kings.pop()
            else:
                card = filler.pop(0)
            tableau[col].append(card.copy_with(face_up=row == col))

    # Twos at the head of the stock, drawn last
    stock = [card.copy_with(face_up=False) for card in twos + filler]

    # Only local swaps, so the Twos stay near the head
    for _ in range(STOCK_ADJACENT_SWAPS):
        i = rng.randint(0, len(stock) - 2)
        stock[i], stock[i + 1] = stock[i + 1], stock[i]

    return tableau, stock
