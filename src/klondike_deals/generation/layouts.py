"""Biased layout builders.

Each builder takes a fresh deck and an injected RNG and returns a dealt
``(tableau, stock)`` pair in the classic triangular shape. Builders never
decide whether a layout is good; that is the solver's job.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Sequence, Tuple

from klondike_deals.generation.strategy import LayoutBias
from klondike_deals.model.deck import build_deck, deal_layout, shuffle_deck
from klondike_deals.model.schema import Rank, TABLEAU_COLUMNS, rank_value
from klondike_deals.model.state import Card

Layout = Tuple[List[List[Card]], List[Card]]
LayoutBuilder = Callable[[Sequence[Card], random.Random], Layout]

# Stratified tiers, most urgent first
LOW_TIER = (Rank.FOUR, Rank.FIVE, Rank.SIX)
MID_TIER = (Rank.SEVEN, Rank.EIGHT, Rank.NINE, Rank.TEN)
HIGH_TIER = (Rank.JACK, Rank.QUEEN, Rank.KING)

STOCK_SWAP_CHANCE = 0.3
STOCK_SWAP_REACH = 4
TWO_ON_TOP_CHANCE = 0.7
STOCK_TWO_SPACING = 4


def of_ranks(cards: Sequence[Card], ranks: Sequence[Rank]) -> List[Card]:
    return [card for card in cards if card.rank in ranks]


def _deal_with_tops(tops: Sequence[Card], rest: Sequence[Card]) -> Layout:
    """Deal face-down cards from ``rest`` with ``tops`` as column tops.

    Columns without a chosen top take their top from ``rest`` as well.
    Whatever is left of ``rest`` becomes the stock.
    """
    tableau: List[List[Card]] = [[] for _ in range(TABLEAU_COLUMNS)]
    index = 0
    for col in range(TABLEAU_COLUMNS):
        for _ in range(col):
            tableau[col].append(rest[index].copy_with(face_up=False))
            index += 1
        if col < len(tops):
            top = tops[col]
        else:
            top = rest[index]
            index += 1
        tableau[col].append(top.copy_with(face_up=True))
    stock = [card.copy_with(face_up=False) for card in rest[index:]]
    return tableau, stock


def uniform_layout(deck: Sequence[Card], rng: random.Random) -> Layout:
    """Plain shuffle and deal."""
    return deal_layout(shuffle_deck(deck, rng))


def stratified_layout(deck: Sequence[Card], rng: random.Random) -> Layout:
    """Route low cards to column tops and the drawable end of the stock."""
    aces = shuffle_deck(of_ranks(deck, (Rank.ACE,)), rng)
    twos = shuffle_deck(of_ranks(deck, (Rank.TWO,)), rng)
    threes = shuffle_deck(of_ranks(deck, (Rank.THREE,)), rng)
    low = shuffle_deck(of_ranks(deck, LOW_TIER), rng)
    mid = shuffle_deck(of_ranks(deck, MID_TIER), rng)
    high = shuffle_deck(of_ranks(deck, HIGH_TIER), rng)

    top_pool = aces[:2] + twos[:2] + threes[:1]
    top_pool += low[: TABLEAU_COLUMNS - len(top_pool)]
    chosen = {card.id for card in top_pool}
    tops = shuffle_deck(top_pool, rng)

    rest = shuffle_deck(
        [card for card in aces + twos + threes + low + mid + high if card.id not in chosen],
        rng,
    )
    tableau, stock = _deal_with_tops(tops, rest)

    # High ranks at the head, low ranks at the tail where draws happen
    stock.sort(key=lambda card: rank_value(card.rank), reverse=True)
    for i in range(len(stock)):
        if rng.random() < STOCK_SWAP_CHANCE:
            j = min(len(stock) - 1, i + rng.randint(0, STOCK_SWAP_REACH))
            stock[i], stock[j] = stock[j], stock[i]
    return tableau, stock


def aces_on_top_layout(deck: Sequence[Card], rng: random.Random) -> Layout:
    """Seat all four Aces on columns 0-3 and push Twos toward reach."""
    aces = shuffle_deck(of_ranks(deck, (Rank.ACE,)), rng)
    twos = shuffle_deck(of_ranks(deck, (Rank.TWO,)), rng)
    others = shuffle_deck(
        [card for card in deck if card.rank not in (Rank.ACE, Rank.TWO)], rng
    )

    tops: List[Card] = list(aces)
    for _ in range(len(aces), TABLEAU_COLUMNS):
        if twos and rng.random() < TWO_ON_TOP_CHANCE:
            tops.append(twos.pop())
        else:
            tops.append(others.pop())

    hidden_count = sum(range(TABLEAU_COLUMNS))
    hidden, leftover = others[:hidden_count], others[hidden_count:]
    tableau, _ = _deal_with_tops(tops, hidden)

    # Spread the remaining Twos through the first draws
    draw_order: List[Card] = []
    while twos or leftover:
        if twos and (len(draw_order) % STOCK_TWO_SPACING == 0 or not leftover):
            draw_order.append(twos.pop())
        else:
            draw_order.append(leftover.pop())
    stock = [card.copy_with(face_up=False) for card in reversed(draw_order)]
    return tableau, stock


LAYOUT_BUILDERS: Dict[LayoutBias, LayoutBuilder] = {
    LayoutBias.UNIFORM: uniform_layout,
    LayoutBias.STRATIFIED: stratified_layout,
    LayoutBias.ACES_ON_TOP: aces_on_top_layout,
}


def build_layout(bias: LayoutBias, rng: random.Random) -> Layout:
    """Build a fresh deck and deal it with the given bias."""
    return LAYOUT_BUILDERS[bias](build_deck(), rng)
