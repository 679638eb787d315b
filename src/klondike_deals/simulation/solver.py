"""Bounded greedy Klondike simulator used as a solvability estimate.

The solver plays a deal the way a disciplined human would: one move per
evaluation round, picked from a fixed priority ladder. It never searches
or backtracks, so the number of cards it clears is a lower bound on what
an optimal player could do.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from klondike_deals.model.schema import DECK_SIZE, GameMode, Rank, Suit, SUIT_ORDER
from klondike_deals.model.state import Card, GameState, check_win_condition
from klondike_deals.model.validation import validate_game_state
from klondike_deals.simulation.rules import (
    SafetyPolicy,
    can_move_to_foundation,
    can_place_on_tableau,
    is_safe_foundation_move,
    movable_run,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverConfig:
    """Caps and policy for one simulation run."""

    max_iterations: int = 500
    max_recycles: int = 3
    safety_policy: SafetyPolicy = SafetyPolicy.MIN_OPPOSITE_PLUS_TWO
    idle_round_limit: int = 2
    quick_reject: bool = True  # Give up at once when no Ace is reachable


LOOSE_SOLVER = SolverConfig()
STRICT_SOLVER = SolverConfig(max_iterations=2000, max_recycles=4)


class Verdict(Enum):
    """Acceptance thresholds on the number of cards cleared."""

    LOOSE = 48
    STRICT = 52

    @property
    def threshold(self) -> int:
        return self.value


class MoveKind(Enum):
    """Ladder rung that produced a simulated move, in priority order."""

    SAFE_TABLEAU_TO_FOUNDATION = "safe_tableau_to_foundation"
    SAFE_WASTE_TO_FOUNDATION = "safe_waste_to_foundation"
    TABLEAU_TO_TABLEAU = "tableau_to_tableau"
    WASTE_TO_TABLEAU = "waste_to_tableau"
    FALLBACK_TO_FOUNDATION = "fallback_to_foundation"
    DRAW = "draw"
    RECYCLE = "recycle"


FOUNDATION_KINDS = frozenset({
    MoveKind.SAFE_TABLEAU_TO_FOUNDATION,
    MoveKind.SAFE_WASTE_TO_FOUNDATION,
    MoveKind.FALLBACK_TO_FOUNDATION,
})


class StopReason(Enum):
    """Why a simulation ended."""

    WON = "won"
    NO_MOVES = "no_moves"
    RECYCLE_CAP = "recycle_cap"
    ITERATION_CAP = "iteration_cap"
    NO_ACE = "no_ace"


@dataclass(frozen=True)
class SolverMove:
    """A single simulated move.

    ``source_column`` is None when the card comes from the waste;
    ``target_column`` is None for foundation, draw and recycle moves.
    """

    kind: MoveKind
    card_id: Optional[str] = None
    source_column: Optional[int] = None
    target_column: Optional[int] = None
    run_start: Optional[int] = None

    @property
    def is_foundation_move(self) -> bool:
        return self.kind in FOUNDATION_KINDS


@dataclass(frozen=True)
class SolverResult:
    """Outcome of a bounded simulation."""

    foundation_count: int
    iterations: int
    recycles: int
    moves: tuple[SolverMove, ...]
    stop_reason: StopReason

    def is_solvable(self, verdict: Verdict = Verdict.LOOSE) -> bool:
        return self.foundation_count >= verdict.threshold

    @property
    def cleared_ratio(self) -> float:
        return self.foundation_count / DECK_SIZE


class SimulationBoard:
    """Mutable working copy of a state.

    Cards are immutable, so copying the pile lists is a full snapshot: the
    state a board was built from is never touched by the simulation.
    """

    def __init__(
        self,
        tableau: Sequence[Sequence[Card]],
        foundations: Dict[Suit, Sequence[Card]],
        stock: Sequence[Card],
        waste: Sequence[Card],
    ) -> None:
        self.tableau: List[List[Card]] = [list(column) for column in tableau]
        self.foundations: Dict[Suit, List[Card]] = {
            suit: list(foundations.get(suit, ())) for suit in SUIT_ORDER
        }
        self.stock: List[Card] = list(stock)
        self.waste: List[Card] = list(waste)
        self.recycles = 0

    @classmethod
    def from_state(cls, state: GameState) -> "SimulationBoard":
        return cls(state.tableau, state.foundations_by_suit(), state.stock, state.waste)

    @property
    def foundation_count(self) -> int:
        return sum(len(pile) for pile in self.foundations.values())

    def reveal_top(self, col: int) -> None:
        """Turn the top card of a column face-up."""
        column = self.tableau[col]
        if column and not column[-1].face_up:
            column[-1] = column[-1].copy_with(face_up=True)

    def has_reachable_ace(self) -> bool:
        """Cheap precheck: some Ace is on a foundation, a column top, or in stock/waste."""
        if any(self.foundations.values()):
            return True
        if any(column and column[-1].rank == Rank.ACE for column in self.tableau):
            return True
        return any(card.rank == Rank.ACE for card in self.stock + self.waste)

    def to_state(self, game_mode: GameMode = GameMode.RANDOM) -> GameState:
        """Freeze the board back into a GameState."""
        state = GameState(
            tableau=tuple(tuple(column) for column in self.tableau),
            foundations=tuple(tuple(self.foundations[suit]) for suit in SUIT_ORDER),
            stock=tuple(self.stock),
            waste=tuple(self.waste),
            game_mode=game_mode,
        )
        return state.copy_with(is_won=check_win_condition(state))


class HeuristicSolver:
    """Greedy priority-ladder player.

    Ladder (first applicable move wins each round):
    1. safe tableau top to foundation
    2. safe waste top to foundation
    3. tableau run to another column, only when it uncovers a face-down card
    4. waste top to tableau
    5. any tableau/waste top to foundation, ignoring safety
    6. draw from stock, or turn the waste over when the stock is empty
    """

    def __init__(self, config: SolverConfig = LOOSE_SOLVER) -> None:
        self.config = config

    def solve(self, state: GameState) -> SolverResult:
        """Simulate a validated state. The state itself is never modified."""
        validate_game_state(state)
        return self.run(SimulationBoard.from_state(state))

    def solve_layout(
        self,
        tableau: Sequence[Sequence[Card]],
        stock: Sequence[Card],
    ) -> SolverResult:
        """Simulate a freshly dealt layout (empty foundations and waste)."""
        state = GameState(
            tableau=tuple(tuple(column) for column in tableau),
            foundations=tuple(() for _ in SUIT_ORDER),
            stock=tuple(stock),
            waste=(),
        )
        return self.solve(state)

    def run(self, board: SimulationBoard) -> SolverResult:
        """Play ``board`` in place until a stop condition is met."""
        config = self.config
        moves: List[SolverMove] = []
        iterations = 0
        idle_rounds = 0

        if config.quick_reject and not board.has_reachable_ace():
            return self._finish(board, iterations, moves, StopReason.NO_ACE)

        stop_reason = StopReason.ITERATION_CAP
        while iterations < config.max_iterations:
            if board.foundation_count == DECK_SIZE:
                stop_reason = StopReason.WON
                break

            iterations += 1
            move = self.choose_move(board)

            if move is None:
                idle_rounds += 1
                if idle_rounds >= config.idle_round_limit:
                    stop_reason = StopReason.NO_MOVES
                    break
                continue
            idle_rounds = 0

            if move.kind == MoveKind.RECYCLE and board.recycles >= config.max_recycles:
                stop_reason = StopReason.RECYCLE_CAP
                break

            self.apply_move(board, move)
            moves.append(move)
        else:
            if board.foundation_count == DECK_SIZE:
                stop_reason = StopReason.WON

        return self._finish(board, iterations, moves, stop_reason)

    def _finish(
        self,
        board: SimulationBoard,
        iterations: int,
        moves: List[SolverMove],
        stop_reason: StopReason,
    ) -> SolverResult:
        result = SolverResult(
            foundation_count=board.foundation_count,
            iterations=iterations,
            recycles=board.recycles,
            moves=tuple(moves),
            stop_reason=stop_reason,
        )
        logger.debug(
            f"Solver stopped ({stop_reason.value}) after {iterations} rounds: "
            f"{result.foundation_count}/{DECK_SIZE} cleared, {board.recycles} recycles"
        )
        return result

    # ------------------------------------------------------------------
    # Move selection
    # ------------------------------------------------------------------

    def choose_move(self, board: SimulationBoard) -> Optional[SolverMove]:
        """First applicable rung of the ladder, without applying it."""
        return (
            self._safe_tableau_to_foundation(board)
            or self._safe_waste_to_foundation(board)
            or self._uncovering_tableau_move(board)
            or self._waste_to_tableau(board)
            or self._fallback_to_foundation(board)
            or self._stock_move(board)
        )

    def _is_safe(self, card: Card, board: SimulationBoard) -> bool:
        return is_safe_foundation_move(card, board.foundations, self.config.safety_policy)

    def _tableau_foundation_candidate(
        self, board: SimulationBoard, require_safe: bool
    ) -> Optional[int]:
        for col, column in enumerate(board.tableau):
            if not column or not column[-1].face_up:
                continue
            card = column[-1]
            if not can_move_to_foundation(card, board.foundations):
                continue
            if require_safe and not self._is_safe(card, board):
                continue
            return col
        return None

    def _waste_foundation_candidate(self, board: SimulationBoard, require_safe: bool) -> bool:
        if not board.waste:
            return False
        card = board.waste[-1]
        if not can_move_to_foundation(card, board.foundations):
            return False
        return not require_safe or self._is_safe(card, board)

    def _safe_tableau_to_foundation(self, board: SimulationBoard) -> Optional[SolverMove]:
        col = self._tableau_foundation_candidate(board, require_safe=True)
        if col is None:
            return None
        return SolverMove(
            MoveKind.SAFE_TABLEAU_TO_FOUNDATION,
            card_id=board.tableau[col][-1].id,
            source_column=col,
        )

    def _safe_waste_to_foundation(self, board: SimulationBoard) -> Optional[SolverMove]:
        if not self._waste_foundation_candidate(board, require_safe=True):
            return None
        return SolverMove(MoveKind.SAFE_WASTE_TO_FOUNDATION, card_id=board.waste[-1].id)

    def _uncovering_tableau_move(self, board: SimulationBoard) -> Optional[SolverMove]:
        for src, column in enumerate(board.tableau):
            start = movable_run(column)
            # A run that already sits at the bottom uncovers nothing
            if start is None or start == 0:
                continue
            moving = column[start]
            uncovers = not column[start - 1].face_up
            if not uncovers and moving.rank != Rank.KING:
                continue

            for dst, target in enumerate(board.tableau):
                if dst == src:
                    continue
                dest_top = target[-1] if target else None
                if dest_top is not None and not dest_top.face_up:
                    continue
                if not uncovers and dest_top is not None:
                    continue
                if can_place_on_tableau(dest_top, moving):
                    return SolverMove(
                        MoveKind.TABLEAU_TO_TABLEAU,
                        card_id=moving.id,
                        source_column=src,
                        target_column=dst,
                        run_start=start,
                    )
        return None

    def _waste_to_tableau(self, board: SimulationBoard) -> Optional[SolverMove]:
        if not board.waste:
            return None
        card = board.waste[-1]
        for dst, target in enumerate(board.tableau):
            dest_top = target[-1] if target else None
            if dest_top is not None and not dest_top.face_up:
                continue
            if can_place_on_tableau(dest_top, card):
                return SolverMove(MoveKind.WASTE_TO_TABLEAU, card_id=card.id, target_column=dst)
        return None

    def _fallback_to_foundation(self, board: SimulationBoard) -> Optional[SolverMove]:
        col = self._tableau_foundation_candidate(board, require_safe=False)
        if col is not None:
            return SolverMove(
                MoveKind.FALLBACK_TO_FOUNDATION,
                card_id=board.tableau[col][-1].id,
                source_column=col,
            )
        if self._waste_foundation_candidate(board, require_safe=False):
            return SolverMove(MoveKind.FALLBACK_TO_FOUNDATION, card_id=board.waste[-1].id)
        return None

    def _stock_move(self, board: SimulationBoard) -> Optional[SolverMove]:
        if board.stock:
            return SolverMove(MoveKind.DRAW, card_id=board.stock[-1].id)
        if board.waste:
            return SolverMove(MoveKind.RECYCLE)
        return None

    # ------------------------------------------------------------------
    # Move application
    # ------------------------------------------------------------------

    def apply_move(self, board: SimulationBoard, move: SolverMove) -> None:
        """Apply a move produced by ``choose_move`` to the board."""
        kind = move.kind

        if kind in FOUNDATION_KINDS:
            if move.source_column is None:
                card = board.waste.pop()
            else:
                card = board.tableau[move.source_column].pop()
                board.reveal_top(move.source_column)
            board.foundations[card.suit].append(card)

        elif kind == MoveKind.TABLEAU_TO_TABLEAU:
            assert move.source_column is not None and move.target_column is not None
            assert move.run_start is not None
            source = board.tableau[move.source_column]
            run = source[move.run_start:]
            del source[move.run_start:]
            board.tableau[move.target_column].extend(run)
            board.reveal_top(move.source_column)

        elif kind == MoveKind.WASTE_TO_TABLEAU:
            assert move.target_column is not None
            board.tableau[move.target_column].append(board.waste.pop())

        elif kind == MoveKind.DRAW:
            board.waste.append(board.stock.pop().copy_with(face_up=True))

        elif kind == MoveKind.RECYCLE:
            # Oldest waste card becomes the next draw
            board.stock = [card.copy_with(face_up=False) for card in reversed(board.waste)]
            board.waste = []
            board.recycles += 1


def count_cleared(
    tableau: Sequence[Sequence[Card]],
    stock: Sequence[Card],
    config: SolverConfig = LOOSE_SOLVER,
) -> int:
    """Number of cards the solver gets onto the foundations."""
    return HeuristicSolver(config).solve_layout(tableau, stock).foundation_count


def is_solvable(
    tableau: Sequence[Sequence[Card]],
    stock: Sequence[Card],
    verdict: Verdict = Verdict.LOOSE,
    config: Optional[SolverConfig] = None,
) -> bool:
    """Loose (>=48) or strict (52) solvability verdict for a fresh layout."""
    if config is None:
        config = STRICT_SOLVER if verdict == Verdict.STRICT else LOOSE_SOLVER
    return HeuristicSolver(config).solve_layout(tableau, stock).is_solvable(verdict)
