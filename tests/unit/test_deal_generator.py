"""Tests for the deal generation pipeline."""

import logging
from datetime import datetime, timezone

import pytest
from klondike_deals.generation import engine
from klondike_deals.generation.engine import MAX_ATTEMPTS_ENV, DealGenerator
from klondike_deals.generation.strategy import SOLVABLE, DealStrategy, LayoutBias, ScoreWeights
from klondike_deals.model.schema import GameMode, Rank
from klondike_deals.model.validation import validate_game_state
from klondike_deals.simulation.solver import (
    LOOSE_SOLVER,
    SolverConfig,
    SolverResult,
    StopReason,
    Verdict,
)

FIXED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

# A solver config the fake below always fails
DOOMED = SolverConfig(max_iterations=7)


class FakeSolver:
    """Stands in for HeuristicSolver: clears all or nothing by config."""

    calls = 0

    def __init__(self, config):
        self.config = config

    def solve_layout(self, tableau, stock):
        FakeSolver.calls += 1
        cleared = 0 if self.config == DOOMED else 52
        reason = StopReason.NO_MOVES if cleared == 0 else StopReason.WON
        return SolverResult(cleared, 1, 0, (), reason)


@pytest.fixture
def fake_solver(monkeypatch):
    monkeypatch.setattr(engine, "HeuristicSolver", FakeSolver)
    monkeypatch.delenv(MAX_ATTEMPTS_ENV, raising=False)
    FakeSolver.calls = 0
    return FakeSolver


def make_strategy(name, attempts, solver=LOOSE_SOLVER, good_enough=None, fallback=None):
    return DealStrategy(
        name=name,
        bias=LayoutBias.UNIFORM,
        max_attempts=attempts,
        solver=solver,
        verdict=Verdict.LOOSE,
        weights=ScoreWeights(top_bonus=((Rank.ACE, 10), (Rank.TWO, 5))),
        good_enough_score=good_enough,
        fallback=fallback,
    )


class TestRun:
    """Generate-and-verify loop."""

    def test_early_exit_on_good_enough(self, fake_solver):
        strategy = make_strategy("eager", attempts=50, good_enough=0)
        outcome = DealGenerator(seed=1).run(strategy)

        assert outcome.attempts == 1
        assert outcome.verified
        assert not outcome.fallback_used
        assert fake_solver.calls == 1

    def test_keeps_best_candidate(self, fake_solver):
        strategy = make_strategy("picky", attempts=8)
        outcome = DealGenerator(seed=2).run(strategy)

        assert outcome.attempts == 8
        assert outcome.score == strategy.weights.score(outcome.state.tableau, outcome.state.stock)
        assert outcome.solver_result.foundation_count == 52

    def test_falls_back_to_next_strategy(self, fake_solver):
        backup = make_strategy("backup", attempts=5, good_enough=0)
        doomed = make_strategy("doomed", attempts=3, solver=DOOMED, fallback=backup)

        outcome = DealGenerator(seed=3).run(doomed)

        assert outcome.strategy_name == "backup"
        assert outcome.verified
        assert outcome.fallback_used
        assert outcome.attempts == 3 + 1

    def test_unverified_shuffle_when_chain_exhausted(self, fake_solver):
        doomed = make_strategy("doomed", attempts=3, solver=DOOMED)

        outcome = DealGenerator(seed=4).run(doomed, GameMode.SOLVABLE)

        assert not outcome.verified
        assert outcome.fallback_used
        assert outcome.score is None
        assert outcome.solver_result is None
        assert outcome.attempts == 3
        assert outcome.state.game_mode == GameMode.SOLVABLE
        validate_game_state(outcome.state)

    def test_fallback_is_logged(self, fake_solver, caplog):
        backup = make_strategy("backup", attempts=1, good_enough=0)
        doomed = make_strategy("doomed", attempts=2, solver=DOOMED, fallback=backup)

        with caplog.at_level(logging.WARNING, logger="klondike_deals.generation.engine"):
            DealGenerator(seed=5).run(doomed)

        assert "falling back to 'backup'" in caplog.text

    def test_real_solver_verifies_solvable_deal(self, monkeypatch):
        monkeypatch.delenv(MAX_ATTEMPTS_ENV, raising=False)
        outcome = DealGenerator(seed=6).deal(GameMode.SOLVABLE)

        validate_game_state(outcome.state)
        assert outcome.verified
        assert not outcome.fallback_used
        assert outcome.strategy_name == SOLVABLE.name
        assert outcome.solver_result.foundation_count >= 48

    def test_exhausted_budget_spends_every_attempt(self, monkeypatch):
        """An unverified deal only comes out after the whole chain is spent."""
        monkeypatch.delenv(MAX_ATTEMPTS_ENV, raising=False)
        never = make_strategy("never", attempts=3, solver=SolverConfig(max_iterations=1))
        outcome = DealGenerator(seed=6).run(never)

        assert not outcome.verified
        assert outcome.attempts == 3
        validate_game_state(outcome.state)


class TestAttemptBudget:
    """Attempt caps from arguments and the environment."""

    def test_env_var_caps_budget(self, fake_solver, monkeypatch):
        monkeypatch.setenv(MAX_ATTEMPTS_ENV, "2")
        generator = DealGenerator(seed=1)
        doomed = make_strategy("doomed", attempts=100, solver=DOOMED)

        assert generator.max_attempts == 2
        assert generator.run(doomed).attempts == 2

    @pytest.mark.parametrize("raw", ["lots", "2.5", "0", "-3"])
    def test_bad_env_var_is_ignored(self, monkeypatch, caplog, raw):
        monkeypatch.setenv(MAX_ATTEMPTS_ENV, raw)

        with caplog.at_level(logging.WARNING, logger="klondike_deals.generation.engine"):
            generator = DealGenerator(seed=1)

        assert generator.max_attempts is None
        assert MAX_ATTEMPTS_ENV in caplog.text
        validate_game_state(generator.generate_random_game())

    def test_argument_beats_env_var(self, monkeypatch):
        monkeypatch.setenv(MAX_ATTEMPTS_ENV, "2")
        assert DealGenerator(max_attempts=9).max_attempts == 9

    def test_uncapped_by_default(self, monkeypatch):
        monkeypatch.delenv(MAX_ATTEMPTS_ENV, raising=False)
        assert DealGenerator().max_attempts is None

    def test_cap_never_raises_budget(self, fake_solver):
        doomed = make_strategy("doomed", attempts=3, solver=DOOMED)
        assert DealGenerator(max_attempts=50).run(doomed).attempts == 3


class TestModes:
    """Mode dispatch and the first-game override."""

    @pytest.mark.parametrize("mode", list(GameMode))
    def test_first_game_overrides_mode(self, fake_solver, mode):
        outcome = DealGenerator(seed=7).deal(mode, first_game=True)

        assert outcome.strategy_name == "first_game"
        assert outcome.state.game_mode == GameMode.SOLVABLE
        assert [col[-1].rank for col in outcome.state.tableau[:4]] == [Rank.ACE] * 4

    def test_solvable_mode_uses_solvable_strategy(self, fake_solver):
        outcome = DealGenerator(seed=8).deal(GameMode.SOLVABLE)
        assert outcome.strategy_name == SOLVABLE.name

    def test_random_mode(self):
        outcome = DealGenerator(seed=9).deal(GameMode.RANDOM)
        state = outcome.state

        assert outcome.strategy_name == "random"
        assert not outcome.verified
        assert state.game_mode == GameMode.RANDOM
        assert state.moves == 0
        assert not state.is_won
        assert state.waste == ()
        assert state.foundation_count == 0

    def test_unsolvable_mode(self):
        state = DealGenerator(seed=10).generate(GameMode.UNSOLVABLE)

        assert state.game_mode == GameMode.UNSOLVABLE
        assert len(state.stock) == 24
        assert state.card_count == 52


class TestReproducibility:
    """Seeded generators repeat themselves."""

    def test_same_seed_same_deal(self):
        first = DealGenerator(seed=11, clock=lambda: FIXED_TIME).generate_random_game()
        second = DealGenerator(seed=11, clock=lambda: FIXED_TIME).generate_random_game()
        assert first == second

    def test_different_seeds_differ(self):
        first = DealGenerator(seed=12).generate_random_game()
        second = DealGenerator(seed=13).generate_random_game()
        assert first.tableau != second.tableau

    def test_clock_sets_start_time(self):
        state = DealGenerator(seed=14, clock=lambda: FIXED_TIME).generate_unsolvable_game()
        assert state.start_time == FIXED_TIME

    def test_module_level_unsolvable_is_seeded(self):
        first = engine.generate_unsolvable_game(seed=15)
        second = engine.generate_unsolvable_game(seed=15)
        assert first.tableau == second.tableau
        assert first.stock == second.stock
