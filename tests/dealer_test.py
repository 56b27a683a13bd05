import itertools

import pytest

from klondike_gym.board import board_from_columns
from klondike_gym.cards import Suit
from klondike_gym.constants import Difficulty
from klondike_gym.dealer import (
    DealCandidate,
    collect_candidates,
    generate_deal,
    pick_by_difficulty,
    scores_by_tier,
)
from klondike_gym.moves import Move
from klondike_gym.replay import replay
from klondike_gym.rng import DeterministicRNG
from klondike_gym.scoring import DifficultyWeights, ease_score, solution_stats
from klondike_gym.solver import solve

from helpers import make_endgame, make_stacked_deal, up


def _pool(scores):
    return [DealCandidate(deal=None, moves=[], score=s) for s in scores]


def test_endgame_score(endgame):
    moves = solve(endgame).moves
    stats = solution_stats(endgame, moves)
    assert (stats.total_moves, stats.early_foundation, stats.flips, stats.recycles) == (20, 12, 7, 0)
    assert ease_score(endgame, moves) == 300 - 20 + 6 * 12 + 2 * 7


def test_score_counts_aces_and_recycles():
    board = board_from_columns([[up(1, Suit.SPADES)], [up(1, Suit.HEARTS)], [up(5, Suit.CLUBS)]])
    moves = [Move.draw(1), Move.recycle(), Move.recycle()]
    assert ease_score(board, moves) == 300 - 3 + 8 * 2 - 12 * 2


def test_early_window_only_counts_first_moves():
    board = board_from_columns([])
    moves = [Move.draw(1)] * 30 + [Move.waste_to_found(Suit.CLUBS)] * 5
    assert solution_stats(board, moves).early_foundation == 0
    assert ease_score(board, moves) == 300 - 35


def test_custom_weights():
    board = board_from_columns([])
    weights = DifficultyWeights(baseline=0, per_move=2)
    assert ease_score(board, [Move.flip(0)], weights) == -2 + 2


def test_pick_by_difficulty_indices():
    pool = _pool([50, 10, 40, 20, 30, 60, 70, 80, 90, 100, 0])
    assert pick_by_difficulty(pool, "easy").score == 100
    assert pick_by_difficulty(pool, "medium").score == 80    # floor(0.8 * 10)
    assert pick_by_difficulty(pool, "hard").score == 30      # floor(0.3 * 10)
    assert pick_by_difficulty(pool, "extreme").score == 0


def test_pick_single_and_empty():
    assert pick_by_difficulty([], Difficulty.HARD) is None
    only = _pool([7])
    for difficulty in Difficulty:
        assert pick_by_difficulty(only, difficulty).score == 7


@pytest.mark.parametrize("scores", [[3, 1, 2], [5, 5, 9, 1], list(range(40, 0, -3))])
def test_difficulty_monotonic(scores):
    picks = scores_by_tier(_pool(scores))
    assert (
        picks[Difficulty.EXTREME]
        <= picks[Difficulty.HARD]
        <= picks[Difficulty.MEDIUM]
        <= picks[Difficulty.EASY]
    )


def test_unknown_difficulty():
    with pytest.raises(ValueError):
        pick_by_difficulty(_pool([1]), "nightmare")
    with pytest.raises(ValueError):
        generate_deal(1, "nightmare")


# ease scores of the stacked deals: 15, 14 and 13 foundation moves land
# in the opening window of an otherwise identical 97-move line
STACKED = [((), 335), ([(14, 18)], 329), ([(8, 16), (13, 17)], 323)]


@pytest.fixture
def stacked(monkeypatch):
    """Make the dealer hand out the stacked deals in turn."""
    import klondike_gym.dealer as dealer

    boards = itertools.cycle([make_stacked_deal(1, swaps) for swaps, _ in STACKED])
    monkeypatch.setattr(dealer, "deal", lambda draw_mode, rng: next(boards).copy())


@pytest.mark.parametrize("swaps, score", STACKED)
def test_stacked_deal_scores(swaps, score):
    board = make_stacked_deal(1, swaps)
    moves = solve(board).moves
    stats = solution_stats(board, moves)
    assert (stats.total_moves, stats.flips, stats.recycles) == (97, 21, 0)
    assert ease_score(board, moves) == score


def test_collect_candidates_are_solvable_and_scored(stacked):
    candidates = collect_candidates(1, tries=3, rng=DeterministicRNG(1))
    assert sorted(c.score for c in candidates) == [323, 329, 335]
    for cand in candidates:
        assert cand.score == ease_score(cand.deal, cand.moves)
        assert replay(cand.deal.copy(), cand.moves)


def test_generate_deal_shape_and_solution(stacked):
    result = generate_deal(1, "easy", rng=DeterministicRNG(2024), tries=3, fallback_tries=0)
    assert result is not None and not result.fallback
    assert result.difficulty is Difficulty.EASY
    assert result.score == 335
    board = result.deal
    assert [len(col) for col in board.tableau] == [1, 2, 3, 4, 5, 6, 7]
    assert len(board.stock) == 24
    assert board.waste == []
    assert all(pile == [] for pile in board.found.values())
    assert replay(board.copy(), result.solution_moves)


def test_generate_deal_tiers(stacked):
    scores = {
        difficulty: generate_deal(1, difficulty, rng=DeterministicRNG(9), tries=3).score
        for difficulty in Difficulty
    }
    assert scores == {
        Difficulty.EASY: 335,
        Difficulty.MEDIUM: 329,
        Difficulty.HARD: 323,
        Difficulty.EXTREME: 323,
    }


def test_generate_deal_reproducible(stacked):
    first = generate_deal(1, "hard", rng=DeterministicRNG(77), tries=3)
    second = generate_deal(1, "hard", rng=DeterministicRNG(77), tries=3)
    assert first is not None
    assert first == second
    assert first.seed is not None


def test_generate_deal_returns_none_when_nothing_solves():
    assert generate_deal(1, "easy", rng=DeterministicRNG(5), tries=2, fallback_tries=2, max_iterations=1) is None


def test_fallback_path(monkeypatch):
    import klondike_gym.dealer as dealer

    endgame = make_endgame()
    monkeypatch.setattr(dealer, "deal", lambda draw_mode, rng: endgame.copy())
    result = generate_deal(1, "extreme", rng=DeterministicRNG(0), tries=0, fallback_tries=3)
    assert result.fallback
    assert result.deal == endgame
    assert len(result.solution_moves) == 20
