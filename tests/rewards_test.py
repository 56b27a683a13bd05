import pytest

import klondike_gym.rewards as rewards
from klondike_gym.cards import Suit
from klondike_gym.constants import MoveType
from klondike_gym.dealer import DealResult
from klondike_gym.moves import Move
from klondike_gym.rewards import (
    Reward,
    RoundOutcome,
    RoundState,
    SolitaireRound,
    calculate_rewards,
)
from klondike_gym.rng import DeterministicRNG
from klondike_gym.solver import solve

from helpers import make_endgame


class FakeLedger:
    def __init__(self, balance=100):
        self.balance = balance
        self.calls = []

    def spend(self, amount):
        if amount > self.balance:
            raise ValueError("insufficient funds")
        self.balance -= amount
        self.calls.append(("spend", amount))

    def credit(self, amount):
        self.balance += amount
        self.calls.append(("credit", amount))


class FakeProgression:
    def __init__(self):
        self.xp = []
        self.coins = 0

    def add_xp(self, amount, reason=""):
        self.xp.append((amount, reason))

    def add_coins(self, amount):
        self.coins += amount


@pytest.fixture
def endgame_deal(monkeypatch):
    board = make_endgame()
    result = DealResult(board, solve(board).moves)
    monkeypatch.setattr(rewards, "generate_deal", lambda *a, **kw: result)
    return result


def test_reward_table():
    assert calculate_rewards("win") == Reward(xp=40, coins=12)
    assert calculate_rewards(RoundOutcome.LOSS) == Reward(xp=6, coins=0)
    with pytest.raises(ValueError):
        calculate_rewards("draw")


def test_round_win_flow(endgame_deal):
    ledger, profile = FakeLedger(), FakeProgression()
    rnd = SolitaireRound(ledger, profile, entry_fee=10, win_payout=25)
    board = rnd.start()
    assert ledger.calls == [("spend", 10)]
    assert rnd.verified
    assert board == endgame_deal.deal
    assert board is not endgame_deal.deal

    # tableau moves reveal the card underneath without an explicit flip
    assert rnd.play(Move.tab_to_found(0, Suit.SPADES))
    assert board.tableau[0][-1].face_up

    player = rnd.auto_win()
    assert player.run()
    assert rnd.check_win()
    assert rnd.state is RoundState.WON
    assert profile.xp == [(40, "Solitaire:win")]
    assert profile.coins == 12
    assert ledger.calls[-1] == ("credit", 25)
    assert ledger.balance == 115


def test_play_settles_win(endgame_deal):
    ledger, profile = FakeLedger(), FakeProgression()
    rnd = SolitaireRound(ledger, profile)
    rnd.start()
    for move in endgame_deal.solution_moves:
        if move.type is MoveType.FLIP:
            continue
        assert rnd.play(move)
    assert rnd.state is RoundState.WON
    assert not rnd.play(Move.draw(1))


def test_illegal_play_is_noop(endgame_deal):
    rnd = SolitaireRound(FakeLedger(), FakeProgression())
    board = rnd.start()
    snapshot = board.copy()
    assert not rnd.play(Move.tab_to_found(3, Suit.CLUBS))
    assert board == snapshot
    assert rnd.moves_played == 0


def test_give_up(endgame_deal):
    ledger, profile = FakeLedger(), FakeProgression()
    rnd = SolitaireRound(ledger, profile, entry_fee=5, win_payout=25)
    rnd.start()
    rnd.give_up()
    assert rnd.state is RoundState.LOST
    assert profile.xp == [(6, "Solitaire:loss")]
    assert profile.coins == 0
    assert ledger.calls == [("spend", 5)]


def test_unverified_deal_when_selection_fails(monkeypatch):
    monkeypatch.setattr(rewards, "generate_deal", lambda *a, **kw: None)
    rnd = SolitaireRound(FakeLedger(), FakeProgression(), rng=DeterministicRNG(3))
    board = rnd.start()
    assert not rnd.verified
    assert [len(col) for col in board.tableau] == [1, 2, 3, 4, 5, 6, 7]


def test_ledger_errors_propagate(endgame_deal):
    rnd = SolitaireRound(FakeLedger(balance=1), FakeProgression(), entry_fee=10)
    with pytest.raises(ValueError):
        rnd.start()
    assert rnd.state is RoundState.IDLE


def test_cannot_start_twice(endgame_deal):
    rnd = SolitaireRound(FakeLedger(), FakeProgression())
    rnd.start()
    with pytest.raises(RuntimeError):
        rnd.start()
