import pytest

from helpers import make_endgame, make_won


@pytest.fixture
def endgame():
    return make_endgame()


@pytest.fixture
def won_board():
    return make_won()
