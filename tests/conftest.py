import pytest

from hanafuda_advisor.cards import CARD_INDEX


@pytest.fixture
def C():
    """Look up a canonical card by token, e.g. C("11:light-rain")."""
    return CARD_INDEX.__getitem__


@pytest.fixture
def cards(C):
    def _cards(*tokens):
        return [C(t) for t in tokens]
    return _cards
