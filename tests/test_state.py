"""GameState validation, derived zones and cloning."""
import pytest

from hanafuda_advisor.cards import Card, CARD_INDEX, DECK, LIGHT
from hanafuda_advisor.state import GameState, InvalidStateError


def test_empty_state_sees_nothing():
    g = GameState()
    assert g.seen() == []
    assert g.unknown() == list(DECK)


def test_unknown_excludes_every_zone(cards):
    g = GameState(
        hand=cards("1:light-crane", "2:chaff-1"),
        opp_known=cards("3:chaff-1"),
        field=cards("4:chaff-1", "5:chaff-1"),
        captured_self=cards("6:chaff-1"),
        captured_opp=cards("7:chaff-1"),
        discarded=cards("8:chaff-1"),
    )
    unknown = g.unknown()
    assert len(unknown) == 48 - 8
    assert not set(unknown) & set(g.seen())
    assert [c.index for c in unknown] == sorted(c.index for c in unknown), "deck order"


def test_remaining_of_month(cards):
    g = GameState(hand=cards("1:light-crane"), field=cards("1:chaff-1"))
    assert g.remaining_of_month(1) == 2
    assert g.remaining_of_month(2) == 4


def test_duplicate_across_zones_rejected(cards):
    with pytest.raises(InvalidStateError, match="1:light-crane"):
        GameState(hand=cards("1:light-crane"), field=cards("1:light-crane"))


def test_duplicate_within_zone_rejected(cards):
    with pytest.raises(InvalidStateError, match="twice"):
        GameState(field=cards("2:chaff-1", "2:chaff-1"))


def test_hand_limit(cards):
    nine = [c for c in DECK if c.month <= 3][:9]
    with pytest.raises(InvalidStateError, match="max 8"):
        GameState(hand=nine)
    GameState(hand=nine[:8])


def test_card_outside_deck_rejected():
    with pytest.raises(InvalidStateError, match="48-card deck"):
        GameState(hand=[Card(13, LIGHT, "moon")])
    with pytest.raises(InvalidStateError):
        GameState(field=["1:light-crane"])


def test_structurally_equal_cards_are_canonicalized():
    g = GameState(hand=[Card(1, LIGHT, "crane")])
    assert g.hand[0] is CARD_INDEX["1:light-crane"]
    assert g.hand[0].index >= 0


def test_clone_is_independent(cards):
    g = GameState(hand=cards("1:light-crane", "2:chaff-1"), field=cards("3:chaff-1"))
    g2 = g.clone()
    g2.hand.remove(CARD_INDEX["1:light-crane"])
    g2.field.clear()
    g2.captured_self.append(CARD_INDEX["4:chaff-1"])
    assert [c.key() for c in g.hand] == ["1:light-crane", "2:chaff-1"]
    assert len(g.field) == 1
    assert g.captured_self == []


def test_from_json_resolves_lenient_tokens():
    g = GameState.from_json({
        "hand": ["1:kasu", "1:kasu", "11:light-rain"],
        "field": ["1:hikari"],
        "config": {"best_move_simulations": 10},
    })
    assert [c.key() for c in g.hand] == ["1:chaff-1", "1:chaff-2", "11:light-rain"]
    assert g.field[0].key() == "1:light-crane"
    assert g.config == {"best_move_simulations": 10}
    assert GameState.from_json(g.to_json()) == g


def test_from_json_reports_bad_tokens():
    with pytest.raises(InvalidStateError, match="field"):
        GameState.from_json({"field": ["13:light"]})
    with pytest.raises(InvalidStateError):
        GameState.from_json({"hand": ["1:light-crane"], "captured_opp": ["1:light-crane"]})


@pytest.mark.parametrize("doc", [
    ["1:light-crane"],
    "1:light-crane",
    {"hand": None},
    {"field": "1:light-crane"},
    {"config": ["workers", 2]},
])
def test_from_json_rejects_malformed_documents(doc):
    with pytest.raises(InvalidStateError):
        GameState.from_json(doc)
