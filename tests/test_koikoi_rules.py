"""Yaku evaluation over captured piles and initial hands."""
import random

import pytest

from hanafuda_advisor.cards import DECK, CARD_INDEX, CHAFF, SEED
from hanafuda_advisor.koikoi_rules import (
    YAKU, score_pile, evaluate_yaku, list_completed_yaku, list_deal_yaku,
    progress_signal, list_yaku_progress, yaku_title,
)


def _random_piles(n=200, seed=0):
    r = random.Random(seed)
    for _ in range(n):
        yield r.sample(DECK, r.randint(0, 30))


def test_empty_pile():
    assert score_pile([]) == 0
    assert list_completed_yaku([]) == []
    assert list_deal_yaku([]) == []
    assert progress_signal([]) == 0.0


def test_listing_agrees_with_sum():
    for pile in _random_piles():
        listed = list_completed_yaku(pile)
        assert sum(p for _, p in listed) == score_pile(pile)
        assert all(p > 0 for _, p in listed)
        assert evaluate_yaku(pile) == dict(listed)


def test_adding_a_card_never_lowers_score():
    for pile in _random_piles(n=60, seed=1):
        base = score_pile(pile)
        assert base >= 0
        for c in DECK:
            if c not in pile:
                assert score_pile(pile + [c]) >= base, f"{c.key()} lowered {[x.key() for x in pile]}"


def test_order_independent():
    pile = list(DECK[:20])
    assert score_pile(pile) == score_pile(list(reversed(pile)))


def test_red_poem_only(cards):
    pile = cards("1:ribbon-red-poem", "2:ribbon-red-poem", "3:ribbon-red-poem")
    assert score_pile(pile) == 5
    assert list_completed_yaku(pile) == [("red-poem", 5)]


def test_blue_ribbon_and_ribbons(cards):
    pile = cards("6:ribbon-blue", "9:ribbon-blue", "10:ribbon-blue", "4:ribbon-plain", "5:ribbon-plain")
    assert list_completed_yaku(pile) == [("ribbons", 1), ("blue-ribbon", 5)]


def test_lights(cards):
    five = cards("1:light-crane", "3:light-cherry", "8:light-moon", "11:light-rain", "12:light-phoenix")
    assert list_completed_yaku(five) == [("five-lights", 10)]
    assert list_completed_yaku(five[:4]) == [("rainy-four-lights", 7)]
    dry_four = cards("1:light-crane", "3:light-cherry", "8:light-moon", "12:light-phoenix")
    assert list_completed_yaku(dry_four) == [("four-lights", 8)]
    assert list_completed_yaku(dry_four[:3]) == [("three-lights", 5)]
    assert score_pile(cards("1:light-crane", "8:light-moon", "11:light-rain")) == 0


def test_sake_cup_yaku(cards):
    pile = cards("9:seed-sake", "3:light-cherry", "8:light-moon")
    assert list_completed_yaku(pile) == [("flower-viewing-sake", 5), ("moon-viewing-sake", 5)]
    assert score_pile(cards("9:seed-sake", "12:light-phoenix")) == 0


def test_counted_suits_add_one_per_extra():
    chaff = [c for c in DECK if c.suit == CHAFF]
    assert list_completed_yaku(chaff[:9]) == []
    assert list_completed_yaku(chaff[:10]) == [("chaff", 1)]
    assert list_completed_yaku(chaff[:12]) == [("chaff", 3)]
    seeds = [c for c in DECK if c.suit == SEED]
    # all nine seeds also hold boar, deer and butterfly
    assert evaluate_yaku(seeds) == {"seeds": 5, "boar-deer-butterfly": 5}


def test_deal_yaku_four_of_a_month(cards):
    hand = cards("5:seed-bridge", "5:ribbon-plain", "5:chaff-1", "5:chaff-2",
                 "1:chaff-1", "2:chaff-1", "3:chaff-1", "4:chaff-1")
    assert list_deal_yaku(hand) == [("four-of-a-month", 6)]


def test_deal_yaku_four_pairs(cards):
    hand = cards("1:chaff-1", "1:chaff-2", "2:chaff-1", "2:chaff-2",
                 "3:chaff-1", "3:chaff-2", "4:chaff-1", "4:chaff-2")
    assert list_deal_yaku(hand) == [("four-pairs", 6)]


def test_deal_yaku_three_pairs_is_nothing(cards):
    hand = cards("1:chaff-1", "1:chaff-2", "2:chaff-1", "2:chaff-2",
                 "3:chaff-1", "3:chaff-2", "4:chaff-1", "5:chaff-1")
    assert list_deal_yaku(hand) == []


def test_progress_signal_rewards_partial_and_drops_when_complete(cards):
    one = progress_signal(cards("1:light-crane"))
    two = progress_signal(cards("1:light-crane", "8:light-moon"))
    assert 0 < one < two
    assert progress_signal(cards("1:light-crane", "8:light-moon", "3:light-cherry")) == 0.0
    reds = progress_signal(cards("1:ribbon-red-poem", "2:ribbon-red-poem"))
    assert reds == pytest.approx(0.4)
    # rarer combinations weigh more per card than plain ribbons
    assert progress_signal(cards("7:seed-boar")) > progress_signal(cards("4:ribbon-plain"))


def test_every_yaku_has_id_and_title():
    for yid, y in YAKU.items():
        assert y.id == yid
        assert y.title and y.title != yid
    assert yaku_title("red-poem") == "赤短"


def test_progress_hints(cards):
    hints = list_yaku_progress(cards("9:seed-sake"), hand=cards("8:light-moon"))
    assert hints[0].startswith("光（8月）")
    assert any("花見" in h for h in hints)
    assert not any(h.startswith("赤短") for h in list_yaku_progress(
        cards("1:ribbon-red-poem", "2:ribbon-red-poem", "3:ribbon-red-poem")))
