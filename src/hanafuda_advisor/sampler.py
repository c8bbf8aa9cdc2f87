from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from .cards import Card, DECK


@dataclass
class Deal:
    opp_hidden: List[Card]  # simulated hidden part of the opponent's hand
    draw_pile: List[Card]   # front card is drawn first


def shuffle_in_place(cards: List[Card], rng: np.random.Generator) -> None:
    """Fisher-Yates, last index down to 1, one bounded draw per step."""
    for i in range(len(cards) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        cards[i], cards[j] = cards[j], cards[i]


class DealSampler:
    """One consistent random completion of the hidden cards per call.

    The cards nobody has seen are shuffled; the front ``opp_need`` go to the
    opponent's hidden hand and the rest form the draw pile.
    """

    def __init__(self, seen: Iterable[Card], opp_known_count: int, hand_size: int = 8):
        seen_idx = {c.index for c in seen}
        self.unknown: List[Card] = [c for c in DECK if c.index not in seen_idx]
        self.opp_need = max(0, hand_size - opp_known_count)

    @classmethod
    def for_state(cls, state, hand_size: int = 8) -> "DealSampler":
        return cls(state.seen(), len(state.opp_known), hand_size)

    def sample(self, rng: np.random.Generator) -> Deal:
        cards = list(self.unknown)
        shuffle_in_place(cards, rng)
        # slicing never reads past the end when unknown < opp_need
        return Deal(opp_hidden=cards[:self.opp_need], draw_pile=cards[self.opp_need:])
