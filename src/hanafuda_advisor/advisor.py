"""Monte Carlo move advisor.

Hidden cards are resolved by repeated random deals (see ``sampler``). Each
trial clones the root state, plays one self turn and one greedy opponent
turn, and scores the resulting piles.
"""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np

from .cards import Card, MONTHS
from .config import AdvisorConfig
from .koikoi_rules import score_pile, progress_signal
from .sampler import DealSampler
from .state import GameState

log = logging.getLogger(__name__)

CAPTURE_BONUS = 0.6            # opponent policy: can take a field card
POLICY_SCORE_WEIGHT = 0.3
POLICY_PROGRESS_WEIGHT = 0.2
CAPTURE_PROGRESS_WEIGHT = 0.6  # which field card to take
TRIAL_PROGRESS_WEIGHT = 0.5    # end-of-trial valuation

HIGH_PROBABILITY = 0.2


@dataclass
class Suggestion:
    card: Card
    ev: float
    reason: str
    trials: int = 0  # completed trials; fewer than requested if cut short


@dataclass
class OpponentPrediction:
    month: int
    probability: float
    reason: str


# ------------------------------
# 1手の解決（両者共通）
# ------------------------------

def capture_value(pile: Sequence[Card], card: Card, target: Card) -> float:
    taken = list(pile) + [card, target]
    pts = score_pile(taken) - score_pile(pile)
    prog = progress_signal(taken) - progress_signal(pile)
    return pts + CAPTURE_PROGRESS_WEIGHT * prog


def choose_capture(pile: Sequence[Card], card: Card, field: Sequence[Card]) -> Optional[Card]:
    """Best same-month field card for ``card``; ties go to the earliest in ``field``."""
    best: Optional[Card] = None
    best_v = float("-inf")
    for f in field:
        if f.month != card.month:
            continue
        v = capture_value(pile, card, f)
        if v > best_v:
            best, best_v = f, v
    return best


def _capture_or_place(g: GameState, card: Card, self_turn: bool) -> None:
    pile = g.captured_self if self_turn else g.captured_opp
    target = choose_capture(pile, card, g.field)
    if target is None:
        g.field.append(card)
    else:
        g.field.remove(target)
        pile.append(card)
        pile.append(target)


def simulate_turn(g: GameState, card: Card, draw_pile: List[Card], self_turn: bool) -> None:
    """Play ``card`` then draw one from the front of ``draw_pile`` (if any)."""
    if self_turn:
        if card in g.hand:
            g.hand.remove(card)
    elif card in g.opp_known:
        g.opp_known.remove(card)
    _capture_or_place(g, card, self_turn)
    if draw_pile:
        _capture_or_place(g, draw_pile.pop(0), self_turn)


def opponent_choice(g: GameState, hand: Iterable[Card]) -> Optional[Card]:
    """One-step greedy pick for the opponent; first card wins ties."""
    pile = g.captured_opp
    base_pts = score_pile(pile)
    base_prog = progress_signal(pile)
    best: Optional[Card] = None
    best_s = float("-inf")
    for c in hand:
        s = 0.0
        target = choose_capture(pile, c, g.field)
        if target is not None:
            taken = list(pile) + [c, target]
            s += CAPTURE_BONUS
            s += POLICY_SCORE_WEIGHT * (score_pile(taken) - base_pts)
            s += POLICY_PROGRESS_WEIGHT * (progress_signal(taken) - base_prog)
        if s > best_s:
            best, best_s = c, s
    return best


def trial_value(g: GameState) -> float:
    pts = score_pile(g.captured_self) - score_pile(g.captured_opp)
    prog = progress_signal(g.captured_self) - progress_signal(g.captured_opp)
    return pts + TRIAL_PROGRESS_WEIGHT * prog


def decide_first_player(mine: Card, theirs: Card) -> str:
    """親決め: the earlier month leads."""
    if mine.month < theirs.month:
        return "self"
    if mine.month > theirs.month:
        return "opponent"
    return "tie"


def rank_suggestions(suggestions: Iterable[Suggestion], top: Optional[int] = None) -> List[Suggestion]:
    """Highest EV first; suggestions with no completed trial go last."""
    ranked = sorted(suggestions, key=lambda s: (s.trials > 0, s.ev), reverse=True)
    return ranked if top is None else ranked[:top]


def _move_reason(field: Sequence[Card], card: Card) -> str:
    n = sum(1 for f in field if f.month == card.month)
    if n == 0:
        return "depends on draw pile"
    return f"{n} same-month field cards, immediate capture chance"


# ------------------------------
# バッチ実行
# ------------------------------

def _stopped(deadline: Optional[float], cancel: Optional[threading.Event]) -> bool:
    if cancel is not None and cancel.is_set():
        return True
    return deadline is not None and time.monotonic() >= deadline


def _run_trials(n: int, trial: Callable[[np.random.Generator], object], rng: np.random.Generator,
                deadline: Optional[float], cancel: Optional[threading.Event]) -> list:
    out = []
    for _ in range(n):
        if _stopped(deadline, cancel):
            break
        out.append(trial(rng))
    return out


class Advisor:
    def __init__(self, seed: Optional[int] = None, config: Optional[AdvisorConfig] = None):
        self.config = config or AdvisorConfig()
        self._seed_seq = np.random.SeedSequence(seed)
        self.rng = np.random.default_rng(self._seed_seq)

    def _deadline(self, deadline: Optional[float]) -> Optional[float]:
        if deadline is None and self.config.time_budget is not None:
            return time.monotonic() + self.config.time_budget
        return deadline

    def _batch(self, n: int, trial, deadline, cancel) -> list:
        n = max(0, n)
        workers = min(self.config.workers, n)
        if workers <= 1:
            return _run_trials(n, trial, self.rng, deadline, cancel)
        # each worker gets its own generator spawned from our seed; trials hold
        # the GIL, so this splits the stream reproducibly more than it speeds up
        rngs = [np.random.default_rng(s) for s in self._seed_seq.spawn(workers)]
        sizes = [n // workers + (1 if i < n % workers else 0) for i in range(workers)]
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futures = [ex.submit(_run_trials, k, trial, r, deadline, cancel) for k, r in zip(sizes, rngs)]
            results = []
            for f in futures:
                results.extend(f.result())
        return results

    def best_moves(self, g: GameState, simulations: Optional[int] = None,
                   deadline: Optional[float] = None,
                   cancel: Optional[threading.Event] = None) -> List[Suggestion]:
        """Expected value of each hand card, in hand order.

        ``deadline`` is a ``time.monotonic()`` value for the whole call. Each
        candidate gets an equal share of the time left when its turn comes;
        once its share runs out (or ``cancel`` is set) its remaining trials
        are skipped and the EV comes from the completed ones.
        """
        n = self.config.best_move_simulations if simulations is None else simulations
        deadline = self._deadline(deadline)
        sampler = DealSampler.for_state(g, self.config.hand_size)
        hand = list(g.hand)
        out: List[Suggestion] = []
        for i, play in enumerate(hand):
            t0 = time.perf_counter()
            share = None
            if deadline is not None:
                now = time.monotonic()
                share = now + max(0.0, deadline - now) / (len(hand) - i)
            values = self._batch(n, self._move_trial(g, sampler, play), share, cancel)
            ev = float(np.sum(values)) / max(1, len(values)) if values else 0.0
            if len(values) < max(0, n):
                log.info("%s: stopped after %d/%d trials", play.key(), len(values), n)
            log.debug("%s: ev=%.3f over %d trials in %.3fs", play.key(), ev, len(values), time.perf_counter() - t0)
            out.append(Suggestion(play, ev, _move_reason(g.field, play), len(values)))
        return out

    @staticmethod
    def _move_trial(root: GameState, sampler: DealSampler, play: Card):
        def run(rng: np.random.Generator) -> float:
            g = root.clone()
            deal = sampler.sample(rng)
            opp_hand = g.opp_known + deal.opp_hidden
            draw = deal.draw_pile
            simulate_turn(g, play, draw, self_turn=True)
            choice = opponent_choice(g, opp_hand)
            if choice is not None:
                simulate_turn(g, choice, draw, self_turn=False)
            return trial_value(g)
        return run

    def predict_opponent_next(self, g: GameState, simulations: Optional[int] = None,
                              deadline: Optional[float] = None,
                              cancel: Optional[threading.Event] = None) -> List[OpponentPrediction]:
        """Distribution of the month the opponent plays next, most likely first."""
        n = self.config.prediction_simulations if simulations is None else simulations
        deadline = self._deadline(deadline)
        sampler = DealSampler.for_state(g, self.config.hand_size)

        def run(rng: np.random.Generator) -> int:
            deal = sampler.sample(rng)
            choice = opponent_choice(g, g.opp_known + deal.opp_hidden)
            return 0 if choice is None else choice.month

        months = [m for m in self._batch(n, run, deadline, cancel) if m]
        votes = np.bincount(np.asarray(months, dtype=np.int64), minlength=13)
        total = max(1, int(votes.sum()))
        preds = []
        for m in MONTHS:
            if votes[m] == 0:
                continue
            p = int(votes[m]) / total
            reason = ("high: field match/combination progress" if p > HIGH_PROBABILITY
                      else "low-to-medium: discard candidate")
            preds.append(OpponentPrediction(m, p, reason))
        preds.sort(key=lambda x: x.probability, reverse=True)
        log.debug("opponent prediction over %d votes: %s", len(months),
                  ", ".join(f"{p.month}={p.probability:.2f}" for p in preds))
        return preds
