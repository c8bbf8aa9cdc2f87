import copy
from dataclasses import dataclass, field as _field
from typing import Any, Dict, List

from .cards import Card, DECK, parse_card, canonical

HAND_LIMIT = 8

ZONES = ("hand", "opp_known", "field", "captured_self", "captured_opp", "discarded")


class InvalidStateError(ValueError):
    """Raised when a snapshot breaks the card-distribution invariants."""


@dataclass
class GameState:
    hand: List[Card] = _field(default_factory=list)
    opp_known: List[Card] = _field(default_factory=list)
    field: List[Card] = _field(default_factory=list)
    captured_self: List[Card] = _field(default_factory=list)
    captured_opp: List[Card] = _field(default_factory=list)
    # 死に札（どの取り札にも属さず山からも消えた札）
    discarded: List[Card] = _field(default_factory=list)
    config: Dict[str, Any] = _field(default_factory=dict)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check zone invariants and swap in the canonical DECK instances."""
        if len(self.hand) > HAND_LIMIT:
            raise InvalidStateError(f"hand holds {len(self.hand)} cards (max {HAND_LIMIT})")
        where: Dict[Card, str] = {}
        for zone in ZONES:
            cards = []
            for c in getattr(self, zone):
                if not isinstance(c, Card):
                    raise InvalidStateError(f"{zone}: not a card: {c!r}")
                try:
                    c = canonical(c)
                except KeyError:
                    raise InvalidStateError(f"{zone}: {c!r} is not in the 48-card deck") from None
                if c in where:
                    raise InvalidStateError(f"{c.key()} appears in both {where[c]} and {zone}"
                                            if where[c] != zone else f"{c.key()} appears twice in {zone}")
                where[c] = zone
                cards.append(c)
            setattr(self, zone, cards)

    def seen(self) -> List[Card]:
        return (self.hand + self.opp_known + self.field
                + self.captured_self + self.captured_opp + self.discarded)

    def unknown(self) -> List[Card]:
        """Deck minus seen, in deck order."""
        seen_idx = {c.index for c in self.seen()}
        return [c for c in DECK if c.index not in seen_idx]

    def remaining_of_month(self, month: int) -> int:
        return 4 - sum(1 for c in self.seen() if c.month == month)

    def clone(self) -> "GameState":
        g = copy.copy(self)
        for zone in ZONES:
            setattr(g, zone, list(getattr(self, zone)))
        g.config = dict(self.config)
        return g

    @staticmethod
    def from_json(data: dict) -> "GameState":
        if not isinstance(data, dict):
            raise InvalidStateError(f"state must be a JSON object, got {type(data).__name__}")
        config = data.get("config", {})
        if not isinstance(config, dict):
            raise InvalidStateError(f"config must be an object, got {type(config).__name__}")
        used: List[Card] = []

        def conv(key: str) -> List[Card]:
            raw = data.get(key, [])
            if not isinstance(raw, list):
                raise InvalidStateError(f"{key} must be a list of cards, got {type(raw).__name__}")
            out = []
            for x in raw:
                if isinstance(x, Card):
                    c = x
                else:
                    try:
                        c = parse_card(str(x), used)
                    except (KeyError, ValueError) as e:
                        raise InvalidStateError(f"{key}: {e}") from e
                used.append(c)
                out.append(c)
            return out

        return GameState(
            hand=conv("hand"),
            opp_known=conv("opp_known"),
            field=conv("field"),
            captured_self=conv("captured_self"),
            captured_opp=conv("captured_opp"),
            discarded=conv("discarded"),
            config=dict(config),
        )

    def to_json(self) -> dict:
        data: Dict[str, Any] = {zone: [c.key() for c in getattr(self, zone)] for zone in ZONES}
        data["config"] = dict(self.config)
        return data
