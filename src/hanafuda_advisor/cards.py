from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Tuple

LIGHT = "light"
SEED = "seed"
RIBBON = "ribbon"
CHAFF = "chaff"

SUITS: Tuple[str, ...] = (LIGHT, SEED, RIBBON, CHAFF)
MONTHS: Tuple[int, ...] = tuple(range(1, 13))

SUIT_LABELS = {LIGHT: "光", SEED: "タネ", RIBBON: "短冊", CHAFF: "カス"}


@dataclass(frozen=True, order=True)
class Card:
    month: int  # 1..12
    suit: str   # "light","seed","ribbon","chaff"
    name: str = ""  # e.g. "crane","moon","red-poem","blue","plain"; chaff are "1".."3"
    rain: bool = False
    red_poem: bool = False
    blue_ribbon: bool = False
    boar: bool = False
    deer: bool = False
    butterfly: bool = False
    cup: bool = False
    # position in DECK; not part of identity
    index: int = field(default=-1, compare=False, repr=False)

    def key(self) -> str:
        return f"{self.month}:{self.suit}{('-'+self.name) if self.name else ''}"

    def label(self) -> str:
        return f"{self.month:02d}:{SUIT_LABELS.get(self.suit, self.suit)}{(':'+self.name) if self.name else ''}"

    def __str__(self) -> str:
        return self.key()


# Standard 48-card set, month by month
def _build_cards() -> Tuple[Card, ...]:
    C: List[Card] = []

    # Lights (1,3,8,11,12)
    C += [
        Card(1,  LIGHT, "crane"),
        Card(3,  LIGHT, "cherry"),
        Card(8,  LIGHT, "moon"),
        Card(11, LIGHT, "rain", rain=True),
        Card(12, LIGHT, "phoenix"),
    ]

    # Seeds
    C += [
        Card(2,  SEED, "nightingale"),
        Card(4,  SEED, "cuckoo"),
        Card(5,  SEED, "bridge"),
        Card(6,  SEED, "butterfly", butterfly=True),
        Card(7,  SEED, "boar", boar=True),
        Card(8,  SEED, "geese"),
        Card(9,  SEED, "sake", cup=True),
        Card(10, SEED, "deer", deer=True),
        Card(11, SEED, "swallow"),
    ]

    # Ribbons (one per month except 8 and 12)
    red_poem = {1, 2, 3}
    blue = {6, 9, 10}
    for m in MONTHS:
        if m in red_poem:
            C.append(Card(m, RIBBON, "red-poem", red_poem=True))
        elif m in blue:
            C.append(Card(m, RIBBON, "blue", blue_ribbon=True))
        elif m not in (8, 12):
            C.append(Card(m, RIBBON, "plain"))

    # 各月4枚に満たない分をカスで埋める
    count: Dict[int, int] = {m: 0 for m in MONTHS}
    for c in C:
        count[c.month] += 1
    for m in MONTHS:
        for n in range(1, 4 - count[m] + 1):
            C.append(Card(m, CHAFF, str(n)))

    assert len(C) == 48, f"Deck size mismatch: {len(C)}"
    assert all(sum(1 for c in C if c.month == m) == 4 for m in MONTHS)
    return tuple(replace(c, index=i) for i, c in enumerate(sorted(C)))


DECK: Tuple[Card, ...] = _build_cards()
DECK_SET: FrozenSet[Card] = frozenset(DECK)
CARD_INDEX: Dict[str, Card] = {c.key(): c for c in DECK}
_CANONICAL: Dict[Card, Card] = {c: c for c in DECK}


def canonical(card: Card) -> Card:
    """Return the DECK instance equal to ``card`` (KeyError if none)."""
    return _CANONICAL[card]


def cards_of_month(month: int) -> List[Card]:
    return [c for c in DECK if c.month == month]


_SUIT_SYNONYMS = {
    "light": LIGHT, "bright": LIGHT, "hikari": LIGHT, "光": LIGHT,
    "seed": SEED, "animal": SEED, "tane": SEED, "タネ": SEED,
    "ribbon": RIBBON, "tan": RIBBON, "tanzaku": RIBBON, "短冊": RIBBON,
    "chaff": CHAFF, "kasu": CHAFF, "カス": CHAFF,
}

_NAME_SYNONYMS = {
    "red": "red-poem", "poetry": "red-poem", "poetry-red": "red-poem",
    "aka": "red-poem", "ao": "blue", "cup": "sake", "warbler": "nightingale",
}


def parse_card(token: str, used: Iterable[Card] = ()) -> Card:
    """Parse '<month>:<suit[-name]>' into a DECK card.

    Lenient tokens ("1:chaff", "3:hikari") may fit several cards; the first
    one not in ``used`` wins.
    """
    token = token.strip()
    if token in CARD_INDEX:
        return CARD_INDEX[token]
    if ":" not in token:
        raise ValueError(f"Invalid card token: {token!r}")
    m_str, rest = token.split(":", 1)
    try:
        m = int(m_str)
    except ValueError:
        raise ValueError(f"Invalid month in card token: {token!r}") from None
    if "-" in rest:
        suit, name = rest.split("-", 1)
    else:
        suit, name = rest, ""
    suit = _SUIT_SYNONYMS.get(suit.strip().lower(), suit.strip().lower())
    name = name.strip().lower()
    name = _NAME_SYNONYMS.get(name, name)

    candidates = [c for c in DECK if c.month == m and c.suit == suit and (name == "" or c.name == name)]
    if not candidates:
        raise KeyError(f"Unknown card: {token}")
    taken = set(used)
    for c in candidates:
        if c not in taken:
            return c
    return candidates[0]
