from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .cards import Card, LIGHT, SEED, RIBBON, CHAFF

"""
こいこい 役ロジック

- 光
  * 五光: 10
  * 四光: 8（柳以外）
  * 雨四光: 7（柳を含む）
  * 三光: 5（柳抜き）
- 花見で一杯（桜の光 + 盃）: 5
- 月見で一杯（月の光 + 盃）: 5
- 猪鹿蝶: 5
- 赤短（1,2,3 の赤短冊）: 5
- 青短（6,9,10 の青短冊）: 5
- タネ: 5枚で1点、以後1枚ごと +1
- タン: 5枚で1点、以後1枚ごと +1
- カス: 10枚で1点、以後1枚ごと +1
- 配札役（初期手札のみ）
  * 手四: 同月4枚が手札にある → 6
  * くっつき: 同月ペア（2枚以上）が4組以上 → 6
"""


@dataclass(frozen=True)
class Yaku:
    id: str       # stable machine identifier
    title: str    # 表示名（日本語）
    points: int   # base points (count yaku add +1 per surplus card)


YAKU: Dict[str, Yaku] = {y.id: y for y in (
    Yaku("chaff", "カス", 1),
    Yaku("ribbons", "短冊", 1),
    Yaku("seeds", "タネ", 1),
    Yaku("red-poem", "赤短", 5),
    Yaku("blue-ribbon", "青短", 5),
    Yaku("boar-deer-butterfly", "猪鹿蝶", 5),
    Yaku("flower-viewing-sake", "花見で一杯", 5),
    Yaku("moon-viewing-sake", "月見で一杯", 5),
    Yaku("five-lights", "五光", 10),
    Yaku("four-lights", "四光", 8),
    Yaku("rainy-four-lights", "雨四光", 7),
    Yaku("three-lights", "三光", 5),
    Yaku("four-of-a-month", "手四", 6),
    Yaku("four-pairs", "くっつき", 6),
)}

CHAFF_THRESHOLD = 10
RIBBON_THRESHOLD = 5
SEED_THRESHOLD = 5


def yaku_title(yaku_id: str) -> str:
    return YAKU[yaku_id].title


@dataclass
class _Tally:
    chaff: int = 0
    ribbon: int = 0
    seed: int = 0
    light: int = 0
    rain: bool = False
    red: int = 0
    blue: int = 0
    boar: bool = False
    deer: bool = False
    butterfly: bool = False
    cup: bool = False
    cherry: bool = False  # 3月の光
    moon: bool = False    # 8月の光


def _tally(cards: Iterable[Card]) -> _Tally:
    """役判定に必要な集計"""
    t = _Tally()
    for x in cards:
        if x.suit == CHAFF:
            t.chaff += 1
        elif x.suit == RIBBON:
            t.ribbon += 1
        elif x.suit == SEED:
            t.seed += 1
        elif x.suit == LIGHT:
            t.light += 1
            if x.rain:
                t.rain = True
            if x.month == 3:
                t.cherry = True
            elif x.month == 8:
                t.moon = True
        if x.red_poem:
            t.red += 1
        if x.blue_ribbon:
            t.blue += 1
        t.boar = t.boar or x.boar
        t.deer = t.deer or x.deer
        t.butterfly = t.butterfly or x.butterfly
        t.cup = t.cup or x.cup
    return t


def _completed(t: _Tally) -> List[Tuple[str, int]]:
    res: List[Tuple[str, int]] = []

    # --- カス / 短冊 / タネ（加点系） ---
    if t.chaff >= CHAFF_THRESHOLD:
        res.append(("chaff", YAKU["chaff"].points + (t.chaff - CHAFF_THRESHOLD)))
    if t.ribbon >= RIBBON_THRESHOLD:
        res.append(("ribbons", YAKU["ribbons"].points + (t.ribbon - RIBBON_THRESHOLD)))
    if t.seed >= SEED_THRESHOLD:
        res.append(("seeds", YAKU["seeds"].points + (t.seed - SEED_THRESHOLD)))

    # --- 赤短・青短 ---
    if t.red == 3:
        res.append(("red-poem", YAKU["red-poem"].points))
    if t.blue == 3:
        res.append(("blue-ribbon", YAKU["blue-ribbon"].points))

    # --- 猪鹿蝶 ---
    if t.boar and t.deer and t.butterfly:
        res.append(("boar-deer-butterfly", YAKU["boar-deer-butterfly"].points))

    # --- 花見・月見 ---
    if t.cup and t.cherry:
        res.append(("flower-viewing-sake", YAKU["flower-viewing-sake"].points))
    if t.cup and t.moon:
        res.append(("moon-viewing-sake", YAKU["moon-viewing-sake"].points))

    # --- 光 ---
    if t.light >= 5:
        res.append(("five-lights", YAKU["five-lights"].points))
    elif t.light == 4:
        yid = "rainy-four-lights" if t.rain else "four-lights"
        res.append((yid, YAKU[yid].points))
    elif t.light == 3 and not t.rain:
        res.append(("three-lights", YAKU["three-lights"].points))

    return res


def list_completed_yaku(cards: Iterable[Card]) -> List[Tuple[str, int]]:
    """取り札で成立している役を (id, 点数) で列挙"""
    return _completed(_tally(cards))


def evaluate_yaku(cards: Iterable[Card]) -> Dict[str, int]:
    return dict(list_completed_yaku(cards))


def score_pile(cards: Iterable[Card]) -> int:
    return sum(p for _, p in _completed(_tally(cards)))


def list_deal_yaku(hand: Iterable[Card]) -> List[Tuple[str, int]]:
    """配られた手札だけで成立する役（場・取り札は見ない）"""
    by_month = Counter(c.month for c in hand)
    res: List[Tuple[str, int]] = []
    if any(n == 4 for n in by_month.values()):
        res.append(("four-of-a-month", YAKU["four-of-a-month"].points))
    if sum(1 for n in by_month.values() if n >= 2) >= 4:
        res.append(("four-pairs", YAKU["four-pairs"].points))
    return res


def progress_signal(cards: Iterable[Card]) -> float:
    """Heuristic reward for partially built combinations.

    Rarer combinations weigh more per card. A term drops out once its yaku
    is complete, at which point score_pile carries it. Planning only; never
    reported as points.
    """
    t = _tally(cards)
    s = 0.0
    if t.light < 3 or (t.light == 3 and t.rain):
        s += 1.0 * t.light * 0.3
    if t.ribbon < RIBBON_THRESHOLD:
        s += 0.4 * t.ribbon * 0.1
    if t.seed < SEED_THRESHOLD:
        s += 0.4 * t.seed * 0.1
    if t.red < 3:
        s += 0.8 * t.red * 0.2
    if t.blue < 3:
        s += 0.8 * t.blue * 0.2
    trio = int(t.boar) + int(t.deer) + int(t.butterfly)
    if trio < 3:
        s += 1.1 * trio * 0.3
    return s


def list_yaku_progress(cards: Iterable[Card], hand: Optional[Iterable[Card]] = None) -> List[str]:
    """次に狙えるしきい値のヒント（表示用の簡易版）"""
    t = _tally(cards)
    hints: List[str] = []

    if t.light < 3 or (t.light == 3 and t.rain):
        hints.append(f"光 {t.light}/3（柳なしで三光）")
    if t.seed < SEED_THRESHOLD:
        hints.append(f"タネ {t.seed}/{SEED_THRESHOLD}")
    if t.ribbon < RIBBON_THRESHOLD:
        hints.append(f"短冊 {t.ribbon}/{RIBBON_THRESHOLD}")
    if t.chaff < CHAFF_THRESHOLD:
        hints.append(f"カス {t.chaff}/{CHAFF_THRESHOLD}")
    if t.red < 3:
        hints.append(f"赤短 {t.red}/3")
    if t.blue < 3:
        hints.append(f"青短 {t.blue}/3")
    trio = int(t.boar) + int(t.deer) + int(t.butterfly)
    if trio < 3:
        hints.append(f"猪鹿蝶 {trio}/3")
    if t.cup and not t.cherry:
        hints.append("花見で一杯（桜の光 待ち）")
    if t.cup and not t.moon:
        hints.append("月見で一杯（月の光 待ち）")

    # 手札に光があれば優先を促す
    if hand is not None:
        for c in hand:
            if c.suit == LIGHT:
                hints.insert(0, f"光（{c.month}月）を優先して三光/四光/五光を狙う")
                break
    return hints
