import argparse
import json
import logging
import os
import sys

from .advisor import Advisor, rank_suggestions, decide_first_player
from .cards import parse_card
from .config import AdvisorConfig
from .koikoi_rules import list_completed_yaku, list_deal_yaku, list_yaku_progress, score_pile, yaku_title
from .state import GameState, InvalidStateError

log = logging.getLogger(__name__)


def _load(path: str) -> GameState:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    return GameState.from_json(data)


def _advisor(gs: GameState, args) -> Advisor:
    cfg = AdvisorConfig.from_dict(gs.config, base=AdvisorConfig.from_env())
    return Advisor(seed=args.seed, config=cfg)


def cmd_suggest(args):
    gs = _load(args.state_json)
    moves = rank_suggestions(_advisor(gs, args).best_moves(gs, args.simulations), top=args.top)
    if not moves:
        print("(候補なし)")
    for i, m in enumerate(moves, 1):
        print(f"[{i}] {m.card.key()}  EV={m.ev:+.3f}  {m.reason}  (trials={m.trials})")


def cmd_predict(args):
    gs = _load(args.state_json)
    preds = _advisor(gs, args).predict_opponent_next(gs, args.simulations)
    if not preds:
        print("(予測なし)")
    for p in preds:
        print(f"{p.month:2d}月  {p.probability:6.1%}  {p.reason}")


def cmd_eval_yaku(args):
    gs = _load(args.state_json)
    y = list_completed_yaku(gs.captured_self)
    if not y:
        print("役は未成立")
    else:
        for k, v in y:
            print(f"{yaku_title(k)} ({k}): {v}")
        print(f"合計: {score_pile(gs.captured_self)} 点")
    print("\n次の狙い:", *list_yaku_progress(gs.captured_self, gs.hand), sep="\n - ")


def cmd_deal_yaku(args):
    gs = _load(args.state_json)
    y = list_deal_yaku(gs.hand)
    if not y:
        print("配札役なし")
    for k, v in y:
        print(f"{yaku_title(k)} ({k}): {v}")


def cmd_first_player(args):
    mine, theirs = parse_card(args.mine), parse_card(args.theirs)
    print(decide_first_player(mine, theirs))


def main(argv=None):
    p = argparse.ArgumentParser(prog="hanafuda-advisor", description="Hanafuda koi-koi move advisor")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    s1 = sub.add_parser("suggest", help="最善手候補の表示")
    s1.add_argument("state_json")
    s1.add_argument("--simulations", type=int, default=None)
    s1.add_argument("--seed", type=int, default=None)
    s1.add_argument("--top", type=int, default=None)
    s1.set_defaults(func=cmd_suggest)

    s2 = sub.add_parser("predict", help="相手の次の一手（月）を予測")
    s2.add_argument("state_json")
    s2.add_argument("--simulations", type=int, default=None)
    s2.add_argument("--seed", type=int, default=None)
    s2.set_defaults(func=cmd_predict)

    s3 = sub.add_parser("eval-yaku", help="現在の役の判定")
    s3.add_argument("state_json")
    s3.set_defaults(func=cmd_eval_yaku)

    s4 = sub.add_parser("deal-yaku", help="配札役の判定")
    s4.add_argument("state_json")
    s4.set_defaults(func=cmd_deal_yaku)

    s5 = sub.add_parser("first-player", help="親決め（例: first-player 3:chaff-1 8:light-moon）")
    s5.add_argument("mine")
    s5.add_argument("theirs")
    s5.set_defaults(func=cmd_first_player)

    args = p.parse_args(argv)
    debug = args.verbose or bool(os.getenv("HANAFUDA_DEBUG"))
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except (InvalidStateError, ValueError, KeyError, OSError) as e:
        log.error("%s", e)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
