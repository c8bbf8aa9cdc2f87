from .cards import Card, parse_card, DECK, LIGHT, SEED, RIBBON, CHAFF
from .state import GameState, InvalidStateError
from .koikoi_rules import (
    Yaku, YAKU, score_pile, evaluate_yaku, list_completed_yaku, list_deal_yaku,
    progress_signal, list_yaku_progress,
)
from .config import AdvisorConfig
from .sampler import DealSampler, Deal
from .advisor import Advisor, Suggestion, OpponentPrediction, decide_first_player, rank_suggestions
__all__ = [
    "Card","parse_card","DECK","LIGHT","SEED","RIBBON","CHAFF",
    "GameState","InvalidStateError",
    "Yaku","YAKU","score_pile","evaluate_yaku","list_completed_yaku","list_deal_yaku",
    "progress_signal","list_yaku_progress",
    "AdvisorConfig",
    "DealSampler","Deal",
    "Advisor","Suggestion","OpponentPrediction","decide_first_player","rank_suggestions",
]
