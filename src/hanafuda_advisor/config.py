import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvisorConfig:
    best_move_simulations: int = 800
    prediction_simulations: int = 1000
    hand_size: int = 8
    workers: int = 1
    time_budget: Optional[float] = None  # seconds per best_moves/predict call; None = unbounded

    def __post_init__(self):
        for name in ("best_move_simulations", "prediction_simulations", "hand_size", "workers"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValueError(f"{name} must be an int, got {v!r}")
        if self.hand_size < 0:
            raise ValueError(f"hand_size must be >= 0, got {self.hand_size}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.time_budget is not None:
            if isinstance(self.time_budget, bool) or not isinstance(self.time_budget, (int, float)):
                raise ValueError(f"time_budget must be a number, got {self.time_budget!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Optional["AdvisorConfig"] = None) -> "AdvisorConfig":
        """Build from the ``config`` block of a state document.

        Unknown keys are ignored with a warning.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for k, v in data.items():
            if k in known:
                kwargs[k] = v
            else:
                log.warning("ignoring unknown config key %r", k)
        return replace(base or cls(), **kwargs)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AdvisorConfig":
        env = os.environ if environ is None else environ
        kwargs = {}
        if env.get("HANAFUDA_SIMULATIONS"):
            n = int(env["HANAFUDA_SIMULATIONS"])
            kwargs["best_move_simulations"] = n
            kwargs["prediction_simulations"] = n
        if env.get("HANAFUDA_WORKERS"):
            kwargs["workers"] = int(env["HANAFUDA_WORKERS"])
        return cls(**kwargs)
