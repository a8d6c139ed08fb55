# farmsim/costs.py
"""
CostModel
---------
Maps aggregate power draw (watts, running all day) to a daily electricity
cost with a progressive tier schedule:

    first 10 kWh   at R
    10 - 25 kWh    at R * 1.2
    beyond 25 kWh  at R * 1.5

with R = 0.12 per kWh by default. Result is rounded to the nearest cent.
"""

import math
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

HOURS_PER_DAY = 24.0
DEFAULT_BASE_RATE = 0.12
DEFAULT_TIERS = ((10.0, 1.0), (25.0, 1.2), (math.inf, 1.5))


class CostModel:
    def __init__(self, base_rate: float = DEFAULT_BASE_RATE,
                 tiers: Sequence[Tuple[float, float]] = DEFAULT_TIERS):
        self.base_rate = float(base_rate)
        uppers = np.array([float(t[0]) for t in tiers])
        self.rates = np.array([float(t[1]) for t in tiers]) * self.base_rate
        self.lowers = np.concatenate(([0.0], uppers[:-1]))
        self.uppers = uppers

    @classmethod
    def from_config(cls, cfg: Optional[Dict] = None) -> 'CostModel':
        power = (cfg or {}).get('power', {})
        return cls(
            base_rate=power.get('base_rate', DEFAULT_BASE_RATE),
            tiers=[tuple(t) for t in power.get('tiers', DEFAULT_TIERS)],
        )

    @staticmethod
    def daily_kwh(total_watts: float) -> float:
        return total_watts * HOURS_PER_DAY / 1000.0

    def daily_power_cost(self, total_watts: float) -> float:
        kwh = max(0.0, self.daily_kwh(total_watts))
        # kWh falling inside each tier
        in_tier = np.clip(kwh - self.lowers, 0.0, self.uppers - self.lowers)
        cost = float(np.sum(in_tier * self.rates))
        # half-up to the cent
        return math.floor(cost * 100.0 + 0.5) / 100.0
