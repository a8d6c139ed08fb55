# farmsim/environment.py
"""
EnvironmentReading
------------------
Snapshot of ambient conditions at a point (or globally): temperature (F),
humidity (%), light (%), CO2 (ppm) and acidity (pH).
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional

from farmsim.effects import EnvironmentEffect


@dataclass(frozen=True)
class EnvironmentReading:
    temperature: float = 72.0
    humidity: float = 45.0
    light: float = 60.0
    co2: float = 400.0
    ph: float = 6.5

    @classmethod
    def from_config(cls, cfg: Optional[Dict] = None) -> 'EnvironmentReading':
        env = (cfg or {}).get('environment', {})
        defaults = cls()
        return cls(
            temperature=float(env.get('temperature', defaults.temperature)),
            humidity=float(env.get('humidity', defaults.humidity)),
            light=float(env.get('light', defaults.light)),
            co2=float(env.get('co2', defaults.co2)),
            ph=float(env.get('ph', defaults.ph)),
        )

    def with_effect(self, effect: EnvironmentEffect) -> 'EnvironmentReading':
        """Add the numeric factor deltas of `effect`. Efficiencies are not readings."""
        return replace(
            self,
            temperature=self.temperature + effect.temperature,
            humidity=self.humidity + effect.humidity,
            light=self.light + effect.light,
            co2=self.co2 + effect.co2,
        )

    def as_dict(self) -> Dict[str, float]:
        return {
            'temperature': self.temperature,
            'humidity': self.humidity,
            'light': self.light,
            'co2': self.co2,
            'ph': self.ph,
        }
