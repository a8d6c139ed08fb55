# farmsim/effects.py
"""
Equipment effect values and their aggregate.

Each entry of an effect vector is tagged once, when the catalog is built:
`Numeric(delta)` entries scale with wear/level and sum across devices,
`Categorical(value)` entries pass through unscaled and the last device
to report one wins.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Numeric:
    delta: float

    def scaled(self, factor: float) -> 'Numeric':
        return Numeric(self.delta * factor)


@dataclass(frozen=True)
class Categorical:
    value: Any

    def scaled(self, factor: float) -> 'Categorical':
        return self


EffectValue = Union[Numeric, Categorical]


def tag_effect(raw) -> EffectValue:
    """Wrap a raw config value; bools are categorical, not numbers."""
    if isinstance(raw, (Numeric, Categorical)):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return Numeric(float(raw))
    return Categorical(raw)


# Keys an aggregate tracks, with their neutral starting value.
KNOWN_EFFECTS = {
    'light': 0.0,
    'temperature': 0.0,
    'humidity': 0.0,
    'co2': 0.0,
    'nutrient_efficiency': 1.0,
    'water_efficiency': 1.0,
}


class EnvironmentEffect:
    """Composite delta produced by one or more devices at a query point."""

    def __init__(self):
        self._entries: Dict[str, EffectValue] = {k: Numeric(v) for k, v in KNOWN_EFFECTS.items()}

    def merge(self, key: str, value: EffectValue, weight: float = 1.0) -> None:
        """Fold one device contribution in. Unknown keys are ignored."""
        if key not in self._entries:
            return
        if isinstance(value, Categorical):
            self._entries[key] = value
            return
        current = self._entries[key]
        base = current.delta if isinstance(current, Numeric) else 0.0
        self._entries[key] = Numeric(base + value.delta * weight)

    def get(self, key: str) -> Optional[EffectValue]:
        return self._entries.get(key)

    def numeric(self, key: str) -> float:
        """Numeric value of `key`; the neutral default if it is categorical."""
        entry = self._entries[key]
        if isinstance(entry, Numeric):
            return entry.delta
        return KNOWN_EFFECTS[key]

    @property
    def light(self) -> float:
        return self.numeric('light')

    @property
    def temperature(self) -> float:
        return self.numeric('temperature')

    @property
    def humidity(self) -> float:
        return self.numeric('humidity')

    @property
    def co2(self) -> float:
        return self.numeric('co2')

    @property
    def nutrient_efficiency(self) -> float:
        return self.numeric('nutrient_efficiency')

    @property
    def water_efficiency(self) -> float:
        return self.numeric('water_efficiency')

    def as_dict(self) -> Dict[str, Any]:
        return {
            k: v.delta if isinstance(v, Numeric) else v.value
            for k, v in self._entries.items()
        }

    def __repr__(self):
        return f"EnvironmentEffect({self.as_dict()})"
