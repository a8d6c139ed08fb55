# farmsim/catalog.py
"""
Catalog
-------
Read-only lookup tables built from the YAML config: equipment specs, plant
varieties, default environmental preferences and the growth stage table.

Tables are built once per config path and handed out as `MappingProxyType`
views over frozen dataclasses, so instances can share them without copying.
"""

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from farmsim.config import load_config, DEFAULT_PATH
from farmsim.effects import EffectValue, tag_effect

GLOBAL_COVERAGE = 999.0

STRESS_FACTORS = ('temperature', 'humidity', 'light', 'co2')


@dataclass(frozen=True)
class FactorRange:
    """Preferred band for one environmental factor."""
    min: float
    optimal: float
    max: float


@dataclass(frozen=True)
class StageRequirement:
    days: float
    min_water: float
    min_nutrients: float


@dataclass(frozen=True)
class VarietySpec:
    name: str
    yield_min: float
    yield_max: float
    seed_cost: float
    unlock_level: int


@dataclass(frozen=True)
class EquipmentSpec:
    """Immutable per-type equipment data"""
    type: str
    name: str
    cost: float
    operating_cost: float
    power_usage: float  # watts
    coverage: Optional[float]  # slots; >= GLOBAL_COVERAGE means everywhere
    effects: Mapping[str, EffectValue]
    durability: float  # rating, drives the wear rate
    maintenance_interval: int  # days
    unlock_level: int
    category: str
    description: str = ''

    @property
    def is_global(self) -> bool:
        return self.coverage is not None and self.coverage >= GLOBAL_COVERAGE


@dataclass(frozen=True)
class Catalog:
    equipment: Mapping[str, EquipmentSpec]
    varieties: Mapping[str, VarietySpec]
    preferences: Mapping[str, FactorRange]
    stages: Mapping[str, StageRequirement]
    water_amount: float
    water_cost: float
    feed_amount: float
    feed_cost: float
    initial_water: float
    initial_nutrients: float
    disease_resistance: Tuple[float, float]

    def variety(self, name: str) -> VarietySpec:
        """Variety lookup; unknown names fall back to 'basic'."""
        return self.varieties.get(name) or self.varieties['basic']


def build_catalog(cfg: Dict) -> Catalog:
    equipment = {}
    for etype, raw in cfg.get('equipment', {}).items():
        effects = {k: tag_effect(v) for k, v in (raw.get('effects') or {}).items()}
        coverage = raw.get('coverage')
        equipment[etype] = EquipmentSpec(
            type=etype,
            name=raw.get('name', etype),
            cost=float(raw['cost']),
            operating_cost=float(raw.get('operating_cost', 0.0)),
            power_usage=float(raw.get('power_usage', 0.0)),
            coverage=float(coverage) if coverage is not None else None,
            effects=MappingProxyType(effects),
            durability=float(raw.get('durability', 100.0)),
            maintenance_interval=int(raw.get('maintenance_interval', 30)),
            unlock_level=int(raw.get('unlock_level', 1)),
            category=raw.get('category', 'misc'),
            description=raw.get('description', ''),
        )

    varieties = {
        name: VarietySpec(
            name=name,
            yield_min=float(raw['yield_min']),
            yield_max=float(raw['yield_max']),
            seed_cost=float(raw.get('seed_cost', 0.0)),
            unlock_level=int(raw.get('unlock_level', 1)),
        )
        for name, raw in cfg.get('varieties', {}).items()
    }

    plant_cfg = cfg.get('plant', {})
    preferences = {
        factor: FactorRange(float(r['min']), float(r['optimal']), float(r['max']))
        for factor, r in plant_cfg.get('preferences', {}).items()
    }
    stages = {
        stage: StageRequirement(float(r['days']), float(r['min_water']), float(r['min_nutrients']))
        for stage, r in plant_cfg.get('stages', {}).items()
    }

    actions = cfg.get('actions', {})
    lo, hi = plant_cfg.get('disease_resistance', [0.7, 1.0])
    return Catalog(
        equipment=MappingProxyType(equipment),
        varieties=MappingProxyType(varieties),
        preferences=MappingProxyType(preferences),
        stages=MappingProxyType(stages),
        water_amount=float(actions.get('water', {}).get('amount', 40.0)),
        water_cost=float(actions.get('water', {}).get('cost', 5.0)),
        feed_amount=float(actions.get('feed', {}).get('amount', 50.0)),
        feed_cost=float(actions.get('feed', {}).get('cost', 10.0)),
        initial_water=float(plant_cfg.get('initial_water', 50.0)),
        initial_nutrients=float(plant_cfg.get('initial_nutrients', 50.0)),
        disease_resistance=(float(lo), float(hi)),
    )


@lru_cache(maxsize=None)
def get_catalog(path: str = DEFAULT_PATH) -> Catalog:
    """Catalog for the config at `path`, built on first use."""
    return build_catalog(load_config(path))
