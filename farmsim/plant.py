# farmsim/plant.py
"""
Organism
--------
Growth/stress engine for a single cultivated plant.

Each `advance(reading, day)` runs one tick of the state machine:
stress scoring -> resource depletion -> growth -> health -> valuation ->
stage transition. Health, stress, water and nutrients live on 0-100.
"""

import math
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional

import numpy as np

from farmsim.catalog import Catalog, FactorRange, STRESS_FACTORS, get_catalog
from farmsim.environment import EnvironmentReading
from farmsim.results import ActionResult, HarvestResult

logger = logging.getLogger(__name__)

# Stress model
FACTOR_STRESS_CAP = 50.0
OUT_OF_RANGE_SCALE = 100.0
OFF_OPTIMAL_SCALE = 20.0
WATER_GRACE_DAYS = 2
WATER_NEGLECT_PER_DAY = 10.0
FEED_GRACE_DAYS = 3
FEED_NEGLECT_PER_DAY = 8.0

# Depletion (per tick)
WATER_BASE_USE = 8.0
WATER_STRESS_USE = 0.1
NUTRIENT_BASE_USE = 5.0
NUTRIENT_SIZE_USE = 2.0
FLOWERING_NUTRIENT_USE = 5.0

DISEASE_BASE_CHANCE = 0.002
DISEASE_DAMAGE = 15.0


class Stage(IntEnum):
    SEED = 0
    SEEDLING = 1
    YOUNG = 2
    MATURE = 3
    FLOWERING = 4
    READY = 5

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def is_terminal(self) -> bool:
        return self is Stage.READY


STAGE_VALUE = {
    Stage.SEED: 0.0,
    Stage.SEEDLING: 0.1,
    Stage.YOUNG: 0.3,
    Stage.MATURE: 0.6,
    Stage.FLOWERING: 0.9,
    Stage.READY: 1.0,
}

QUALITY_GRADES = (
    (1.4, 'Premium'),
    (1.1, 'High'),
    (0.9, 'Good'),
    (0.6, 'Average'),
)


def quality_grade(multiplier: float) -> str:
    for threshold, grade in QUALITY_GRADES:
        if multiplier >= threshold:
            return grade
    return 'Low'


def factor_stress(value: float, pref: FactorRange) -> float:
    """Stress (0-50) for one factor against its preferred band.

    Outside [min, max] the distance is scaled by the violated bound; inside,
    distance from optimal is scaled by the optimal-to-bound span at a much
    gentler slope.
    """
    if value < pref.min:
        stress = (pref.min - value) / (abs(pref.min) or 1.0) * OUT_OF_RANGE_SCALE
    elif value > pref.max:
        stress = (value - pref.max) / (abs(pref.max) or 1.0) * OUT_OF_RANGE_SCALE
    elif value < pref.optimal:
        stress = (pref.optimal - value) / (pref.optimal - pref.min) * OFF_OPTIMAL_SCALE
    elif value > pref.optimal:
        stress = (value - pref.optimal) / (pref.max - pref.optimal) * OFF_OPTIMAL_SCALE
    else:
        stress = 0.0
    return float(np.clip(stress, 0.0, FACTOR_STRESS_CAP))


@dataclass(frozen=True)
class OrganismSnapshot:
    stage: str
    age: int
    health: int
    water: int
    nutrients: int
    stress: int
    progress: int
    value: int
    quality: str
    is_harvestable: bool
    is_dead: bool


class Organism:
    """A single plant tracked through its growth, health and value."""

    def __init__(self, x: int, y: int, variety: str = 'basic',
                 catalog: Optional[Catalog] = None, rng=None,
                 base_yield: Optional[float] = None,
                 disease_resistance: Optional[float] = None):
        self.catalog = catalog or get_catalog()
        # np.random module or a Generator; both expose uniform() and random()
        self.rng = rng if rng is not None else np.random

        self.x = x
        self.y = y
        self.variety = variety

        self.stage = Stage.SEED
        self.age = 0
        self.stage_progress = 0.0

        self.health = 100.0
        self.stress = 0.0
        self.size = 1.0

        self.water = self.catalog.initial_water
        self.nutrients = self.catalog.initial_nutrients
        self.last_watered = 0
        self.last_fed = 0

        self.preferences: Mapping[str, FactorRange] = self.catalog.preferences
        self.stage_requirements = self.catalog.stages

        # Sampled once; restored, never re-sampled, on rehydration
        if base_yield is None:
            spec = self.catalog.variety(variety)
            base_yield = self.rng.uniform(spec.yield_min, spec.yield_max)
        self.base_yield = float(base_yield)
        if disease_resistance is None:
            lo, hi = self.catalog.disease_resistance
            disease_resistance = self.rng.uniform(lo, hi)
        self.disease_resistance = float(disease_resistance)

        self.quality_multiplier = 1.0
        self.value = 0.0

        self.is_dead = False
        self.is_harvestable = False

        self.equipment_effects: Dict[str, float] = {
            'light': 0.0,
            'temperature': 0.0,
            'humidity': 0.0,
            'co2': 0.0,
            'nutrient_efficiency': 1.0,
        }

    @property
    def position(self):
        return (self.x, self.y)

    def requirement(self):
        return self.stage_requirements[self.stage.key]

    # Tick ----------------------------------------------------------------
    def advance(self, reading: EnvironmentReading, day: int) -> None:
        if self.is_dead:
            return

        self.age = day
        self._score_stress(reading)
        self._deplete_resources()
        self._accumulate_growth()
        self._update_health()
        self._update_value()
        if self.is_dead:
            return
        self._check_stage_transition()

    def _score_stress(self, reading: EnvironmentReading) -> None:
        total = 0.0
        for factor in STRESS_FACTORS:
            current = getattr(reading, factor) + self.equipment_effects.get(factor, 0.0)
            total += factor_stress(current, self.preferences[factor])

        days_since_water = self.age - self.last_watered
        days_since_fed = self.age - self.last_fed
        if days_since_water > WATER_GRACE_DAYS:
            total += (days_since_water - WATER_GRACE_DAYS) * WATER_NEGLECT_PER_DAY
        if days_since_fed > FEED_GRACE_DAYS:
            total += (days_since_fed - FEED_GRACE_DAYS) * FEED_NEGLECT_PER_DAY

        self.stress = float(np.clip(total, 0.0, 100.0))

    def _deplete_resources(self) -> None:
        water_use = WATER_BASE_USE + self.stress * WATER_STRESS_USE
        self.water = float(np.clip(self.water - water_use, 0.0, 100.0))

        nutrient_use = NUTRIENT_BASE_USE + self.size * NUTRIENT_SIZE_USE
        if self.stage is Stage.FLOWERING:
            nutrient_use += FLOWERING_NUTRIENT_USE
        efficiency = self.equipment_effects.get('nutrient_efficiency', 1.0) or 1.0
        self.nutrients = float(np.clip(self.nutrients - nutrient_use / efficiency, 0.0, 100.0))

    def _accumulate_growth(self) -> None:
        req = self.requirement()
        rate = 1.0

        if self.water > req.min_water:
            rate += 0.5
        if self.nutrients > req.min_nutrients:
            rate += 0.5
        if self.stress < 20:
            rate += 0.3
        if self.health > 80:
            rate += 0.2

        if self.stress > 50:
            rate -= 0.4
        if self.health < 50:
            rate -= 0.3
        if self.water < req.min_water * 0.5:
            rate -= 0.5
        if self.nutrients < req.min_nutrients * 0.5:
            rate -= 0.3

        rate = max(0.1, rate)
        daily_target = 100.0 / req.days  # 0 for the terminal stage
        self.stage_progress = min(100.0, self.stage_progress + daily_target * rate)

    def _update_health(self) -> None:
        req = self.requirement()
        change = 0.0

        if self.stress < 20:
            change += 2.0
        elif self.stress > 60:
            change -= 3.0

        if self.water < req.min_water:
            change -= 4.0
        if self.nutrients < req.min_nutrients:
            change -= 2.0

        if self.rng.random() < DISEASE_BASE_CHANCE * (1.0 - self.disease_resistance):
            logger.debug("Disease struck plant at %s", self.position)
            change -= DISEASE_DAMAGE

        self.health = float(np.clip(self.health + change, 0.0, 100.0))
        if self.health <= 0.0:
            self.is_dead = True
            self.is_harvestable = False
            logger.info("Plant at %s died on day %s (stage=%s)", self.position, self.age, self.stage.key)

    def _update_value(self) -> None:
        quality = 1.0
        if self.health > 90:
            quality += 0.3
        elif self.health < 50:
            quality -= 0.4

        if self.stress < 10:
            quality += 0.2
        elif self.stress > 70:
            quality -= 0.5

        self.quality_multiplier = max(0.2, quality)
        self.value = self.base_yield * STAGE_VALUE[self.stage] * self.quality_multiplier * self.size

    def _check_stage_transition(self) -> None:
        if self.stage_progress < 100.0 or self.stage.is_terminal:
            return
        self.stage = Stage(self.stage + 1)
        self.stage_progress = 0.0
        if self.stage.is_terminal:
            self.is_harvestable = True
        logger.info("Plant at %s advanced to %s on day %s", self.position, self.stage.key, self.age)

    # Care actions ---------------------------------------------------------
    def apply_equipment_effects(self, effects: Mapping[str, Any]) -> None:
        """
        Store equipment bonuses consumed by the next `advance`.

        Factor bonuses stored here are added on top of the reading. `Farm`
        already folds the factor deltas into the reading it passes through
        `EnvironmentReading.with_effect`, so it hands over only
        `nutrient_efficiency`. Pass factor keys only with an ambient reading.
        """
        for key, value in effects.items():
            if key in self.equipment_effects and isinstance(value, (int, float)):
                self.equipment_effects[key] = float(value)

    def water_plant(self) -> ActionResult:
        if self.is_dead:
            return ActionResult.fail("Plant is dead")
        amount = self.catalog.water_amount
        self.water = min(100.0, self.water + amount)
        self.last_watered = self.age
        return ActionResult.ok("Plant watered", cost=self.catalog.water_cost,
                               details={'effect': f"+{amount:g} water level"})

    def feed(self) -> ActionResult:
        if self.is_dead:
            return ActionResult.fail("Plant is dead")
        amount = self.catalog.feed_amount
        self.nutrients = min(100.0, self.nutrients + amount)
        self.last_fed = self.age
        return ActionResult.ok("Nutrients added", cost=self.catalog.feed_cost,
                               details={'effect': f"+{amount:g} nutrient level"})

    def harvest(self) -> HarvestResult:
        if self.is_dead or not self.is_harvestable:
            return HarvestResult.fail("Plant not ready for harvest")
        grade = self.quality_grade()
        return HarvestResult(
            success=True,
            message=f"Harvested {grade} quality plant",
            revenue=int(math.floor(self.value)),
            quality=grade,
            weight=round(self.base_yield * self.quality_multiplier / 10.0, 1),
        )

    # Status --------------------------------------------------------------
    def quality_grade(self) -> str:
        return quality_grade(self.quality_multiplier)

    def health_status(self) -> str:
        if self.health > 80:
            return 'healthy'
        if self.health > 50:
            return 'warning'
        return 'danger'

    def snapshot(self) -> OrganismSnapshot:
        return OrganismSnapshot(
            stage=self.stage.key,
            age=self.age,
            health=int(math.floor(self.health)),
            water=int(math.floor(self.water)),
            nutrients=int(math.floor(self.nutrients)),
            stress=int(math.floor(self.stress)),
            progress=int(math.floor(self.stage_progress)),
            value=int(math.floor(self.value)),
            quality=self.quality_grade(),
            is_harvestable=self.is_harvestable,
            is_dead=self.is_dead,
        )

    # Persistence ---------------------------------------------------------
    def to_state(self) -> Dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'variety': self.variety,
            'stage': self.stage.key,
            'stage_progress': self.stage_progress,
            'age': self.age,
            'health': self.health,
            'stress': self.stress,
            'size': self.size,
            'water': self.water,
            'nutrients': self.nutrients,
            'last_watered': self.last_watered,
            'last_fed': self.last_fed,
            'base_yield': self.base_yield,
            'disease_resistance': self.disease_resistance,
            'quality_multiplier': self.quality_multiplier,
            'value': self.value,
            'is_dead': self.is_dead,
            'is_harvestable': self.is_harvestable,
            'equipment_effects': dict(self.equipment_effects),
        }

    @classmethod
    def from_state(cls, data: Mapping[str, Any], catalog: Optional[Catalog] = None,
                   rng=None) -> 'Organism':
        plant = cls(
            data['x'], data['y'], data.get('variety', 'basic'),
            catalog=catalog, rng=rng,
            base_yield=data['base_yield'],
            disease_resistance=data['disease_resistance'],
        )
        plant.stage = Stage[str(data.get('stage', 'seed')).upper()]
        plant.stage_progress = float(data.get('stage_progress', 0.0))
        plant.age = int(data.get('age', 0))
        plant.health = float(data.get('health', 100.0))
        plant.stress = float(data.get('stress', 0.0))
        plant.size = float(data.get('size', 1.0))
        plant.water = float(data.get('water', plant.water))
        plant.nutrients = float(data.get('nutrients', plant.nutrients))
        plant.last_watered = int(data.get('last_watered', 0))
        plant.last_fed = int(data.get('last_fed', 0))
        plant.quality_multiplier = float(data.get('quality_multiplier', 1.0))
        plant.value = float(data.get('value', 0.0))
        plant.is_dead = bool(data.get('is_dead', False))
        plant.is_harvestable = bool(data.get('is_harvestable', False))
        plant.apply_equipment_effects(data.get('equipment_effects', {}))
        return plant

    def __repr__(self):
        return (f"Organism(pos={self.position}, variety={self.variety!r}, stage={self.stage.key}, "
                f"health={self.health:.1f}, stress={self.stress:.1f})")
