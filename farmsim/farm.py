# farmsim/farm.py
"""
Farm
----
Glue a controller drives each tick: plants and devices on one grid (a slot
holds a plant, a device, or nothing), local readings composed from the
ambient baseline plus the device delta at each plant, and daily upkeep
priced with the CostModel and booked per spending category.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from farmsim.catalog import Catalog, get_catalog
from farmsim.costs import CostModel
from farmsim.environment import EnvironmentReading
from farmsim.hardware import CostLine, DeviceRegistry, Position
from farmsim.plant import Organism
from farmsim.results import ActionResult, HarvestResult

logger = logging.getLogger(__name__)


@dataclass
class DayReport:
    day: int
    operating_cost: float = 0.0
    electricity_cost: float = 0.0
    power_usage: float = 0.0
    breakdown: List[CostLine] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return self.operating_cost + self.electricity_cost


class Farm:
    def __init__(self, cfg: Optional[Dict] = None, catalog: Optional[Catalog] = None, rng=None):
        cfg = cfg or {}
        self.catalog = catalog or get_catalog()
        self.rng = rng

        layout = cfg.get('demo', {})
        self.width = int(layout.get('width', 8))
        self.height = int(layout.get('height', 6))

        self.ambient = EnvironmentReading.from_config(cfg)
        self.cost_model = CostModel.from_config(cfg)
        self.registry = DeviceRegistry(catalog=self.catalog)
        self.plants: Dict[Position, Organism] = {}

        categories = sorted({spec.category for spec in self.catalog.equipment.values()})
        self.spending_by_category = {c: {'install': 0.0, 'operating': 0.0} for c in categories}

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_free(self, x: int, y: int) -> bool:
        return Position(x, y) not in self.plants and (x, y) not in self.registry

    def plant_at(self, x: int, y: int) -> Optional[Organism]:
        return self.plants.get(Position(x, y))

    # Placement -----------------------------------------------------------
    def plant(self, x: int, y: int, variety: str = 'basic', unlock_level: int = 1) -> ActionResult:
        if not self.in_bounds(x, y):
            return ActionResult.fail("Slot is outside the farm")
        if not self.is_free(x, y):
            return ActionResult.fail("Slot is already occupied")
        spec = self.catalog.varieties.get(variety)
        if spec is None or unlock_level < spec.unlock_level:
            return ActionResult.fail("Plant variety not yet unlocked")

        organism = Organism(x, y, variety, catalog=self.catalog, rng=self.rng)
        self.plants[Position(x, y)] = organism
        logger.info("%s seed planted at %s", variety, (x, y))
        return ActionResult.ok(f"{variety.capitalize()} seed planted", cost=spec.seed_cost,
                               details={'plant': organism})

    def remove_plant(self, x: int, y: int) -> ActionResult:
        organism = self.plants.pop(Position(x, y), None)
        if organism is None:
            return ActionResult.fail("No plant at this location")
        return ActionResult.ok("Plant removed")

    def install(self, device_type: str, x: int, y: int, unlock_level: int = 1) -> ActionResult:
        if not self.in_bounds(x, y):
            return ActionResult.fail("Slot is outside the farm")
        if Position(x, y) in self.plants:
            return ActionResult.fail("Slot already occupied")
        result = self.registry.install(device_type, x, y, unlock_level)
        if result.success:
            category = self.catalog.equipment[device_type].category
            self.spending_by_category[category]['install'] += result.cost
        return result

    def remove_equipment(self, x: int, y: int) -> ActionResult:
        return self.registry.remove(x, y)

    # Care ----------------------------------------------------------------
    def water(self, x: int, y: int) -> ActionResult:
        organism = self.plant_at(x, y)
        if organism is None:
            return ActionResult.fail("No plant at this location")
        return organism.water_plant()

    def feed(self, x: int, y: int) -> ActionResult:
        organism = self.plant_at(x, y)
        if organism is None:
            return ActionResult.fail("No plant at this location")
        return organism.feed()

    def harvest(self, x: int, y: int) -> HarvestResult:
        organism = self.plant_at(x, y)
        if organism is None:
            return HarvestResult.fail("No plant at this location")
        result = organism.harvest()
        if result.success:
            del self.plants[Position(x, y)]
            logger.info("Harvested %s plant at %s for %s", result.quality, (x, y), result.revenue)
        return result

    # Simulation ----------------------------------------------------------
    def reading_at(self, x: int, y: int) -> EnvironmentReading:
        return self.ambient.with_effect(self.registry.effects_near((x, y)))

    def tick(self, day: int) -> None:
        """Advance every plant one tick with its local reading."""
        for pos, organism in self.plants.items():
            effect = self.registry.effects_near(pos)
            organism.apply_equipment_effects({'nutrient_efficiency': effect.nutrient_efficiency})
            organism.advance(self.ambient.with_effect(effect), day)

    def end_of_day(self, day: int) -> DayReport:
        upkeep = self.registry.advance_day(day)
        electricity = self.cost_model.daily_power_cost(upkeep.power_usage)
        for line in upkeep.breakdown:
            category = self.catalog.equipment[line.type].category
            self.spending_by_category[category]['operating'] += line.cost

        return DayReport(
            day=day,
            operating_cost=upkeep.operating_cost,
            electricity_cost=electricity,
            power_usage=upkeep.power_usage,
            breakdown=upkeep.breakdown,
        )
