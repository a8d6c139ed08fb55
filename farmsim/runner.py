# farmsim/runner.py
"""
Fixed-length demo run: plants and equips the `demo` layout from the config,
waters and feeds every plant each day, ticks, closes the day and harvests
whatever is ready. Returns one record per day.
"""

import logging
from typing import Dict, List, Optional

from farmsim.catalog import Catalog, build_catalog
from farmsim.farm import Farm

logger = logging.getLogger(__name__)


def setup_farm(cfg: Dict, catalog: Optional[Catalog] = None, rng=None):
    """Build a Farm from the config's demo layout. Returns (farm, setup_cost)."""
    catalog = catalog or build_catalog(cfg)
    farm = Farm(cfg, catalog=catalog, rng=rng)
    layout = cfg.get('demo', {})
    unlock_level = int(layout.get('unlock_level', 1))
    variety = layout.get('variety', 'basic')

    spent = 0.0
    for device_type, x, y in layout.get('equipment', []):
        res = farm.install(device_type, x, y, unlock_level)
        if res.success:
            spent += res.cost
        else:
            logger.warning("Could not install %s at %s: %s", device_type, (x, y), res.message)

    for x, y in layout.get('plants', []):
        res = farm.plant(x, y, variety, unlock_level)
        if res.success:
            spent += res.cost
        else:
            logger.warning("Could not plant at %s: %s", (x, y), res.message)

    return farm, spent


def run_simulation(cfg: Dict, days: int = 30, catalog: Optional[Catalog] = None,
                   rng=None) -> List[Dict]:
    farm, spent = setup_farm(cfg, catalog=catalog, rng=rng)
    cash = float(cfg.get('demo', {}).get('cash', 10000.0)) - spent
    logger.info("Setup: %d plants, %d devices, spent %.2f", len(farm.plants), len(farm.registry), spent)

    records = []
    for day in range(1, days + 1):
        supplies = 0.0
        for pos in list(farm.plants):
            for res in (farm.water(*pos), farm.feed(*pos)):
                if res.success:
                    supplies += res.cost

        farm.tick(day)
        report = farm.end_of_day(day)

        revenue = 0
        harvested = 0
        for pos, organism in list(farm.plants.items()):
            if organism.is_harvestable:
                res = farm.harvest(*pos)
                if res.success:
                    revenue += res.revenue
                    harvested += 1
            elif organism.is_dead:
                farm.remove_plant(*pos)

        cash += revenue - supplies - report.total_cost
        alive = [p for p in farm.plants.values() if not p.is_dead]
        avg_health = sum(p.health for p in alive) / len(alive) if alive else 0.0
        avg_stress = sum(p.stress for p in alive) / len(alive) if alive else 0.0

        record = {
            'day': day,
            'plants': len(farm.plants),
            'harvested': harvested,
            'revenue': revenue,
            'supplies': supplies,
            'operating_cost': report.operating_cost,
            'electricity_cost': report.electricity_cost,
            'power_usage': report.power_usage,
            'avg_health': avg_health,
            'avg_stress': avg_stress,
            'cash': cash,
        }
        records.append(record)
        logger.info(
            "Day %03d | plants=%d harvested=%d revenue=%d | upkeep=%.2f power=%.2f (%.0fW) | "
            "health=%.1f stress=%.1f | cash=%.2f",
            day, record['plants'], harvested, revenue, report.operating_cost,
            report.electricity_cost, report.power_usage, avg_health, avg_stress, cash,
        )

    return records
