# farmsim/hardware.py
"""
Equipment model for the growing area:
- Device: one installed piece of equipment with wear, level and an effect vector
- DeviceRegistry: position-keyed devices, distance-weighted effect aggregation
  and daily upkeep accounting
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

import numpy as np

from farmsim.catalog import Catalog, EquipmentSpec, get_catalog
from farmsim.effects import EffectValue, EnvironmentEffect
from farmsim.results import ActionResult

logger = logging.getLogger(__name__)

MAX_LEVEL = 5
LEVEL_BONUS = 0.15
HIGH_DURABILITY_RATING = 80.0
SLOW_WEAR_PER_DAY = 0.5
FAST_WEAR_PER_DAY = 1.0
MAINTENANCE_RESTORE = 20.0
MAINTENANCE_COST_FRACTION = 0.1
UPGRADE_RESTORE = 10.0
UPGRADE_COST_FACTOR = 0.5
REFUND_FRACTION = 0.3
MIN_DISTANCE_WEIGHT = 0.3
DEFAULT_RADIUS = 2.0


class Position(NamedTuple):
    x: int
    y: int


class DailyUsage(NamedTuple):
    operating_cost: float
    power_usage: float  # watts


class CostLine(NamedTuple):
    type: str
    cost: float


@dataclass
class DailyUpkeep:
    """Registry-wide totals for one simulated day"""
    operating_cost: float = 0.0
    power_usage: float = 0.0
    breakdown: List[CostLine] = field(default_factory=list)


class Device:
    """Single installed piece of equipment"""

    def __init__(self, device_type: str, x: int, y: int, catalog: Optional[Catalog] = None):
        self.catalog = catalog or get_catalog()
        self.spec: EquipmentSpec = self.catalog.equipment[device_type]
        self.type = device_type
        self.x = x
        self.y = y

        self.active = True
        self.level = 1
        self.durability = 100.0

        self.total_operating_hours = 0
        self.maintenance_due = False
        self.last_maintenance_day = 0

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    @property
    def installation_cost(self) -> float:
        return self.spec.cost

    @property
    def daily_operating_cost(self) -> float:
        return self.spec.operating_cost

    def level_factor(self) -> float:
        return 1.0 + (self.level - 1) * LEVEL_BONUS

    def effective_output(self) -> Dict[str, EffectValue]:
        """
        Effect vector after wear and level scaling.

        Empty when the device is switched off or broken. Numeric entries
        scale by durability/100 and by the level factor; categorical entries
        pass through as-is.
        """
        if not self.active or self.durability <= 0:
            return {}
        factor = (self.durability / 100.0) * self.level_factor()
        return {key: value.scaled(factor) for key, value in self.spec.effects.items()}

    def advance_day(self, day: int) -> DailyUsage:
        if not self.active:
            return DailyUsage(0.0, 0.0)

        self.total_operating_hours += 24
        wear = SLOW_WEAR_PER_DAY if self.spec.durability > HIGH_DURABILITY_RATING else FAST_WEAR_PER_DAY
        self.durability = max(0.0, self.durability - wear)

        if day - self.last_maintenance_day >= self.spec.maintenance_interval:
            self.maintenance_due = True

        return DailyUsage(self.daily_operating_cost, self.spec.power_usage)

    def perform_maintenance(self, day: int) -> ActionResult:
        cost = math.floor(self.spec.cost * MAINTENANCE_COST_FRACTION)
        self.durability = min(100.0, self.durability + MAINTENANCE_RESTORE)
        self.maintenance_due = False
        self.last_maintenance_day = day
        logger.info("%s at %s maintained on day %s", self.spec.name, self.position, day)
        return ActionResult.ok(f"{self.spec.name} maintenance completed", cost=cost,
                               details={'durability_restored': MAINTENANCE_RESTORE})

    def upgrade(self) -> ActionResult:
        if self.level >= MAX_LEVEL:
            return ActionResult.fail("Equipment already at maximum level")

        cost = math.floor(self.spec.cost * self.level * UPGRADE_COST_FACTOR)
        self.level += 1
        self.durability = min(100.0, self.durability + UPGRADE_RESTORE)
        logger.info("%s at %s upgraded to level %d", self.spec.name, self.position, self.level)
        return ActionResult.ok(f"{self.spec.name} upgraded to level {self.level}", cost=cost,
                               details={'new_level': self.level})

    def set_active(self, flag: bool) -> None:
        self.active = bool(flag)

    def toggle(self) -> ActionResult:
        self.set_active(not self.active)
        state = 'activated' if self.active else 'deactivated'
        return ActionResult.ok(f"{self.spec.name} {state}", details={'active': self.active})

    def status(self) -> str:
        if self.durability <= 0:
            return 'broken'
        if self.maintenance_due:
            return 'maintenance_required'
        if self.durability < 30:
            return 'poor_condition'
        if not self.active:
            return 'inactive'
        return 'operational'

    def details(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'name': self.spec.name,
            'description': self.spec.description,
            'level': self.level,
            'durability': int(math.floor(self.durability)),
            'active': self.active,
            'installation_cost': self.installation_cost,
            'daily_operating_cost': self.daily_operating_cost,
            'power_usage': self.spec.power_usage,
            'coverage': self.spec.coverage,
            'status': self.status(),
            'maintenance_due': self.maintenance_due,
            'total_operating_hours': self.total_operating_hours,
        }

    # Persistence ---------------------------------------------------------
    def to_state(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'x': self.x,
            'y': self.y,
            'active': self.active,
            'level': self.level,
            'durability': self.durability,
            'total_operating_hours': self.total_operating_hours,
            'maintenance_due': self.maintenance_due,
            'last_maintenance_day': self.last_maintenance_day,
        }

    @classmethod
    def from_state(cls, data: Mapping[str, Any], catalog: Optional[Catalog] = None) -> 'Device':
        device = cls(data['type'], data['x'], data['y'], catalog=catalog)
        device.active = bool(data.get('active', True))
        device.level = int(np.clip(data.get('level', 1), 1, MAX_LEVEL))
        device.durability = float(np.clip(data.get('durability', 100.0), 0.0, 100.0))
        device.total_operating_hours = data.get('total_operating_hours', 0)
        device.maintenance_due = bool(data.get('maintenance_due', False))
        device.last_maintenance_day = data.get('last_maintenance_day', 0)
        return device

    def __repr__(self):
        return (f"Device({self.type!r}, pos={tuple(self.position)}, level={self.level}, "
                f"durability={self.durability:.1f}, active={self.active})")


class DeviceRegistry:
    """
    Owns every installed device, at most one per position.

    Features:
    1. Install/remove with slot exclusivity and unlock gating
    2. Distance-weighted aggregation of effects at a query point
    3. Daily wear and cost accounting across all devices
    """

    def __init__(self, catalog: Optional[Catalog] = None, default_radius: float = DEFAULT_RADIUS):
        self.catalog = catalog or get_catalog()
        self.default_radius = default_radius
        self.devices: Dict[Position, Device] = {}

        # Totals from the most recent advance_day
        self.total_power_usage = 0.0
        self.total_operating_costs = 0.0

    def __len__(self):
        return len(self.devices)

    def __iter__(self) -> Iterator[Device]:
        return iter(self.devices.values())

    def __contains__(self, pos) -> bool:
        return Position(*pos) in self.devices

    def get(self, x: int, y: int) -> Optional[Device]:
        return self.devices.get(Position(x, y))

    def install(self, device_type: str, x: int, y: int, unlock_level: int = 1) -> ActionResult:
        pos = Position(x, y)
        if pos in self.devices:
            logger.debug("Install of %s rejected: %s occupied", device_type, pos)
            return ActionResult.fail("Slot already occupied")

        spec = self.catalog.equipment.get(device_type)
        if spec is None or unlock_level < spec.unlock_level:
            logger.debug("Install of %s rejected at unlock level %s", device_type, unlock_level)
            return ActionResult.fail("Equipment not yet unlocked")

        device = Device(device_type, x, y, catalog=self.catalog)
        self.devices[pos] = device
        logger.info("%s installed at %s", spec.name, tuple(pos))
        return ActionResult.ok(f"{spec.name} installed", cost=spec.cost, details={'device': device})

    def remove(self, x: int, y: int) -> ActionResult:
        pos = Position(x, y)
        device = self.devices.get(pos)
        if device is None:
            return ActionResult.fail("No equipment at this location")

        del self.devices[pos]
        refund = math.floor(device.installation_cost * REFUND_FRACTION * (device.durability / 100.0))
        logger.info("%s removed from %s, refund %s", device.spec.name, tuple(pos), refund)
        return ActionResult.ok(f"{device.spec.name} removed", refund=refund)

    def restore(self, device: Device) -> None:
        """Place a rehydrated device; the slot must be free."""
        if device.position in self:
            raise ValueError(f"slot {tuple(device.position)} already holds a device")
        self.devices[device.position] = device

    def to_state(self) -> List[Dict[str, Any]]:
        return [device.to_state() for device in self]

    @classmethod
    def from_state(cls, states: List[Mapping[str, Any]], catalog: Optional[Catalog] = None,
                   default_radius: float = DEFAULT_RADIUS) -> 'DeviceRegistry':
        registry = cls(catalog=catalog, default_radius=default_radius)
        for data in states:
            registry.restore(Device.from_state(data, catalog=registry.catalog))
        return registry

    def effects_near(self, point: Tuple[float, float],
                     default_radius: Optional[float] = None) -> EnvironmentEffect:
        """
        Aggregate effect delta at `point`.

        A device contributes if the point is within its coverage, or if it
        has global coverage. Global devices apply at full strength; others
        at max(0.3, 1 - distance/coverage). Numeric entries sum across
        devices, categorical entries overwrite. `default_radius` stands in
        for devices whose spec declares no coverage.
        """
        radius = self.default_radius if default_radius is None else default_radius
        px, py = point
        aggregate = EnvironmentEffect()

        for pos, device in self.devices.items():
            spec = device.spec
            coverage = spec.coverage if spec.coverage is not None else radius
            distance = float(np.hypot(px - pos.x, py - pos.y))
            if not (spec.is_global or distance <= coverage):
                continue

            if spec.is_global:
                weight = 1.0
            elif coverage > 0:
                weight = max(MIN_DISTANCE_WEIGHT, 1.0 - distance / coverage)
            else:
                weight = 1.0

            for key, value in device.effective_output().items():
                aggregate.merge(key, value, weight)

        return aggregate

    def advance_day(self, day: int) -> DailyUpkeep:
        upkeep = DailyUpkeep()
        for device in self.devices.values():
            usage = device.advance_day(day)
            upkeep.operating_cost += usage.operating_cost
            upkeep.power_usage += usage.power_usage
            upkeep.breakdown.append(CostLine(device.type, usage.operating_cost))

        self.total_operating_costs = upkeep.operating_cost
        self.total_power_usage = upkeep.power_usage
        logger.debug("Day %s upkeep: operating=%.2f power=%.0fW over %d devices",
                     day, upkeep.operating_cost, upkeep.power_usage, len(self.devices))
        return upkeep

    def list_all(self) -> List[Dict[str, Any]]:
        return [dict(x=pos.x, y=pos.y, **device.details()) for pos, device in self.devices.items()]

    def shop_inventory(self, unlock_level: int = 1) -> List[Dict[str, Any]]:
        """Catalog entries available at `unlock_level`."""
        items = []
        for etype, spec in self.catalog.equipment.items():
            if unlock_level < spec.unlock_level:
                continue
            items.append({
                'type': etype,
                'name': spec.name,
                'description': spec.description,
                'cost': spec.cost,
                'operating_cost': spec.operating_cost,
                'power_usage': spec.power_usage,
                'coverage': spec.coverage,
                'unlock_level': spec.unlock_level,
                'category': spec.category,
            })
        return items
