"""
farmsim
-------
Growth/stress simulation for cultivated plants under an equipment-shaped
environment, with device wear and tiered power-cost economics.
"""

from farmsim.config import load_config, get_default_config
from farmsim.environment import EnvironmentReading
from farmsim.effects import Numeric, Categorical, EnvironmentEffect
from farmsim.results import ActionResult, HarvestResult
from farmsim.plant import Organism, Stage
from farmsim.hardware import Device, DeviceRegistry
from farmsim.costs import CostModel
from farmsim.farm import Farm

__all__ = [
    'load_config', 'get_default_config',
    'EnvironmentReading', 'Numeric', 'Categorical', 'EnvironmentEffect',
    'ActionResult', 'HarvestResult',
    'Organism', 'Stage',
    'Device', 'DeviceRegistry',
    'CostModel', 'Farm',
]
