# farmsim/config.py
"""
Config loader for the farm simulation.

Provides a single entry `load_config(path=None)` that reads YAML config from
`data/defaults.yaml` by default and returns a nested dict. Also exposes
`get_default_config()` for quick access.

When `seed` is present in the config the global random seeds are set
(Python and NumPy), which makes sampled plant traits reproducible.
"""

import os
import random
import logging
import yaml
import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'data', 'defaults.yaml'))


def load_config(path=None):
    """Load YAML config and return a dict. Also sets global seeds if `seed` key present."""
    p = path or DEFAULT_PATH
    if not os.path.exists(p):
        raise FileNotFoundError(f"Config file not found: {p}")
    with open(p, 'r') as f:
        cfg = yaml.safe_load(f) or {}

    seed = cfg.get('seed', None)
    if seed is not None:
        set_seeds(seed)
    return cfg


def get_default_config():
    return load_config(DEFAULT_PATH)


def set_seeds(seed):
    logger.info("Setting global random seed = %s", seed)
    random.seed(seed)
    np.random.seed(seed)
