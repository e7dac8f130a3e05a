# sleep_tracker/config/config_manager.py
import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'storage': {
        'data_dir': 'data/local_store',
    },
    'charts': {
        'minimum_scale': {
            'duration': 1,
            'score': 10,
        },
        'score_unit': 'pts',
        'output_dir': 'reports/charts',
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Central configuration manager"""

    def __init__(self, config_path=None):
        self.config_path = config_path or 'config/config.yaml'
        self.config = self._load_config()

    def _load_config(self):
        """Load configuration from file, layered over the defaults"""
        if not os.path.exists(self.config_path):
            logger.warning(f"Config file {self.config_path} not found, using defaults")
            return copy.deepcopy(DEFAULT_CONFIG)

        with open(self.config_path, 'r') as file:
            loaded = yaml.safe_load(file) or {}

        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {self.config_path} must contain a mapping")
        return _merge(DEFAULT_CONFIG, loaded)

    def get(self, key, default=None):
        """Look up a dotted key such as 'charts.minimum_scale.score'"""
        node = self.config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node
