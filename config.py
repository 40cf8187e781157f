"""Configuration loading for joymapper

Config is a small YAML file; anything missing falls back to the defaults:

    transformer:
      observed_device_cap: 200
    buttonmap:
      cache_ttl_ms: 2000
    logging:
      level: INFO
"""
import logging
import os
from dataclasses import dataclass

import yaml

LOG = logging.getLogger("joymapper.config")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    observed_device_cap: int = 200
    cache_ttl_ms: int = 2000
    log_level: str = "INFO"


def load_config(path: str = None) -> Config:
    """Load config from a YAML file, falling back to defaults if it is missing or malformed."""
    config = Config()
    if not path:
        return config
    if not os.path.isfile(path):
        LOG.debug("No config file at %s, using defaults", path)
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        LOG.warning("Malformed config at %s, using defaults: %s", path, e)
        return config

    if not isinstance(data, dict):
        LOG.warning("Malformed config at %s, using defaults: expected a mapping", path)
        return config

    transformer = data.get("transformer") or {}
    buttonmap = data.get("buttonmap") or {}
    log_cfg = data.get("logging") or {}
    try:
        config.observed_device_cap = int(transformer.get("observed_device_cap", config.observed_device_cap))
        config.cache_ttl_ms = int(buttonmap.get("cache_ttl_ms", config.cache_ttl_ms))
    except (AttributeError, TypeError, ValueError) as e:
        LOG.warning("Invalid value in %s, using defaults: %s", path, e)
        return Config()

    level = str(log_cfg.get("level", config.log_level)).upper()
    if level in LOG_LEVELS:
        config.log_level = level
    else:
        LOG.warning("Unknown log level %r in %s, using %s", level, path, config.log_level)

    LOG.debug("Loaded config from %s: %s", path, config)
    return config
