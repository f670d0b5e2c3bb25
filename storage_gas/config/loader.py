"""
Cost schedule loading.

Reads a gas cost schedule from YAML with strict validation.
"""

import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.cost_model import DEFAULT_COST_CONFIG, CostConfig

logger = logging.getLogger(__name__)

# Optional top-level section a schedule may be nested under
SECTION_KEY = "storage_gas"

# Environment variable the CLI reads a schedule path from
CONFIG_ENV_VAR = "STORAGE_GAS_CONFIG"


def load_cost_config(path: str) -> CostConfig:
    """Load and validate a cost schedule from a YAML file.

    Rates missing from the file keep their default values. Unknown keys
    and non-integer or negative rates are rejected rather than ignored,
    so a typo never silently falls back to a default.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated CostConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Cost config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")

    config = parse_cost_config(raw_config)
    logger.info("Loaded cost schedule from %s", config_path)
    return config


def parse_cost_config(raw_config: Any, base: CostConfig = DEFAULT_COST_CONFIG) -> CostConfig:
    """Build a CostConfig from an already-parsed mapping.

    Args:
        raw_config: Mapping of rate names to values, optionally nested
            under a top-level `storage_gas` key
        base: Schedule supplying rates the mapping leaves out

    Returns:
        Validated CostConfig

    Raises:
        ValueError: If configuration is invalid
    """
    if not isinstance(raw_config, dict):
        raise ValueError("Cost config must be a dictionary")

    if SECTION_KEY in raw_config:
        if len(raw_config) != 1:
            unknown_keys = set(raw_config.keys()) - {SECTION_KEY}
            raise ValueError(f"Unknown configuration keys: {unknown_keys}")
        raw_config = raw_config[SECTION_KEY]
        if not isinstance(raw_config, dict):
            raise ValueError(f"'{SECTION_KEY}' must be a dictionary")

    allowed_keys = {f.name for f in fields(CostConfig)}
    unknown_keys = set(raw_config.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown cost config keys: {unknown_keys}")

    rates: Dict[str, int] = {}
    for key, value in raw_config.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"'{key}' must be an integer")
        if value < 0:
            raise ValueError(f"'{key}' must be >= 0")
        rates[key] = value

    return replace(base, **rates)


def resolve_cost_config(path: Optional[str] = None) -> CostConfig:
    """Load the schedule at `path`, or the built-in default when no path is given."""
    if path is None:
        return DEFAULT_COST_CONFIG
    return load_cost_config(path)
