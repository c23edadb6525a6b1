"""Centralized configuration loading for jstidy.

This module provides utilities for loading and accessing configuration from
jstidy.json with support for environment variable fallbacks and default values.

Example jstidy.json::

    {
        "rewrite": {"max_passes": 10, "rules_file": ".jstidy-rules.yaml"},
        "patterns": {"multi_line_kinds": ["IfStatement", "ForStatement"]},
        "output": {"indent": 2, "quotes": "double", "brace_style": "expand"}
    }
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "jstidy.json"
ENV_PREFIX = "JSTIDY"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from JSON file.

    Returns empty dict if file doesn't exist or is invalid.

    Args:
        config_path: Path to jstidy.json file (default: "jstidy.json")

    Returns:
        Configuration dictionary, or empty dict if file not found/invalid
    """
    path = Path(config_path)

    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return {}

    if not isinstance(config, dict):
        logger.warning(f"Ignoring config file {config_path}: top level is not an object")
        return {}
    return config


def get_config_value(
    keys: List[str], default: Any = None, config: Optional[Dict[str, Any]] = None
) -> Any:
    """Get nested configuration value with fallback to environment variable.

    Supports nested keys like ["rewrite", "max_passes"]. Also checks
    environment variables as fallback (e.g., JSTIDY_REWRITE_MAX_PASSES for
    rewrite.max_passes). Environment values are strings; they are converted
    to the type of ``default`` when it is an int, and split on commas when it
    is a list.

    Args:
        keys: List of keys to traverse (e.g., ["output", "indent"])
        default: Default value if key not found
        config: Optional config dict (uses load_config() if not provided)

    Returns:
        Configuration value, or default if not found
    """
    if config is None:
        config = load_config()

    value: Any = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
            if value is None:
                break
        else:
            return default

    if value is not None:
        return value

    env_key = "_".join([ENV_PREFIX] + [k.upper() for k in keys])
    env_value = os.environ.get(env_key)
    if env_value is not None:
        logger.debug(f"Using {env_key} from environment")
        return _coerce(env_value, default, env_key)

    return default


def _coerce(raw: str, default: Any, env_key: str) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Ignoring non-integer {env_key}={raw!r}")
            return default
    if isinstance(default, (list, tuple)):
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw
