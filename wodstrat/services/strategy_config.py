"""Loads analyzer thresholds from strategy.yaml."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from wodstrat.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache()
def load_strategy_config(path: str | None = None) -> dict[str, Any]:
    """Read the whole threshold file once per process."""
    config_path = Path(path or get_settings().strategy_config_path)
    if not config_path.exists():
        logger.warning("Strategy config %s not found - analyzers will use defaults", config_path)
        return {}

    with config_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_section(name: str, defaults: dict[str, Any]) -> dict[str, Any]:
    """Return one analyzer's section, or ``defaults`` when it is missing."""
    section = load_strategy_config().get(name, {})
    if not section:
        logger.warning("No %s config found in strategy.yaml - using defaults", name)
        return defaults
    return section
