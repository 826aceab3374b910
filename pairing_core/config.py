# pairing_core/config.py
from __future__ import annotations
import os
import textwrap
from typing import Any, Dict, Optional

import numpy as np
import yaml

from .constants import MAX_TRACK_ROUNDS
from .models import EngineConfig

# ===== Engine defaults =====
DEFAULT_CONFIG: Dict[str, Any] = {
    "max_track_rounds": MAX_TRACK_ROUNDS,  # rounds feeding the track ledger
    "shuffle": False,                      # shuffle people before enumerating
    "random_seed": None,
    "assign_tracks": False,                # also place tracks onto the new lanes
}

DEFAULT_CONFIG_YAML = textwrap.dedent("""\
max_track_rounds: 10
shuffle: false
random_seed:
assign_tracks: false
""")


def load_config(path: Optional[str] = None, **overrides) -> EngineConfig:
    """Defaults, then the YAML file if given, then keyword overrides."""
    values = dict(DEFAULT_CONFIG)
    if path:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must hold a mapping.")
        unknown = sorted(set(data) - set(DEFAULT_CONFIG))
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        values.update(data)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return EngineConfig(**values)


def make_rng(config: EngineConfig) -> Optional[np.random.Generator]:
    if not config.shuffle:
        return None
    return np.random.default_rng(config.random_seed)


def ensure_config_exists(path: str) -> bool:
    """Write the default config to `path` unless a file is already there."""
    if os.path.exists(path):
        return False
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_CONFIG_YAML)
    return True
