# FILE: pairing_core/constants.py
from __future__ import annotations
from enum import Enum


class Location(str, Enum):
    """Entity locations that are not lane keys."""
    UNASSIGNED = "unassigned"
    OUT = "out"


class Placeholder(str, Enum):
    """Synthetic keys produced by the engine itself."""
    SOLO = "<solo>"          # partner of the odd person out
    NEW_LANE = "new-lane"    # lane the caller still has to create


UNASSIGNED = Location.UNASSIGNED
OUT = Location.OUT
SOLO = Placeholder.SOLO
NEW_LANE = Placeholder.NEW_LANE

PERSON = "person"
TRACK = "track"

# --- Track ledger window ---
MAX_TRACK_ROUNDS = 10


def is_placed(location: str) -> bool:
    """True when a location names a lane rather than a sentinel."""
    return location != UNASSIGNED and location != OUT
