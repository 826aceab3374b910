# FILE: pairing_core/moves.py
from __future__ import annotations
from itertools import permutations
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import NEW_LANE, PERSON, is_placed
from .models import Move, SessionState


def lane_occupants(current: SessionState, entity_type: str = PERSON) -> Dict[str, List[str]]:
    """Unlocked lane key -> keys of the entities of a type sitting in it."""
    lanes: Dict[str, List[str]] = {key: [] for key in current.unlocked_lane_keys()}
    for e in current.entities:
        if e.type == entity_type and is_placed(e.location) and e.location in lanes:
            lanes[e.location].append(e.key)
    return lanes


def get_moves(match: Optional[Sequence[Tuple[Sequence[str], str]]], lanes: Dict[str, List[str]]) -> List[Move]:
    """
    Turn a lane layout into the entities that actually have to move.

    Everyone bound for a new or empty lane moves; for an occupied lane only
    those not already in it do.
    """
    if match is None:
        return []
    moves: List[Move] = []
    for group, lane in match:
        occupants = lanes.get(lane, []) if lane != NEW_LANE else []
        entities = [
            key for key in group
            if lane == NEW_LANE or not occupants or key not in occupants
        ]
        if entities:
            moves.append(Move(lane=lane, entities=entities))
    return moves


def match_lanes(
    pairing: Sequence[Sequence[str]],
    lanes: Dict[str, List[str]],
) -> Optional[List[List[Tuple[Sequence[str], str]]]]:
    """
    Every way to lay `pairing` onto the given lanes where each lane is empty
    or keeps one of its occupants. None when no layout fits.
    """
    if not pairing or not lanes:
        return [[]]
    keys = list(lanes.keys())
    if len(pairing) < len(keys):
        return None
    layouts = []
    for ordered in permutations(pairing, len(keys)):
        layout = list(zip(ordered, keys))
        if all(not lanes[key] or any(p in pair for p in lanes[key]) for pair, key in layout):
            layouts.append(layout)
    return layouts or None
