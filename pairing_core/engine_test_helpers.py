"""
Internal helpers for tests (not imported by the engine).
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence

from .constants import NEW_LANE
from .models import Affinities, Entity, Lane, Move, Round, SessionState


def person(key: str, location: str = "unassigned", tags: Iterable[str] = (), avoid: Iterable[str] = ()) -> Entity:
    avoid = set(avoid)
    return Entity(
        key=key, type="person", location=location, tags=set(tags),
        affinities=Affinities(none=avoid) if avoid else None,
    )


def track(key: str, location: str = "unassigned") -> Entity:
    return Entity(key=key, type="track", location=location)


def quick_state(entities: Sequence[Entity], lanes: Sequence[str], locked: Sequence[str] = ()) -> SessionState:
    return SessionState(
        entities=list(entities),
        lanes=[Lane(key=k, locked=k in locked) for k in lanes],
    )


def quick_round(key, lanes: Dict[str, Sequence[str]], tracks: Optional[Dict[str, Sequence[str]]] = None) -> Round:
    """A round from lane -> people keys (and lane -> track keys)."""
    entities: List[Entity] = []
    for lane, keys in lanes.items():
        entities.extend(person(k, lane) for k in keys)
    for lane, keys in (tracks or {}).items():
        entities.extend(track(k, lane) for k in keys)
    return Round(key=str(key), entities=entities)


def apply_moves(current: SessionState, moves: Sequence[Move]) -> SessionState:
    """Relocate moved entities, creating lanes for NEW_LANE moves."""
    lanes = list(current.lanes)
    target: Dict[str, str] = {}
    for i, m in enumerate(moves):
        lane = m.lane
        if lane == NEW_LANE:
            lane = f"new-{i}"
            lanes.append(Lane(key=lane))
        for key in m.entities:
            target[key] = lane
    entities = [e.model_copy(update={"location": target.get(e.key, e.location)}) for e in current.entities]
    return SessionState(entities=entities, lanes=lanes)
