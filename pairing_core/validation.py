# FILE: pairing_core/validation.py
from __future__ import annotations
from typing import List, Sequence, Set

from .constants import UNASSIGNED, OUT
from .models import Round, SessionState
from .scoring import RoundKeyError, parse_round_key


def validate_state(current: SessionState) -> List[str]:
    """Problems with a session snapshot, as readable messages."""
    errs: List[str] = []
    lane_keys = [lane.key for lane in current.lanes]
    dupes = sorted({k for k in lane_keys if lane_keys.count(k) > 1})
    if dupes:
        errs.append(f"Duplicate lane keys: {', '.join(dupes)}")

    seen: Set[str] = set()
    dupe_entities: List[str] = []
    known_lanes = set(lane_keys)
    for e in current.entities:
        if e.key in seen:
            dupe_entities.append(e.key)
        seen.add(e.key)
        if e.location not in (UNASSIGNED, OUT) and e.location not in known_lanes:
            errs.append(f"{e.key} is located in unknown lane {e.location}")
    if dupe_entities:
        errs.append(f"Duplicate entity keys: {', '.join(dupe_entities)}")
    return errs


def validate_history(history: Sequence[Round]) -> List[str]:
    errs: List[str] = []
    previous = None
    for i, rnd in enumerate(history):
        try:
            key = parse_round_key(rnd.key)
        except RoundKeyError as exc:
            errs.append(f"Round {i + 1}: {exc}")
            continue
        if previous is not None and key <= previous:
            errs.append(f"Round {i + 1}: key {key} does not follow {previous}")
        previous = key
    return errs
