# FILE: pairing_core/enumerator.py
"""
Exhaustive, lazy enumeration of total lane assignments.

A total assignment pairs every person (one solo allowed when the population
is odd) and attaches each group to a lane:

- a resident lane keeps one of its current occupants (its anchor) and takes a
  partner from the pool of released lanemates, unassigned people and the solo
- the remaining people are paired among themselves and placed onto empty
  lanes, then onto NEW_LANE once the empty lanes are used up

The search is a depth-first walk over explicit frames; every iteration starts
from a fresh stack so the enumerator can be consumed more than once.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterator, List, NamedTuple, Optional, Tuple
import logging
import numpy as np

from .constants import PERSON, SOLO, NEW_LANE, UNASSIGNED
from .models import SessionState

logger = logging.getLogger(__name__)

ANCHOR, PAIR, PLACE, PARTNER, DONE = range(5)


class LaneGroup(NamedTuple):
    people: Tuple[str, ...]
    lane: str


class _Kept(NamedTuple):
    lane: str
    anchor: str
    forbidden: FrozenSet[str]  # lanemates released ahead of the anchor


@dataclass(frozen=True)
class _Frame:
    stage: int
    cursor: int = 0  # resident lane, pool or pair position
    pool: Tuple[str, ...] = ()
    kept: Tuple[_Kept, ...] = ()
    pairs: Tuple[Tuple[str, str], ...] = ()
    free_lanes: Tuple[str, ...] = ()
    groups: Tuple[Tuple[Tuple[str, str], str], ...] = ()


class AssignmentEnumerator:
    """Iterable over every distinct total assignment for a session snapshot."""

    def __init__(self, current: SessionState, rng: Optional[np.random.Generator] = None):
        lane_keys = current.unlocked_lane_keys()
        people = current.candidates(PERSON)
        if rng is not None and people:
            people = [people[i] for i in rng.permutation(len(people))]

        self.resident: List[Tuple[str, Tuple[str, ...]]] = []
        unassigned: List[str] = []
        by_lane: Dict[str, List[str]] = {}
        for p in people:
            if p.location == UNASSIGNED:
                unassigned.append(p.key)
            else:
                by_lane.setdefault(p.location, []).append(p.key)
        self.resident = [(lane, tuple(keys)) for lane, keys in by_lane.items()]

        if len(people) % 2 == 1:
            unassigned.append(SOLO)
        self.unassigned: Tuple[str, ...] = tuple(unassigned)
        self.population = len(people)
        self.total_lanes = (len(people) + 1) // 2
        self.empty_lanes: Tuple[str, ...] = tuple(k for k in lane_keys if k not in by_lane)

    @property
    def new_pair_count(self) -> int:
        return self.total_lanes - len(self.resident)

    def __iter__(self) -> Iterator[List[LaneGroup]]:
        if self.population == 0 or self.new_pair_count < 0:
            return
        stack: List[_Frame] = [_Frame(stage=ANCHOR, pool=self.unassigned)]
        yielded = 0
        while stack:
            frame = stack.pop()
            if frame.stage == DONE:
                yielded += 1
                yield self._finish(frame)
                continue
            # reversed so children are visited in generation order
            stack.extend(reversed(self._expand(frame)))
        logger.debug("enumerated %d assignments for %d people", yielded, self.population)

    # -- frame expansion -------------------------------------------------
    def _expand(self, frame: _Frame) -> List[_Frame]:
        if frame.stage == ANCHOR:
            return self._anchors(frame)
        if frame.stage == PAIR:
            return self._new_pairs(frame)
        if frame.stage == PLACE:
            return self._placements(frame)
        return self._partners(frame)

    def _anchors(self, frame: _Frame) -> List[_Frame]:
        if frame.cursor == len(self.resident):
            return [replace(frame, stage=PAIR, cursor=0)]
        lane, occupants = self.resident[frame.cursor]
        children = []
        for i, anchor in enumerate(occupants):
            released = occupants[:i] + occupants[i + 1:]
            children.append(replace(
                frame,
                cursor=frame.cursor + 1,
                pool=frame.pool + released,
                kept=frame.kept + (_Kept(lane, anchor, frozenset(occupants[:i])),),
            ))
        return children

    def _new_pairs(self, frame: _Frame) -> List[_Frame]:
        # pool[:cursor] is held back for resident partners; pool[cursor] is
        # either paired with someone after it or held back as well
        needed = self.new_pair_count - len(frame.pairs)
        if needed == 0:
            return [replace(frame, stage=PLACE, cursor=0, free_lanes=self.empty_lanes)]
        ahead = len(frame.pool) - frame.cursor
        if ahead < 2 * needed:
            return []
        a = frame.pool[frame.cursor]
        children = [
            replace(
                frame,
                pool=tuple(k for k in frame.pool if k != a and k != b),
                pairs=frame.pairs + ((a, b),),
            )
            for b in frame.pool[frame.cursor + 1:]
        ]
        if ahead - 1 >= 2 * needed:
            children.append(replace(frame, cursor=frame.cursor + 1))
        return children

    def _placements(self, frame: _Frame) -> List[_Frame]:
        if frame.cursor == len(frame.pairs):
            return [replace(frame, stage=PARTNER, cursor=0)]
        pair = frame.pairs[frame.cursor]
        children = [
            replace(
                frame,
                cursor=frame.cursor + 1,
                free_lanes=tuple(l for l in frame.free_lanes if l != lane),
                groups=frame.groups + ((pair, lane),),
            )
            for lane in frame.free_lanes
        ]
        if len(frame.pairs) - frame.cursor > len(frame.free_lanes):
            children.append(replace(
                frame,
                cursor=frame.cursor + 1,
                groups=frame.groups + ((pair, NEW_LANE.value),),
            ))
        return children

    def _partners(self, frame: _Frame) -> List[_Frame]:
        if frame.cursor == len(frame.kept):
            return [replace(frame, stage=DONE)] if not frame.pool else []
        lane, anchor, forbidden = frame.kept[frame.cursor]
        return [
            replace(
                frame,
                cursor=frame.cursor + 1,
                pool=tuple(k for k in frame.pool if k != partner),
                groups=frame.groups + (((anchor, partner), lane),),
            )
            for partner in frame.pool
            if partner not in forbidden
        ]

    def _finish(self, frame: _Frame) -> List[LaneGroup]:
        resident = frame.groups[len(frame.pairs):]
        fresh = frame.groups[:len(frame.pairs)]
        return [
            LaneGroup(tuple(k for k in pair if k != SOLO), lane)
            for pair, lane in resident + fresh
        ]


def all_possible_assignments(current: SessionState, rng: Optional[np.random.Generator] = None):
    """Lazily yield every total assignment for `current`."""
    return iter(AssignmentEnumerator(current, rng=rng))
