# FILE: pairing_core/scoring.py
"""
History-derived scores.

- score_matrix: exact integer pairing scores, newest observation wins
- track_score_ledger: decayed person x track co-occupancy ledger
- apply_affinities: soft exclusion of pairings a person wants to avoid
"""
from __future__ import annotations
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence
import numpy as np

from .constants import PERSON, TRACK, SOLO, MAX_TRACK_ROUNDS, is_placed
from .models import Entity, Round, SessionState


class RoundKeyError(ValueError):
    """A history round whose key is not a non-negative integer."""


class LaneGrouping(NamedTuple):
    left: List[str]
    right: List[str]


class ScoredRound(NamedTuple):
    score: int
    lanes: List[LaneGrouping]


def parse_round_key(key) -> int:
    text = str(key).strip()
    if not (text.isascii() and text.isdigit()):
        raise RoundKeyError(f"Round key must be a non-negative integer, got {key!r}")
    return int(text)


def latest_round(history: Sequence[Round]) -> int:
    if not history:
        return 0
    return parse_round_key(history[-1].key)


def _groups_by_lane(entities: Iterable[Entity]) -> Dict[str, List[Entity]]:
    groups: Dict[str, List[Entity]] = {}
    for e in entities:
        if is_placed(e.location):
            groups.setdefault(e.location, []).append(e)
    return groups


def pairing_history(history: Sequence[Round]) -> List[ScoredRound]:
    """Reduce rounds to people-by-lane groupings scored by age.

    A person alone in a lane is recorded next to the solo placeholder.
    """
    max_score = latest_round(history)
    out: List[ScoredRound] = []
    for rnd in history:
        score = max_score - parse_round_key(rnd.key)
        lanes = []
        people = [e for e in rnd.entities if e.type == PERSON]
        for members in _groups_by_lane(people).values():
            keys = [e.key for e in members]
            if len(keys) == 1:
                keys.append(SOLO)
            lanes.append(LaneGrouping(left=keys, right=keys))
        out.append(ScoredRound(score=score, lanes=lanes))
    return out


def assignment_history(history: Sequence[Round], left: str, right: str) -> List[ScoredRound]:
    """Reduce rounds to left-type x right-type lane groupings scored by age."""
    max_score = latest_round(history)
    out: List[ScoredRound] = []
    for rnd in history:
        score = max_score - parse_round_key(rnd.key)
        lanes = [
            LaneGrouping(
                left=[e.key for e in members if e.type == left],
                right=[e.key for e in members if e.type == right],
            )
            for members in _groups_by_lane(rnd.entities).values()
        ]
        out.append(ScoredRound(score=score, lanes=lanes))
    return out


def score_matrix(
    left: Sequence[str],
    right: Sequence[str],
    history: Sequence[ScoredRound],
    ceiling: int,
) -> np.ndarray:
    """
    Build a len(left) x len(right) matrix of Python ints.

    Cells start at `ceiling` (never seen together). Each recorded grouping
    overwrites its cells with the round score, or -1 on the diagonal; the last
    record processed wins, so history must be passed oldest first.
    """
    row = {k: i for i, k in enumerate(left)}
    col = {k: j for j, k in enumerate(right)}
    scores = np.full((len(left), len(right)), int(ceiling), dtype=object)

    for h in history:
        for lane in h.lanes:
            for l in lane.left:
                if l not in row:
                    continue
                for r in lane.right:
                    if r not in col:
                        continue
                    scores[row[l], col[r]] = int(h.score) if l != r else -1
    return scores


def apply_affinities(keys: Sequence[str], people: Sequence[Entity], scores: np.ndarray) -> np.ndarray:
    """Return a copy of `scores` with avoided pairings forced down to 0."""
    index = {k: i for i, k in enumerate(keys)}
    filtered = scores.copy()
    for person in people:
        if person.affinities is None or not person.affinities.none:
            continue
        if person.key not in index:
            continue
        avoid = person.affinities.none
        for other in people:
            if other.key == person.key or other.key not in index:
                continue
            if avoid & other.tags:
                i, j = index[person.key], index[other.key]
                filtered[i, j] = 0
                filtered[j, i] = 0
    return filtered


def merge_pair_scores(scores: np.ndarray, groups: Sequence[Sequence[int]]) -> np.ndarray:
    """One row per group of row indices: the element-wise sum of their rows."""
    merged = [scores[list(group)].sum(axis=0) for group in groups]
    if not merged:
        return np.zeros((0, scores.shape[1]), dtype=object)
    return np.array(merged, dtype=object).reshape(len(merged), scores.shape[1])


def ledger_ceiling(max_rounds: int = MAX_TRACK_ROUNDS) -> int:
    return sum(2 ** i for i in range(1, max_rounds + 1))


def track_score_ledger(
    current: SessionState,
    history: Optional[Sequence[Round]],
    max_rounds: int = MAX_TRACK_ROUNDS,
) -> Dict[str, Dict[str, int]]:
    """
    person -> track -> score. Starts at the sum of 2^1..2^N and loses
    2^(N - i) for each co-occupied lane in the i-th most recent round.
    """
    people = [p.key for p in current.candidates(PERSON)]
    tracks = [t.key for t in current.candidates(TRACK)]
    start = ledger_ceiling(max_rounds)
    ledger: Dict[str, Dict[str, int]] = {p: {t: start for t in tracks} for p in people}
    if not history or not people or not tracks:
        return ledger

    track_set = set(tracks)
    recent = list(history)[::-1][:max_rounds]
    for i, rnd in enumerate(recent):
        penalty = 2 ** (max_rounds - i)
        for members in _groups_by_lane(rnd.entities).values():
            in_people = [e.key for e in members if e.type == PERSON and e.key in ledger]
            in_tracks = [e.key for e in members if e.type == TRACK and e.key in track_set]
            for p in in_people:
                for t in in_tracks:
                    ledger[p][t] -= penalty
    return ledger
