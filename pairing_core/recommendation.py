# FILE: pairing_core/recommendation.py
from __future__ import annotations
from typing import Dict, List, Optional, Sequence
import logging
import numpy as np

from .constants import PERSON, TRACK, SOLO, MAX_TRACK_ROUNDS, UNASSIGNED
from .enumerator import AssignmentEnumerator, LaneGroup
from .hungarian import hungarian, make_cost_matrix
from .models import Move, Round, SessionState
from .moves import get_moves, lane_occupants
from .scoring import (
    apply_affinities, assignment_history, latest_round, merge_pair_scores,
    pairing_history, score_matrix, track_score_ledger,
)

logger = logging.getLogger(__name__)


def is_feasible(current: SessionState) -> bool:
    """More unlocked lanes than the people can fill, even as solos, is infeasible."""
    lanes = len(current.unlocked_lane_keys())
    return 2 * lanes - 1 <= len(current.candidates(PERSON))


def lanes_to_tracks(current: SessionState) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for t in current.candidates(TRACK):
        out.setdefault(t.location, []).append(t.key)
    return out


def score_assignment(
    group: Sequence[str],
    lane: str,
    scores: np.ndarray,
    key_index: Dict[str, int],
    tracks_by_lane: Dict[str, List[str]],
    ledger: Dict[str, Dict[str, int]],
) -> int:
    """
    Pair score times (1 + the ledger of both members against every track
    currently in the lane). A lone person scores -1 as the pair score.
    """
    first = group[0]
    other = group[1] if len(group) > 1 else first
    if other == first:
        pair_score = -1
    else:
        pair_score = scores[key_index[first], key_index[other]]

    track_score = 1
    for t in tracks_by_lane.get(lane, []):
        track_score += ledger[first][t] + ledger[other][t]
    return track_score * pair_score


def total_score(
    assignment: Sequence[LaneGroup],
    scores: np.ndarray,
    key_index: Dict[str, int],
    tracks_by_lane: Dict[str, List[str]],
    ledger: Dict[str, Dict[str, int]],
) -> int:
    return sum(
        (score_assignment(g.people, g.lane, scores, key_index, tracks_by_lane, ledger) for g in assignment),
        0,
    )


def pairing_scores(current: SessionState, history: Optional[Sequence[Round]]):
    """People keys (solo appended when odd) and their filtered score matrix."""
    people = current.candidates(PERSON)
    keys: List[str] = [p.key for p in people]
    if len(keys) % 2 == 1:
        keys.append(SOLO)
    history = list(history or [])
    ceiling = latest_round(history) + 1
    raw = score_matrix(keys, keys, pairing_history(history), ceiling)
    return keys, apply_affinities(keys, people, raw)


def calculate_moves_to_best_pairing(
    current: SessionState,
    history: Optional[Sequence[Round]] = None,
    rng: Optional[np.random.Generator] = None,
    max_track_rounds: int = MAX_TRACK_ROUNDS,
) -> Optional[List[Move]]:
    """
    Exhaustively search pairings and return the moves to the best one.

    Returns None when there are more unlocked lanes than people to fill them,
    and an empty list when nothing needs to change.
    """
    if not is_feasible(current):
        logger.info(
            "no recommendation: %d unlocked lanes for %d people",
            len(current.unlocked_lane_keys()), len(current.candidates(PERSON)),
        )
        return None
    if not current.candidates(PERSON):
        return []

    keys, scores = pairing_scores(current, history)
    key_index = {k: i for i, k in enumerate(keys)}
    tracks_by_lane = lanes_to_tracks(current)
    ledger = track_score_ledger(current, history, max_rounds=max_track_rounds)

    best: Optional[List[LaneGroup]] = None
    best_score = 0
    seen = 0
    for assignment in AssignmentEnumerator(current, rng=rng):
        seen += 1
        score = total_score(assignment, scores, key_index, tracks_by_lane, ledger)
        if best is None or score > best_score:
            best, best_score = assignment, score

    if best is None:
        return []
    logger.debug("best of %d candidate assignments scores %d", seen, best_score)
    return get_moves([(g.people, g.lane) for g in best], lane_occupants(current, PERSON))


def calculate_moves_to_best_assignment(
    left: str,
    right: str,
    current: SessionState,
    history: Optional[Sequence[Round]] = None,
) -> List[Move]:
    """
    Place `right` entities onto the lanes already holding `left` entities,
    maximizing total history score with an optimal bipartite matching.
    """
    lane_keys = set(current.unlocked_lane_keys())
    left_entities = [e for e in current.entities if e.type == left and e.location in lane_keys]
    right_entities = [
        e for e in current.entities
        if e.type == right and (e.location == UNASSIGNED or e.location in lane_keys)
    ]
    if not left_entities or not right_entities:
        return []

    left_keys = [e.key for e in left_entities]
    right_keys = [e.key for e in right_entities]
    history = list(history or [])
    scores = score_matrix(
        left_keys, right_keys,
        assignment_history(history, left, right),
        latest_round(history) + 1,
    )

    # left entities sharing a lane move as one unit
    by_lane: Dict[str, List[int]] = {}
    for i, e in enumerate(left_entities):
        by_lane.setdefault(e.location, []).append(i)
    groups = list(by_lane.items())
    merged = merge_pair_scores(scores, [idx for _, idx in groups])

    # repeat lanes cyclically so every right entity can be matched
    if len(groups) < len(right_keys):
        cycle = [i % len(groups) for i in range(len(right_keys))]
        groups = [groups[i] for i in cycle]
        merged = merged[cycle]

    assign = hungarian(make_cost_matrix(merged))
    location = {e.key: e.location for e in right_entities}
    moves: List[Move] = []
    for row, col in enumerate(assign):
        if col < 0:
            continue
        lane = groups[row][0]
        if location[right_keys[col]] != lane:
            moves.append(Move(lane=lane, entities=[right_keys[col]]))
    return moves
