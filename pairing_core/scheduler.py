# pairing_core/scheduler.py
from __future__ import annotations
from typing import Optional, Sequence
import logging

from .config import make_rng
from .constants import NEW_LANE, PERSON, TRACK, UNASSIGNED
from .models import EngineConfig, Recommendation, Round, SessionState
from .recommendation import calculate_moves_to_best_assignment, calculate_moves_to_best_pairing

logger = logging.getLogger(__name__)


def _apply_moves(current: SessionState, moves) -> SessionState:
    """Snapshot with the moved entities relocated; anyone bound for a new lane is unassigned."""
    target = {
        key: UNASSIGNED.value if m.lane == NEW_LANE else m.lane
        for m in moves for key in m.entities
    }
    entities = [
        e.model_copy(update={"location": target.get(e.key, e.location)})
        for e in current.entities
    ]
    return SessionState(entities=entities, lanes=current.lanes)


def recommend(
    current: SessionState,
    history: Optional[Sequence[Round]] = None,
    config: Optional[EngineConfig] = None,
) -> Recommendation:
    config = config or EngineConfig()
    moves = calculate_moves_to_best_pairing(
        current, history,
        rng=make_rng(config),
        max_track_rounds=config.max_track_rounds,
    )
    if moves is None:
        return Recommendation(
            error="More unlocked lanes than people to fill them; unlock fewer lanes or add people."
        )
    if not config.assign_tracks:
        return Recommendation(moves=moves)

    placed = _apply_moves(current, moves)
    tracks = calculate_moves_to_best_assignment(PERSON, TRACK, placed, history)
    logger.debug("%d pairing moves, %d track moves", len(moves), len(tracks))
    return Recommendation(moves=moves, tracks=tracks)
