# FILE: pairing_core/__init__.py
"""
pairing_core package: models, history scoring, assignment enumeration,
pairing and bipartite optimizers, move diffs, io and validation.
"""
from .models import Entity, Lane, Move, Recommendation, Round, SessionState, EngineConfig
from .recommendation import calculate_moves_to_best_assignment, calculate_moves_to_best_pairing
from .scheduler import recommend

__all__ = [
    "Entity",
    "Lane",
    "Move",
    "Recommendation",
    "Round",
    "SessionState",
    "EngineConfig",
    "calculate_moves_to_best_pairing",
    "calculate_moves_to_best_assignment",
    "recommend",
]
