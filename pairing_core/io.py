# pairing_core/io.py
from __future__ import annotations
import io
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd
import yaml

from .models import Entity, Move, Round, SessionState

# one row per entity per round
HISTORY_COLUMNS = ["round", "key", "type", "location"]
MOVE_COLUMNS = ["lane", "entity"]


def _read_yaml(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_state_yaml(path: str) -> SessionState:
    obj = _read_yaml(path) or {}
    if not isinstance(obj, dict):
        raise ValueError(f"State file {path} must hold a mapping with 'entities' and 'lanes'.")
    return SessionState(**obj)


def load_history_yaml(path: str) -> List[Round]:
    obj = _read_yaml(path) or []
    if not isinstance(obj, list):
        raise ValueError(f"History file {path} must hold a list of rounds.")
    return [Round(**r) for r in obj]


def _split_tags(value) -> List[str]:
    if not isinstance(value, str):
        return []
    return [t.strip() for t in value.split(";") if t.strip()]


def load_history_csv(file_like) -> List[Round]:
    """Rounds from a CSV with one row per entity, kept in file order of first appearance."""
    df = pd.read_csv(file_like, dtype=str)
    missing = [c for c in HISTORY_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    df = df.dropna(subset=["round", "key"])
    df["round"] = df["round"].str.strip()
    df["type"] = df["type"].fillna("person").str.strip()
    df["location"] = df["location"].fillna("unassigned").str.strip()

    rounds: Dict[str, List[Entity]] = {}
    for _, r in df.iterrows():
        rounds.setdefault(r["round"], []).append(Entity(
            key=str(r["key"]).strip(),
            type=r["type"],
            location=r["location"],
            tags=set(_split_tags(r.get("tags"))),
        ))
    return [Round(key=k, entities=v) for k, v in rounds.items()]


def moves_to_dataframe(moves: Sequence[Move]) -> pd.DataFrame:
    rows = [{"lane": m.lane, "entity": key} for m in moves for key in m.entities]
    return pd.DataFrame(rows, columns=MOVE_COLUMNS)


def save_moves_csv_bytes(moves: Sequence[Move]) -> bytes:
    buf = io.StringIO()
    moves_to_dataframe(moves).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


def score_frame(keys: Sequence[str], scores: np.ndarray) -> pd.DataFrame:
    """Label a square score matrix with its keys for inspection."""
    labels = [getattr(k, "value", k) for k in keys]
    return pd.DataFrame(scores, index=labels, columns=labels)
