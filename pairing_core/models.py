# pairing_core/models.py
from __future__ import annotations
from typing import List, Literal, Optional, Set
from pydantic import BaseModel, Field, field_validator

from .constants import UNASSIGNED, MAX_TRACK_ROUNDS


class Affinities(BaseModel):
    none: Set[str] = Field(default_factory=set)  # tags this person avoids


class Entity(BaseModel):
    key: str
    type: Literal["person", "track"] = "person"
    location: str = UNASSIGNED.value  # lane key, "unassigned" or "out"
    tags: Set[str] = Field(default_factory=set)
    affinities: Optional[Affinities] = None

    @field_validator("location", mode="before")
    @classmethod
    def _plain_location(cls, v):
        # keep sentinels as their plain string value
        return getattr(v, "value", v)


class Lane(BaseModel):
    key: str
    locked: bool = False


class Round(BaseModel):
    key: str  # numeric, ascending oldest -> newest
    entities: List[Entity] = Field(default_factory=list)


class SessionState(BaseModel):
    entities: List[Entity] = Field(default_factory=list)
    lanes: List[Lane] = Field(default_factory=list)

    def unlocked_lane_keys(self) -> List[str]:
        return [lane.key for lane in self.lanes if not lane.locked]

    def candidates(self, entity_type: str) -> List[Entity]:
        """Entities of a type that are unassigned or sit in an unlocked lane."""
        lane_keys = set(self.unlocked_lane_keys())
        return [
            e for e in self.entities
            if e.type == entity_type and (e.location == UNASSIGNED or e.location in lane_keys)
        ]


class Move(BaseModel):
    lane: str  # lane key or "new-lane"
    entities: List[str] = Field(default_factory=list)

    @field_validator("lane", mode="before")
    @classmethod
    def _plain_lane(cls, v):
        return getattr(v, "value", v)


class Recommendation(BaseModel):
    moves: Optional[List[Move]] = None
    tracks: List[Move] = Field(default_factory=list)
    error: Optional[str] = None


class EngineConfig(BaseModel):
    max_track_rounds: int = MAX_TRACK_ROUNDS
    shuffle: bool = False
    random_seed: Optional[int] = None
    assign_tracks: bool = False

    @field_validator("max_track_rounds")
    @classmethod
    def _positive(cls, v):
        if v < 1:
            raise ValueError("max_track_rounds must be at least 1")
        return v
