"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the API layer (higher) and the domain/db layers (lower) use the model defined here to send to/receive from the Service.
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class GameModel:
    """Transport-safe representation of a game's scoring state used between API, Service, DB, and domain layers."""

    status: str
    home_score: int = 0
    away_score: int = 0
    current_inning: int = 1
    current_inning_half: str = "top"
    outs: int = 0
    home_inning_scores: list[int] = field(default_factory=list)
    away_inning_scores: list[int] = field(default_factory=list)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    notes: Optional[str] = None
