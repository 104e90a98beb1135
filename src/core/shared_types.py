"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    SCHEDULED = "scheduled"
    WARMUP = "warmup"
    IN_PROGRESS = "in_progress"
    SUSPENDED = "suspended"
    FINAL = "final"


class InningHalf(StrEnum):
    TOP = "top"
    BOTTOM = "bottom"


# --- NOTE: the batting side follows from the half-inning. top = away team bats, bottom = home team bats.
class Team(StrEnum):
    HOME = "home"
    AWAY = "away"


class ActionKind(StrEnum):
    RUNS = "runs"
    OUTS = "outs"
    ADVANCE = "advance"
    START = "start"
    WARMUP = "warmup"
    SUSPEND = "suspend"
    END = "end"
    CORRECTION = "correction"
    UNDO = "undo"
