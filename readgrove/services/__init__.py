"""Services layer for ReadGrove session logic."""

from .session_engine import SessionEngine
from .milestones import GrowthMilestoneTracker
from .publisher import SessionPublisher

__all__ = [
    "SessionEngine",
    "GrowthMilestoneTracker",
    "SessionPublisher",
]
