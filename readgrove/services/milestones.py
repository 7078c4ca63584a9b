"""Decorative growth milestones derived from engine snapshots."""

import logging
from typing import Callable, Optional

from pubsub import pub

from ..models.events import SessionSnapshot, GrowthMilestone
from .publisher import SNAPSHOT_TOPIC, publish_milestone

logger = logging.getLogger(__name__)

# (stage, growth percentage that must be exceeded)
STAGES = (
    ("sprout", 5.0),
    ("grow1", 40.0),
    ("grow2", 70.0),
)


class GrowthMilestoneTracker:
    """Emits each growth stage once per tree.

    Listens to engine snapshots and never feeds anything back into the
    engine. A tree completion is reported as the ``complete`` stage.
    """

    def __init__(self,
                 on_milestone: Callable[[GrowthMilestone], None] = publish_milestone,
                 snapshot_topic: str = SNAPSHOT_TOPIC):
        self.on_milestone = on_milestone
        self.snapshot_topic = snapshot_topic
        self.last_milestone = 0.0
        self.trees_seen = 0
        self._subscribed = False

    def subscribe(self) -> None:
        if not self._subscribed:
            pub.subscribe(self.on_snapshot, self.snapshot_topic)
            self._subscribed = True

    def unsubscribe(self) -> None:
        if self._subscribed:
            pub.unsubscribe(self.on_snapshot, self.snapshot_topic)
            self._subscribed = False

    def on_snapshot(self, snapshot: SessionSnapshot) -> None:
        milestone = self.observe(snapshot.growth_percentage, snapshot.stats.trees_planted)
        if milestone:
            logger.info(f"Growth milestone: {milestone.stage} ({milestone.growth_percentage:.0f}%)")
            self.on_milestone(milestone)

    def observe(self, growth: float, trees_planted: int) -> Optional[GrowthMilestone]:
        """Return the milestone newly reached by this reading, if any."""
        if trees_planted < self.trees_seen:
            # Stats were reset for a new session
            self.trees_seen = trees_planted
            self.last_milestone = 0.0

        if trees_planted > self.trees_seen:
            self.trees_seen = trees_planted
            self.last_milestone = 0.0
            return GrowthMilestone(stage="complete", growth_percentage=100.0,
                                   trees_planted=trees_planted)

        if growth < self.last_milestone and growth < 10.0:
            self.last_milestone = 0.0

        for stage, threshold in STAGES:
            if growth > threshold and self.last_milestone < threshold:
                self.last_milestone = threshold
                return GrowthMilestone(stage=stage, growth_percentage=growth,
                                       trees_planted=trees_planted)
        return None
