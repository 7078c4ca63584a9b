"""Session publisher module for pub/sub event publishing."""

import logging
from pubsub import pub
from ..models.events import SessionSnapshot, SessionEvent, GrowthMilestone

logger = logging.getLogger(__name__)

SNAPSHOT_TOPIC = "session.snapshot"
EVENT_TOPIC = "session.event"
MILESTONE_TOPIC = "session.milestone"


class SessionPublisher:
    """Publishes engine snapshots and lifecycle events using pubsub.pub."""

    def __init__(self,
                 snapshot_topic: str = SNAPSHOT_TOPIC,
                 event_topic: str = EVENT_TOPIC):
        """Initialize session publisher.

        Args:
            snapshot_topic: Pub/sub topic for state snapshots
            event_topic: Pub/sub topic for lifecycle events
        """
        self.snapshot_topic = snapshot_topic
        self.event_topic = event_topic
        logger.info(f"SessionPublisher initialized with topics: {snapshot_topic}, {event_topic}")

    def publish_snapshot(self, snapshot: SessionSnapshot) -> None:
        pub.sendMessage(self.snapshot_topic, snapshot=snapshot)

    def publish_event(self, event: SessionEvent) -> None:
        """Publish a lifecycle event to the pub/sub topic.

        Args:
            event: SessionEvent to publish
        """
        pub.sendMessage(self.event_topic, event=event)
        logger.debug(f"Published session event: {event.event_type} {event.metadata}")


def publish_milestone(milestone: GrowthMilestone, topic: str = MILESTONE_TOPIC) -> None:
    pub.sendMessage(topic, milestone=milestone)
