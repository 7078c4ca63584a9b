"""Terminal session screen rendered from engine snapshots."""

import logging
import threading
from typing import Optional

from pubsub import pub
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.align import Align

from ..models.events import SessionSnapshot, GrowthMilestone
from ..models.session import SessionState, VolumeStatus
from ..services.publisher import SNAPSHOT_TOPIC, MILESTONE_TOPIC
from .keyboard_input import HELP_TEXT

logger = logging.getLogger(__name__)

METER_WIDTH = 40

STATUS_STYLE = {
    VolumeStatus.IDLE: ("Ready", "dim white"),
    VolumeStatus.CALIBRATING: ("Measuring background noise...", "yellow"),
    VolumeStatus.QUIET: ("A little louder...", "yellow"),
    VolumeStatus.GOOD: ("Great volume!", "bold green"),
    VolumeStatus.LOUD: ("Too loud! No shouting.", "bold red"),
}

HELPER_TEXT = {
    SessionState.CALIBRATING: "Stay quiet... measuring ambient noise",
    SessionState.PAUSED: "Paused",
    SessionState.READING: "Keep reading to plant a tree!",
    SessionState.COMPLETED: "Session complete. Press n to start a new one.",
}

MILESTONE_TEXT = {
    "sprout": "A sprout appears",
    "grow1": "The tree is growing",
    "grow2": "Almost there",
    "complete": "Tree planted!",
}


def format_duration(seconds: float) -> str:
    """Format seconds as m:ss."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def render_meter(snapshot: SessionSnapshot, width: int = METER_WIDTH) -> Text:
    """Draw the volume bar with target and scream markers."""
    filled = int(round(snapshot.current_meter_percent / 100 * width))
    target_pos = min(width - 1, int(snapshot.target_meter_percent / 100 * width))
    scream_pos = min(width - 1, int(snapshot.scream_meter_percent / 100 * width))
    _, style = STATUS_STYLE[snapshot.volume_status]

    bar = Text()
    for i in range(width):
        if i == target_pos:
            bar.append("|", style="green")
        elif i == scream_pos:
            bar.append("|", style="red")
        elif i < filled:
            bar.append("█", style=style)
        else:
            bar.append("░", style="grey50")
    bar.append(f" {round(snapshot.smoothed_db)} dB")
    return bar


def render_snapshot(snapshot: SessionSnapshot, milestone: Optional[GrowthMilestone] = None) -> Panel:
    """Build the full screen for one snapshot."""
    stats = snapshot.stats
    message, style = STATUS_STYLE[snapshot.volume_status]

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Trees", str(stats.trees_planted))
    table.add_row("Growth", f"{snapshot.growth_percentage:.0f}%")
    table.add_row("Reading time",
                  f"{format_duration(stats.valid_duration_seconds)} / {format_duration(stats.duration_seconds)}")
    table.add_row("Focus", f"{snapshot.focus_percentage}%")
    table.add_row("Too loud", format_duration(stats.too_loud_duration_seconds))
    table.add_row("Noise floor", f"{snapshot.noise_floor_db:.0f} dB (target {snapshot.target_db:.0f} dB)")

    parts = [
        Text(message, style=style),
        render_meter(snapshot),
        table,
    ]
    helper = HELPER_TEXT.get(snapshot.state)
    if helper:
        parts.append(Text(helper, style="dim"))
    if milestone:
        parts.append(Text(MILESTONE_TEXT.get(milestone.stage, milestone.stage), style="green"))
    if snapshot.error_message:
        parts.append(Text(snapshot.error_message, style="bold red"))
    parts.append(Align.center(Text(HELP_TEXT, style="dim italic")))

    return Panel(Group(*parts),
                 title=f"ReadGrove - {snapshot.state.value.upper()}",
                 border_style="green")


def render_summary(snapshot: SessionSnapshot) -> Panel:
    """Scorecard shown when a session completes."""
    stats = snapshot.stats
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Trees planted", justify="center")
    table.add_column("Valid reading", justify="center")
    table.add_column("Total time", justify="center")
    table.add_column("Focus", justify="center")
    table.add_row(str(stats.trees_planted),
                  format_duration(stats.valid_duration_seconds),
                  format_duration(stats.duration_seconds),
                  f"{snapshot.focus_percentage}%")
    return Panel(table, title="Reading summary", border_style="yellow")


class SessionScreen:
    """Live terminal view that follows the engine's published snapshots."""

    def __init__(self, initial: SessionSnapshot, console: Optional[Console] = None):
        self.console = console or Console()
        self.snapshot = initial
        self.milestone: Optional[GrowthMilestone] = None
        self._lock = threading.Lock()
        self._live: Optional[Live] = None

    def on_snapshot(self, snapshot: SessionSnapshot) -> None:
        with self._lock:
            if snapshot.stats.trees_planted < self.snapshot.stats.trees_planted:
                self.milestone = None
            self.snapshot = snapshot

    def on_milestone(self, milestone: GrowthMilestone) -> None:
        with self._lock:
            self.milestone = milestone

    def render(self) -> Panel:
        with self._lock:
            return render_snapshot(self.snapshot, self.milestone)

    def start(self, refresh_per_second: float = 10) -> None:
        pub.subscribe(self.on_snapshot, SNAPSHOT_TOPIC)
        pub.subscribe(self.on_milestone, MILESTONE_TOPIC)
        self._live = Live(self.render(), console=self.console,
                          refresh_per_second=refresh_per_second, transient=False)
        self._live.start()
        logger.info("Session screen started")

    def refresh(self) -> None:
        if self._live:
            self._live.update(self.render())

    def stop(self) -> None:
        if self._live:
            self._live.stop()
            self._live = None
        pub.unsubscribe(self.on_snapshot, SNAPSHOT_TOPIC)
        pub.unsubscribe(self.on_milestone, MILESTONE_TOPIC)
        logger.info("Session screen stopped")
