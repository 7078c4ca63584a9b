"""Main application entry point for ReadGrove."""

import sys
import time
import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import ReadGroveConfig
from .services.session_engine import SessionEngine
from .services.milestones import GrowthMilestoneTracker
from .ui.keyboard_input import create_input_handler
from .ui.session_screen import SessionScreen, render_summary
from .auto_mode import run_auto_mode

logger = logging.getLogger(__name__)


class ReadGroveApp:
    """Wires config, microphone, engine and terminal front end together."""

    def __init__(self, config_path: Optional[str] = None, log_level: Optional[str] = None):
        self.config = ReadGroveConfig(config_path)
        level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, level)
        self.should_exit = False

    def init(self) -> None:
        logger.info("Initializing services...")
        # PyAudio is only loaded when a real microphone is used
        from .audio.microphone import MicrophoneLevelSensor

        sample_rate = self.config.get('audio.sample_rate', 16000)
        chunk_size = self.config.get('audio.chunk_size', 2048)
        channels = self.config.get('audio.channels', 1)
        logger.info(f"Audio settings: {sample_rate}Hz, {chunk_size} samples/chunk, {channels} channels")

        self.sensor = MicrophoneLevelSensor(
            sample_rate=sample_rate,
            chunk_size=chunk_size,
            channels=channels,
        )
        self.engine = SessionEngine(self.sensor, self.config.get_game_settings())
        self.milestones = GrowthMilestoneTracker()
        self.milestones.subscribe()

    def handle_key(self, key: str) -> bool:
        """Dispatch one command key. Returns False to quit."""
        if key == 'q':
            self.should_exit = True
            return False
        if key == 'c':
            self.engine.start_calibration()
        elif key == 'r':
            self.engine.start_reading()
        elif key == 's':
            self.engine.stop()
        elif key == 'x':
            self.engine.reset()
        elif key == 'n':
            self.engine.continue_to_new_session()
        else:
            logger.debug(f"Ignoring key: {key!r}")
        return True

    def run_interactive(self) -> None:
        screen = SessionScreen(self.engine.snapshot())
        input_handler = create_input_handler(self.handle_key)
        screen.start()
        input_handler.start()
        try:
            while not self.should_exit:
                screen.refresh()
                time.sleep(0.1)
        finally:
            input_handler.stop()
            screen.stop()
            final = self.engine.snapshot()
            if final.stats.duration_seconds > 0:
                screen.console.print(render_summary(final))

    def run_auto(self, duration: int, skip_calibration: bool = False) -> None:
        run_auto_mode(self.engine, duration, skip_calibration)

    def cleanup(self) -> None:
        self.engine.shutdown()
        self.milestones.unsubscribe()


def setup_logging(config: ReadGroveConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get_log_file_path()
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("ReadGrove starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def main() -> None:
    """Main entry point for ReadGrove."""
    parser = argparse.ArgumentParser(
        description="ReadGrove - read aloud, grow a forest",
        epilog="Keys: c=calibrate, r=read, s=stop, x=reset, n=new session, q=quit"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (overrides config)"
    )

    parser.add_argument(
        "--auto",
        action="store_true",
        help="Calibrate, read for --duration seconds, then print the scorecard and exit"
    )

    parser.add_argument(
        "--duration",
        type=int,
        default=10,
        help="Reading duration in seconds for auto mode (default: 10)"
    )

    parser.add_argument(
        "--skip-calibration",
        action="store_true",
        help="Auto mode: keep the default noise floor instead of calibrating"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="ReadGrove v0.1.0"
    )

    args = parser.parse_args()

    try:
        app = ReadGroveApp(args.config, args.log_level)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    try:
        app.init()
        if args.auto:
            app.run_auto(args.duration, args.skip_calibration)
        else:
            app.run_interactive()
    except KeyboardInterrupt:
        print("\nGoodbye!")
    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        if hasattr(app, 'engine'):
            app.cleanup()


if __name__ == "__main__":
    main()
