"""Single-key command input for the terminal front end."""

import sys
import threading
import time
from typing import Optional, Callable
import logging

logger = logging.getLogger(__name__)

HELP_TEXT = "c=calibrate  r=read  s=stop  x=reset  n=new session  q=quit"


class KeyboardInputHandler:
    """Reads single keypresses on a background thread.

    The callback takes the key and returns True to keep listening,
    False to quit.
    """

    def __init__(self, callback: Callable[[str], bool]):
        self.callback = callback
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self.running:
            return

        self.running = True
        self.thread = threading.Thread(target=self._input_loop, daemon=True)
        self.thread.name = "KeyboardInputThread"
        self.thread.start()
        logger.info("Keyboard input handler started")

    def stop(self) -> None:
        self.running = False
        if self.thread and self.thread is not threading.current_thread():
            self.thread.join(timeout=1.0)
        logger.info("Keyboard input handler stopped")

    def _input_loop(self) -> None:
        while self.running:
            try:
                key = self._get_key()
                if key:
                    logger.debug(f"Key detected: '{key}'")
                    if not self.callback(key):
                        logger.info("Quit requested from keyboard")
                        self.running = False
                        break
            except Exception as e:
                logger.error(f"Error in input loop: {e}", exc_info=True)
            time.sleep(0.05)

    def _get_key(self) -> Optional[str]:
        if sys.platform == "win32":
            return self._get_key_windows()
        return self._get_key_unix()

    def _get_key_windows(self) -> Optional[str]:
        import msvcrt
        if msvcrt.kbhit():
            return msvcrt.getch().decode('utf-8', errors='ignore').lower()
        return None

    def _get_key_unix(self) -> Optional[str]:
        import select
        import tty
        import termios

        if not select.select([sys.stdin], [], [], 0.1)[0]:
            return None
        old_settings = termios.tcgetattr(sys.stdin)
        try:
            tty.setraw(sys.stdin.fileno())
            return sys.stdin.read(1).lower()
        finally:
            termios.tcsetattr(sys.stdin, termios.TCSADRAIN, old_settings)


class SimpleInputHandler:
    """Line-based fallback for terminals without raw key access."""

    def __init__(self, callback: Callable[[str], bool]):
        self.callback = callback
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self.running:
            return

        self.running = True
        self.thread = threading.Thread(target=self._input_loop, daemon=True)
        self.thread.start()
        logger.info("Simple input handler started")

    def stop(self) -> None:
        self.running = False
        logger.info("Simple input handler stopped")

    def _input_loop(self) -> None:
        while self.running:
            try:
                user_input = input(f"[{HELP_TEXT}] > ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                self.callback("q")
                break
            if not user_input:
                continue
            try:
                if not self.callback(user_input[0]):
                    break
            except Exception as e:
                logger.error(f"Error handling input {user_input!r}: {e}", exc_info=True)
        self.running = False


def create_input_handler(callback: Callable[[str], bool]):
    """Create the best available input handler for the current terminal.

    Args:
        callback: Function that takes a key and returns True to continue, False to quit

    Returns:
        An input handler instance with start() and stop()
    """
    if sys.stdin.isatty():
        return KeyboardInputHandler(callback)
    logger.warning("stdin is not a terminal, using line-based input")
    return SimpleInputHandler(callback)
