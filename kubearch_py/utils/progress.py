"""Terminal progress indicators."""

import sys
from concurrent.futures import Future, TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ProgressStyle:
    """Style configuration for progress indicators."""
    spinner_chars: str = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
    interval: float = 0.1


class Spinner:
    """A spinner for indeterminate progress."""

    def __init__(
        self,
        message: str = "Processing...",
        style: Optional[ProgressStyle] = None,
        file: Any = None,
    ):
        """
        Initialize spinner.

        Args:
            message: Message to display
            style: Style configuration
            file: Output file
        """
        self.message = message
        self.style = style or ProgressStyle()
        self.file = file or sys.stderr
        self._frame = 0

    def _is_tty(self) -> bool:
        """Check if output is a terminal."""
        return hasattr(self.file, "isatty") and self.file.isatty()

    def spin(self) -> None:
        """Advance spinner by one frame."""
        if not self._is_tty():
            return

        char = self.style.spinner_chars[self._frame % len(self.style.spinner_chars)]
        self.file.write(f"\r\033[K{char} {self.message}")
        self.file.flush()
        self._frame += 1

    def wait(self, future: Future) -> Any:
        """
        Spin until the future completes and return its result.

        Exceptions raised by the future propagate to the caller.
        """
        while True:
            self.spin()
            try:
                return future.result(timeout=self.style.interval)
            except FutureTimeout:
                continue

    def finish(self, message: str = "", success: bool = True) -> None:
        """Finish the spinner."""
        if self._is_tty():
            self.file.write("\r\033[K")

        icon = "✅" if success else "❌"
        final_msg = message or self.message
        self.file.write(f"{icon} {final_msg}\n")
        self.file.flush()
