"""Configuration for the kilo editor core."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class EditorConfig:
    """Settings for one editor run."""

    # Per-read timeout in deciseconds (termios VTIME), 1 == 100ms
    read_timeout: int = 1

    # Letter that, combined with Ctrl, quits the editor
    quit_key: str = "q"

    # Logging; the screen is the terminal, so records only go to a file
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    # Terminal device descriptors
    input_fd: int = 0
    output_fd: int = 1

    @classmethod
    def from_env(cls, base: Optional[EditorConfig] = None) -> EditorConfig:
        """Overlay KILO_* environment variables on ``base`` (or the defaults)."""
        config = base or cls()
        changes: dict[str, object] = {}

        if level := os.environ.get("KILO_LOG_LEVEL"):
            changes["log_level"] = level.upper()
        if log_file := os.environ.get("KILO_LOG_FILE"):
            changes["log_file"] = os.path.expanduser(log_file)
        if timeout := os.environ.get("KILO_READ_TIMEOUT"):
            try:
                changes["read_timeout"] = int(timeout)
            except ValueError:
                raise ValueError(f"KILO_READ_TIMEOUT must be an integer, got {timeout!r}") from None

        return replace(config, **changes)

    def validate(self) -> EditorConfig:
        """Raise ValueError for out-of-range settings; return self otherwise."""
        if not 1 <= self.read_timeout <= 255:
            raise ValueError(f"read_timeout must be 1-255 deciseconds, got {self.read_timeout}")
        if len(self.quit_key) != 1 or not (self.quit_key.isascii() and self.quit_key.isalpha()):
            raise ValueError(f"quit_key must be a single ASCII letter, got {self.quit_key!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        return self


# Default configuration instance
default_config = EditorConfig()
