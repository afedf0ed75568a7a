"""Exceptions raised by the editor core."""

from __future__ import annotations

from typing import Optional


class KiloError(Exception):
    """Base class for editor errors."""


class TerminalError(KiloError):
    """
    Unrecoverable failure talking to the terminal device.

    Formatted the way ``perror`` would print it: ``"<operation>: <reason>"``.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None) -> None:
        self.operation = operation
        self.cause = cause
        reason = str(cause) if cause is not None else "failed"
        super().__init__(f"{operation}: {reason}")
