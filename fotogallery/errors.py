"""Errors that abort a command."""

from __future__ import annotations


class FatalError(Exception):
    """An unrecoverable failure, with a message and the error behind it."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message if self.cause is None else f"{self.message} ({self.cause})"