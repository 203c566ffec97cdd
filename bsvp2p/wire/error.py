"""The error raised for malformed or unacceptable protocol messages."""

from __future__ import annotations

__all__ = ["MessageError"]


class MessageError(ValueError):
    """A problem with a message rather than with the stream carrying it.

    Examples are messages from the wrong network, invalid commands,
    mismatched checksums and payloads that exceed their limits. Plain I/O
    failures such as end of stream are raised as their own exceptions, so
    callers can tell the two apart.
    """

    def __init__(self, func: str, description: str) -> None:
        self.func = func
        self.description = description
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.func:
            return f"{self.func}: {self.description}"
        return self.description