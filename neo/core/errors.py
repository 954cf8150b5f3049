from __future__ import annotations


class ParseError(Exception):
    """Raised when an uploaded payload cannot be parsed for its declared format."""

    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(f"failed to parse {file_name}: {reason}")
        self.file_name = file_name
        self.reason = reason


class InvalidCredentials(Exception):
    """Raised when a login attempt does not match the credential table."""


class PersistenceFailure(Exception):
    """Raised by record store implementations when a write cannot be completed."""
