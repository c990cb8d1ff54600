"""Define the errors raised while encoding a lifted planning task."""

from __future__ import annotations

from enum import StrEnum


class EncodingErrorKind(StrEnum):
    """Enumeration of the reasons a lifted task cannot be encoded."""

    UNSUPPORTED_CONSTRUCT = "unsupported_construct"
    """The task uses constructs outside the fragment the grounder supports."""


NOT_ADL_MESSAGE = "problem to encode not ADL"


class EncodingError(Exception):
    """A recoverable error signaling that a lifted task cannot be encoded.

    Search is never attempted for a task that raised an encoding error.
    """

    def __init__(self, message: str, kind: EncodingErrorKind = EncodingErrorKind.UNSUPPORTED_CONSTRUCT) -> None:
        """Initialize the error with a message and the kind of encoding failure."""
        super().__init__(message)
        self.kind = kind

    @property
    def message(self) -> str:
        """Retrieve the error's message."""
        return str(self)
