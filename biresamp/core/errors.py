"""Exception hierarchy for biresamp.

Every failure in a conversion terminates it. The CLI maps any of these
to exit code 1; library callers can catch :class:`BiresampError`.
"""

from __future__ import annotations


class BiresampError(Exception):
    """Base class for all biresamp errors."""


class UsageError(BiresampError):
    """Wrong argument count, unparsable rate or otherwise bad invocation."""


class AudioIOError(BiresampError):
    """The input could not be opened/decoded or the output could not be written."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class BoundsError(BiresampError):
    """A convolution read would fall outside the zero-padded input buffer."""
