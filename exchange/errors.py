"""
Error taxonomy for the rotation pipeline.
Both errors are fatal to a single invocation; the HTTP handler turns them
into the failure envelope.
"""

from __future__ import annotations
from typing import Optional


class RotationError(Exception):
    """Base class for pipeline failures."""


class NoInstrumentsError(RotationError):
    """Instrument filtering left nothing to rank."""

    def __init__(self, message: str = "No symbols resolved from instruments-info"):
        super().__init__(message)


EmptyUniverseError = NoInstrumentsError


class FetchError(RotationError):
    """A REST call failed on every configured host."""

    def __init__(self, path: str, last_error: Optional[BaseException] = None):
        self.path = path
        self.last_error = last_error
        reason = str(last_error) if last_error is not None else ""
        if not reason and last_error is not None:
            reason = type(last_error).__name__
        super().__init__(f"{reason or 'Fetch failed'} ({path})")
