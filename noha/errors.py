from __future__ import annotations


class NohaError(Exception):
    pass


class PlaylistSourceError(NohaError):
    """A single playlist source could not be read."""


class PlaylistLoadError(NohaError):
    """Every candidate source failed; carries the last underlying error."""

    def __init__(self, message: str, last_error: BaseException | None = None):
        super().__init__(message)
        self.last_error = last_error


class ResolutionCancelled(NohaError):
    pass
