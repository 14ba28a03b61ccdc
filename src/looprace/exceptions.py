"""Exception types raised by looprace."""


class LoopraceError(Exception):
    """Base class for all looprace errors."""


class TrackLayoutError(LoopraceError, ValueError):
    """A piece cannot be placed on the current layout."""


class StartRejectedError(LoopraceError):
    """
    The simulation cannot be started on the current track.

    The simulator state is left untouched when this is raised.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConfigError(LoopraceError, ValueError):
    """A configuration file or mapping could not be applied."""
