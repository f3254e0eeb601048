"""
Errors raised while bringing the server up.

All of them are fatal at startup: the entry point logs the error and exits
with -1. Nothing here is raised once the listener is serving requests.
"""


class TalksError(Exception):
    pass


class ConfigError(TalksError):
    pass


class ConfigOpenError(ConfigError):
    """The config file could not be opened or read."""


class ConfigParseError(ConfigError):
    """The config file is not JSON, or not a config document."""


class RootNotFoundError(TalksError):
    """None of the candidate html directories exists."""


class ListenError(TalksError):
    """Bad listen address, or the socket could not be bound."""
