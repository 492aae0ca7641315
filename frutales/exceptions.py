"""Exceptions raised by the Frutales leaderboard core."""


class InvalidInputError(TypeError):
    """A collection handed to the core is not a list of valid records."""
