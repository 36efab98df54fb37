# ABOUTME: Exception definitions for rules-layer precondition violations.
# ABOUTME: Raised by the pure selection functions when called with impossible inputs.


class NoPlayersAvailable(Exception):
    """Raised when selecting a next player from an empty roster"""
    pass
