# ABOUTME: Exception definitions for session controller precondition violations.
# ABOUTME: Each one signals a caller bug (wrong operation for the current state), never a runtime condition.


class InvalidStateTransition(Exception):
    """Raised when an operation is not allowed in the current game status"""

    pass


class NoActivePlayer(Exception):
    """Raised when starting a turn with no active player"""

    pass


class TurnAlreadyActive(Exception):
    """Raised when starting a turn while another is in progress or awaiting timeout acknowledgement"""

    pass


class NoTurnInProgress(Exception):
    """Raised when ending a turn that was never started"""

    pass


class TimeoutNotPending(Exception):
    """Raised when acknowledging a timeout that has not happened"""

    pass


class InvalidRoster(Exception):
    """Raised when the player roster is empty, too large, or has duplicate ids"""

    pass


class InvalidDuration(Exception):
    """Raised when the game duration is not one of the offered lengths"""

    pass


class TurnTimedOut(Exception):
    """Raised when ending or resuming a turn whose timeout has not been acknowledged"""

    pass
