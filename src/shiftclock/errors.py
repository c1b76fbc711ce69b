"""Exceptions raised by the shiftclock core."""


class ShiftclockError(Exception):
    """Base exception for shiftclock errors."""

    pass


class TransitionRejected(ShiftclockError):
    """An event was not valid for the current session state.

    Nothing is mutated when this is raised; the message is safe to show to
    the acting user.
    """

    pass


class AlreadyClockedInError(TransitionRejected):
    """A clock-in arrived while a session is already open."""

    def __init__(self, message: str = "Already clocked in!"):
        super().__init__(message)


class NotClockedInError(TransitionRejected):
    """A break or clock-out arrived with no open session."""

    def __init__(self, message: str = "You are not clocked in."):
        super().__init__(message)


class SessionNotFoundError(ShiftclockError):
    """A session id could not be resolved while closing it."""

    pass
