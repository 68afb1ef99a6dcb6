"""Exceptions raised by the opponent AI solvers."""


class IllegalStateError(RuntimeError):
    """A solver was called on a state that has no legal move to offer."""
