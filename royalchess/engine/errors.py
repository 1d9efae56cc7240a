from __future__ import annotations


class InvariantViolation(RuntimeError):
    """Raised when the engine reaches a state that normal play cannot produce.

    Example: a board holding two kings of one color while evaluating check.
    Always an engine bug, never a user error.
    """
