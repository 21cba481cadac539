"""Exceptions raised by the decision core."""


class BehaviorSystemError(Exception):
    """Base class for decision-core failures."""


class InvalidUrgencyError(BehaviorSystemError, ValueError):
    """A behavior reported something that is not an urgency label.

    Signals a malformed behavior implementation. Never recovered locally:
    it aborts the evaluation of that behavior and the decision cycle.
    """


class InvalidBehaviorError(BehaviorSystemError, KeyError):
    """A behavior could not be added to the registry.

    Raised for names missing from the behavior catalog and for placement
    constraints that cannot be satisfied. The registry is left unchanged.
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class NoBehaviorSelectedError(BehaviorSystemError, RuntimeError):
    """A full decision cycle found no behavior with positive urgency.

    Agents are expected to always register a fallback behavior, so this
    is a broken invariant rather than a quiet turn.
    """
