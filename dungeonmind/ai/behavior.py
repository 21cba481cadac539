"""
Behavior interface and the vote type behaviors answer item questions with.

A Behavior is a pluggable decision unit. Once per decision cycle the arbiter
resets its urgency and calls ``prepare()``; the behavior inspects the world,
then records what it would do and how badly it wants to do it via
``propose()``. Only the winning behavior's action is executed.

Outside the cycle, every behavior is also polled for an opinion whenever the
agent considers picking up or dropping an item. Opinions are ``Vote`` values:

    INDIFFERENT  - no opinion, contributes nothing
    REFUSE       - explicit "no"; vetoes a drop outright
    ALL          - wants the whole stack
    Quantity(n)  - wants n units

Behaviors may also react to broadcast messages by defining methods named
``msg_<message>``; see ``Personality.send_message``.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from dungeonmind.constants.ai import AIConstants
from dungeonmind.types import Action, BehaviorName, Quantity

from .urgency import Urgency

if TYPE_CHECKING:
    from .consensus import Item


class VoteKind(Enum):
    INDIFFERENT = auto()
    REFUSE = auto()
    ALL = auto()
    QUANTITY = auto()


@dataclass(frozen=True, slots=True)
class Vote:
    """One behavior's opinion about picking up or dropping an item."""

    kind: VoteKind
    quantity: Quantity = 0

    @property
    def desire(self) -> float:
        """How many units this vote asks for. ``ALL`` is unbounded."""
        match self.kind:
            case VoteKind.ALL:
                return AIConstants.UNBOUNDED_DESIRE
            case VoteKind.QUANTITY:
                return self.quantity
        return 0

    @property
    def is_indifferent(self) -> bool:
        return self.kind is VoteKind.INDIFFERENT

    @property
    def is_refusal(self) -> bool:
        return self.kind is VoteKind.REFUSE

    def describe(self) -> str:
        match self.kind:
            case VoteKind.ALL:
                return "all"
            case VoteKind.QUANTITY:
                return str(self.quantity)
            case VoteKind.REFUSE:
                return "none"
        return "indifferent"

    @classmethod
    def coerce(cls, value: Any) -> Vote:
        """Convert a loosely-typed opinion into a Vote.

        ``None`` is indifference, booleans mean all-or-nothing, and an
        integer is an explicit quantity.

        Raises:
            TypeError: ``value`` is none of the accepted forms.
        """
        if isinstance(value, Vote):
            return value
        if value is None:
            return INDIFFERENT
        if isinstance(value, bool):
            return ALL if value else REFUSE
        if isinstance(value, int):
            return quantity(value)
        raise TypeError(f"{value!r} is not a vote")


INDIFFERENT = Vote(VoteKind.INDIFFERENT)
REFUSE = Vote(VoteKind.REFUSE)
ALL = Vote(VoteKind.ALL)


def quantity(n: Quantity) -> Vote:
    """Vote for exactly ``n`` units."""
    return Vote(VoteKind.QUANTITY, n)


class Behavior(abc.ABC):
    """Base class for behaviors.

    Subclasses must implement ``prepare``. Item opinions default to
    indifference, so a behavior only overrides ``pickup``/``drop`` when it
    cares about items.

    Attributes:
        name: Registry key, assigned by the registry at instantiation.
        urgency: Label reported by the last ``prepare()``; None when the
            behavior has nothing to do.
        currently: Short human-readable description of what the behavior
            is doing, shown in the agent's status line.
    """

    def __init__(self, name: BehaviorName) -> None:
        self.name = name
        self.urgency: Urgency | str | None = None
        self.currently: str = "?"
        self._action: Action | None = None

    def reset_urgency(self) -> None:
        """Forget the previous cycle's urgency and action."""
        self.urgency = None
        self._action = None

    @abc.abstractmethod
    def prepare(self) -> None:
        """Inspect the world and ``propose()`` an action if there is one."""
        ...

    def propose(
        self, action: Action, urgency: Urgency, currently: str | None = None
    ) -> None:
        """Record the action this behavior would take and how urgent it is."""
        self._action = action
        self.urgency = urgency
        if currently is not None:
            self.currently = currently

    def action(self) -> Action:
        """Return the action chosen by the last ``prepare()``.

        Raises:
            RuntimeError: The behavior won arbitration without proposing
                an action.
        """
        if self._action is None:
            raise RuntimeError(f"{self.name} has no action to perform")
        return self._action

    def pickup(self, item: Item) -> Vote:
        """Opinion on picking up ``item``."""
        return INDIFFERENT

    def drop(self, item: Item) -> Vote:
        """Opinion on dropping ``item``."""
        return INDIFFERENT

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
