"""
Consensus voting: whether to pick up or drop an item.

Unlike arbitration, item questions consult *every* registered behavior, not
just the ones in the priority order, and nobody wins outright. The answers
are folded into one VoteResult:

Pickup
    The largest positive desire wins. Any nonzero quantity counts as a
    vote, negative ones included. Before a vote is counted, a priced item
    must be affordable; the first vote that finds the agent short of gold
    refuses the whole pickup on the spot.

Drop
    The largest positive desire wins, but any behavior that explicitly
    refuses vetoes the drop, whatever the others said.

Conflicts are settled by these rules, never reported as errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from dungeonmind.types import Gold, Quantity

from .behavior import Vote
from .registry import BehaviorRegistry

logger = logging.getLogger(__name__)


class Item(Protocol):
    """What consensus voting needs to know about an item."""

    @property
    def quantity(self) -> Quantity: ...

    @property
    def cost(self) -> Gold | None:
        """Shop price, or None when the item is free to take."""
        ...


class Purse(Protocol):
    """Actor state consulted by the pickup affordability check."""

    @property
    def gold(self) -> Gold: ...


class VoteOutcome(Enum):
    KEEP = auto()  # Leave the item where it is
    ALL = auto()  # Move the whole stack
    PARTIAL = auto()  # Move part of the stack


@dataclass(frozen=True, slots=True)
class VoteResult:
    """Aggregate answer to a pickup or drop question.

    Attributes:
        outcome: Keep, all, or partial.
        quantity: Units to move: 0 for KEEP, the full stack for ALL, and
            strictly between the two for PARTIAL.
    """

    outcome: VoteOutcome
    quantity: Quantity = 0

    @classmethod
    def keep(cls) -> VoteResult:
        return cls(VoteOutcome.KEEP)

    @classmethod
    def from_desire(cls, desire: float, stack: Quantity) -> VoteResult:
        """Map the strongest desire onto the size of the stack."""
        if desire <= 0:
            return cls.keep()
        if desire >= stack:
            return cls(VoteOutcome.ALL, stack)
        return cls(VoteOutcome.PARTIAL, int(desire))

    def __bool__(self) -> bool:
        return self.outcome is not VoteOutcome.KEEP


class ConsensusVoter:
    """Poll every registered behavior about an item.

    Args:
        registry: Behaviors to poll.
        purse: Actor state providing the gold available for purchases.
    """

    def __init__(self, registry: BehaviorRegistry, purse: Purse) -> None:
        self.registry = registry
        self.purse = purse

    def pickup(self, item: Item) -> VoteResult:
        """Decide whether, and how much of, ``item`` to pick up."""
        final_pick: float = 0

        for behavior in self.registry.behaviors():
            vote = Vote.coerce(behavior.pickup(item))
            pick = vote.desire
            if pick == 0:
                continue

            logger.info(f"{behavior.name} wants to pick up {vote.describe()} of {item}")
            if item.cost is not None and self.purse.gold < item.cost:
                logger.info(
                    f"Cannot afford {item} ({item.cost} > {self.purse.gold} gold)"
                )
                return VoteResult.keep()

            if pick > final_pick:
                final_pick = pick

        return VoteResult.from_desire(final_pick, item.quantity)

    def drop(self, item: Item) -> VoteResult:
        """Decide whether, and how much of, ``item`` to drop."""
        should_drop: float = 0

        for behavior in self.registry.behaviors():
            vote = Vote.coerce(behavior.drop(item))
            if vote.is_indifferent:
                continue

            if vote.is_refusal:
                logger.info(f"{behavior.name} wants to NOT drop {item}")
                return VoteResult.keep()

            logger.info(f"{behavior.name} wants to drop {vote.describe()} of {item}")
            drop = vote.desire
            if drop > should_drop:
                should_drop = drop

        return VoteResult.from_desire(should_drop, item.quantity)
