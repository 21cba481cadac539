"""Threat evaluation for a single opponent.

Answers, in coarse boolean terms, how dangerous one monster is to us right
now: whether to stay out of melee with it, and whether it is worth spending
minor or major resources (scrolls, wands, prayers) to deal with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from dungeonmind.constants.ai import AIConstants


class MonsterProfile(Protocol):
    """Combat stats of the opponent being evaluated."""

    @property
    def always_avoid_melee(self) -> bool:
        """True for monsters never worth meleeing, such as item stealers."""
        ...

    @property
    def average_melee_damage(self) -> float: ...

    @property
    def maximum_melee_damage(self) -> float: ...

    @property
    def speed(self) -> float: ...


class CombatStats(Protocol):
    """Our own current combat stats."""

    @property
    def hp(self) -> int: ...

    @property
    def speed(self) -> float: ...


@dataclass(frozen=True, slots=True)
class Threat:
    """Combat-risk flags for one opponent.

    Attributes:
        avoid_melee: Do not melee this monster if there is any alternative.
        spend_minor: Worth spending cheap resources on.
        spend_major: Worth spending expensive resources on.
    """

    avoid_melee: bool = False
    spend_minor: bool = False
    spend_major: bool = False


def turns_to_kill(monster: MonsterProfile, actor: CombatStats) -> float:
    """Estimate how long ``monster`` would take to kill ``actor``.

    Raises:
        ZeroDivisionError: ``actor`` has zero speed or zero hit points.
    """
    exposure = actor.speed * actor.hp
    if exposure == 0:
        raise ZeroDivisionError(
            f"Cannot evaluate threat with speed={actor.speed} and hp={actor.hp}"
        )
    return monster.average_melee_damage * monster.speed / exposure


def evaluate_threat(monster: MonsterProfile, actor: CombatStats) -> Threat:
    """Evaluate the threat ``monster`` poses to ``actor``.

    Pure and recomputed on every call; callers evaluating the same monster
    repeatedly within a turn may cache the result themselves.
    """
    # Anything that can one-hit us is avoided in melee at almost any cost,
    # as are the special cases flagged on the monster.
    avoid_melee = (
        monster.always_avoid_melee or monster.maximum_melee_damage >= actor.hp
    )

    turns = turns_to_kill(monster, actor)

    return Threat(
        avoid_melee=avoid_melee,
        spend_minor=turns < AIConstants.SPEND_MINOR_TURNS,
        spend_major=turns < AIConstants.SPEND_MAJOR_TURNS,
    )
