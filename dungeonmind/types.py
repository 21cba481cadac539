from __future__ import annotations

from collections.abc import Callable
from typing import Any, NewType, TypeAlias

# =============================================================================
# BEHAVIOR TYPES
# =============================================================================

# Registry key for a behavior. Names are unique within one registry.
BehaviorName: TypeAlias = str  # Example: "Fight", "Explore", "Descend"

# Predicate form of a removal selector.
BehaviorPredicate: TypeAlias = Callable[[BehaviorName], bool]

# Whatever a behavior hands back for the run loop to execute. Opaque to the
# decision core.
Action: TypeAlias = Any

# =============================================================================
# SCORING TYPES
# =============================================================================

# Integer projection of an urgency label (0 = no urgency).
UrgencyScore = NewType("UrgencyScore", int)

# How many units of a stacked item a behavior or a vote refers to.
Quantity: TypeAlias = int

# Currency held by the actor, compared against item costs.
Gold: TypeAlias = int
