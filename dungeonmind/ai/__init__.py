"""
Behavior arbitration for autonomous agents.

Each decision cycle every prioritized behavior is prepared and reports an
urgency; the most urgent one (earliest in priority order on a tie) acts.
Item pickup and drop questions are put to all behaviors and settled by vote.

Package structure:
    urgency      - Urgency labels, numeric projection, per-behavior query.
    behavior     - Behavior base class and the Vote type.
    registry     - BehaviorRegistry and PriorityList.
    arbiter      - Arbiter: select_behavior / decide.
    consensus    - ConsensusVoter: pickup / drop.
    threat       - Threat heuristic for a single opponent.
    personality  - Personality base class wiring it all to one actor.
    errors       - Exceptions.
"""

from .arbiter import Arbiter, Decision
from .behavior import ALL, INDIFFERENT, REFUSE, Behavior, Vote, VoteKind, quantity
from .consensus import ConsensusVoter, VoteOutcome, VoteResult
from .errors import (
    BehaviorSystemError,
    InvalidBehaviorError,
    InvalidUrgencyError,
    NoBehaviorSelectedError,
)
from .personality import Personality
from .registry import BehaviorRegistry, PriorityList
from .threat import Threat, evaluate_threat
from .urgency import Urgency, find_urgency, numeric_urgency

__all__ = [
    "ALL",
    "INDIFFERENT",
    "REFUSE",
    "Arbiter",
    "Behavior",
    "BehaviorRegistry",
    "BehaviorSystemError",
    "ConsensusVoter",
    "Decision",
    "InvalidBehaviorError",
    "InvalidUrgencyError",
    "NoBehaviorSelectedError",
    "Personality",
    "PriorityList",
    "Threat",
    "Urgency",
    "Vote",
    "VoteKind",
    "VoteOutcome",
    "VoteResult",
    "evaluate_threat",
    "find_urgency",
    "numeric_urgency",
    "quantity",
]
