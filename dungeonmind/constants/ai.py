"""Constants for behavior arbitration and threat heuristics."""

import math


class AIConstants:
    """Constants for behavior arbitration and threat heuristics."""

    # --- Threat evaluation ---
    # Estimated turns for a monster to kill us. Below these thresholds
    # behaviors may spend consumables on the fight.
    SPEND_MINOR_TURNS = 20
    SPEND_MAJOR_TURNS = 10

    # --- Consensus voting ---
    # Desire attached to an "all of it" vote. Compares greater than any
    # stack size.
    UNBOUNDED_DESIRE = math.inf
