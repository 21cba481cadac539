"""
Configuration constants.

Centralizes the switches used by the decision core. Tuning values for the
AI heuristics themselves live in ``dungeonmind.constants.ai``.
"""

# =============================================================================
# AI INSTRUMENTATION
# =============================================================================

# Record behavior preparation and selection times to live metrics.
AI_TIMING_METRICS_ENABLED = True

# Ring buffer size for each timing metric.
AI_METRIC_SAMPLES = 100
