"""
georisk: live multi-source geopolitical risk scoring.

Polls public data sources, maps each onto a 0-100 risk scale and combines
them into a confidence-weighted global score with regional breakdowns.
"""

__version__ = "1.0.0"
