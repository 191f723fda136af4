"""
natstats

Parses NAT translation table dumps and reports per-protocol statistics.
"""

__version__ = "0.1.0"
