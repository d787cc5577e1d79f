"""AutoDuel - turn-based duels driven by independently declared actions."""

__version__ = "0.1.0"
