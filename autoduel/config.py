"""Central configuration defaults and constants for AutoDuel."""

import os

# Logging
DEFAULT_LOG_LEVEL = os.getenv("AUTODUEL_LOG_LEVEL", "INFO").upper()

# Bot identity (mentions of this account are ignored when parsing commands)
DEFAULT_BOT_ACCT = os.getenv("AUTODUEL_BOT_ACCT", "bot@your.instance")

# Character catalog - unset means the built-in roster
DEFAULT_CATALOG_PATH = os.getenv("AUTODUEL_CATALOG_PATH") or None

# Randomness - unset means OS entropy
_rng_seed_env = os.getenv("AUTODUEL_RNG_SEED")
DEFAULT_RNG_SEED = int(_rng_seed_env) if _rng_seed_env else None

# Round deadline (seconds); 0 disables the deadline entirely
DEFAULT_ROUND_TIMEOUT = float(os.getenv("AUTODUEL_ROUND_TIMEOUT", "0"))
DEFAULT_FALLBACK_ACTION = os.getenv("AUTODUEL_FALLBACK_ACTION", "defend").lower()

# Command input
DEFAULT_MAX_INPUT_LENGTH = int(os.getenv("AUTODUEL_MAX_INPUT_LENGTH", "500"))

# Reply rendering
DEFAULT_HP_BAR_WIDTH = int(os.getenv("AUTODUEL_HP_BAR_WIDTH", "10"))
