"""Application configuration, read once from the environment.

A ``.env`` file in the working directory is loaded first; variables already
set in the process environment take precedence.
"""

import os
import re
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

_DURATION_RE = re.compile(r'^\s*(\d+)\s*([smhdw]?)\s*$', re.IGNORECASE)
_DURATION_UNITS = {
    '': 'seconds',
    's': 'seconds',
    'm': 'minutes',
    'h': 'hours',
    'd': 'days',
    'w': 'weeks',
}


def parse_duration(value: str) -> timedelta:
    """Parse a token lifetime such as ``7d``, ``12h``, ``30m``, ``45s`` or ``3600``.

    A bare number is read as seconds.

    Raises:
        ValueError: value is not a positive duration
    """
    match = _DURATION_RE.match(value or '')
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = int(match.group(1)), match.group(2).lower()
    if amount <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(**{_DURATION_UNITS[unit]: amount})


# JWT
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "7d")
JWT_EXPIRATION = parse_duration(JWT_EXPIRES_IN)

# User store: "memory" (process-local) or "mongodb"
USER_STORE = os.getenv("USER_STORE", "memory").strip().lower()
if USER_STORE not in ("memory", "mongodb"):
    raise ValueError(f"USER_STORE must be 'memory' or 'mongodb', got {USER_STORE!r}")

MONGO_URL = os.getenv("MONGO_URL")
DATABASE_NAME = os.getenv("MONGODB_DATABASE", "dashboard")

# HTTP
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
PORT = int(os.getenv("PORT", 4000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
