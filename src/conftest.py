"""Test environment defaults, applied before any application module is imported."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_EXPIRES_IN", "1h")
os.environ["USER_STORE"] = "memory"
