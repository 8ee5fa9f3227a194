from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# Fields a repository may change after creation.
MUTABLE_FIELDS = frozenset({'first_name', 'last_name', 'password_hash', 'is_active'})


@dataclass
class User:
    """Domain model representing a registered account."""
    id: str
    email: str
    first_name: str
    created_at: datetime
    updated_at: datetime
    last_name: str = ''
    is_active: bool = True
    last_login: datetime | None = None
    password_hash: str | None = None


def normalize_email(email: str) -> str:
    """Emails are unique regardless of case, so they are stored lower-cased."""
    return email.strip().lower()


def next_timestamp(previous: datetime | None = None) -> datetime:
    """Return the current UTC time, nudged past ``previous`` if the clock hasn't moved."""
    now = datetime.now(timezone.utc)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
