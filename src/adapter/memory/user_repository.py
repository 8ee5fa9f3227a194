"""Process-local implementation of UserRepository.

Default store for the service and the backing store for tests. State is lost
on restart.
"""

import threading
import uuid
from dataclasses import replace

from domain.model.errors import ConflictError
from domain.model.user import MUTABLE_FIELDS, User, next_timestamp, normalize_email


class InMemoryUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        # Request handlers run in a threadpool; every read-modify-write holds this.
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, first_name: str, last_name: str = '') -> User | None:
        email = normalize_email(email)
        with self._lock:
            if any(u.email == email for u in self.store.values()):
                raise ConflictError("User already exists with this email")

            user_id = uuid.uuid4().hex
            now = next_timestamp()
            user = User(
                id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                created_at=now,
                updated_at=now,
                password_hash=password_hash,
            )
            self.store[user_id] = user
            return replace(user)

    def update(self, user_id: str, **fields) -> User | None:
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")

        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return None
            for name, value in fields.items():
                setattr(user, name, value)
            user.updated_at = next_timestamp(user.updated_at)
            return replace(user)

    def update_last_login(self, user_id: str) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return False

            now = next_timestamp(user.updated_at)
            user.last_login = now
            user.updated_at = now
            return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        email = normalize_email(email)
        with self._lock:
            for user in self.store.values():
                if user.email == email:
                    return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        with self._lock:
            user = self.store.get(user_id)
            return replace(user) if user else None
