from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Emails are matched case-insensitively. Implementations must make the
    uniqueness check and the insert in ``create`` a single atomic step.
    """
    def create(self, email: str, password_hash: str, first_name: str, last_name: str = '') -> User | None:
        """Create a new active user.

        Return the User, or None if the store failed.
        Raise ConflictError if the email is already taken.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def update(self, user_id: str, **fields) -> User | None:
        """Set the given fields and advance updated_at. Return the updated User or None if not found."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...
