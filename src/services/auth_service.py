"""Auth service — registration, authentication and profile business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

import bcrypt

from domain.model.errors import (
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12

INVALID_CREDENTIALS = "Invalid email or password"
PROFILE_FIELDS = ('first_name', 'last_name')


# bcrypt only reads the first 72 bytes; bcrypt>=5 raises on longer input instead.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))


def _require_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def register(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    first_name: str | None,
    last_name: str | None = None,
) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        ValidationError: email, password or first name missing
        ConflictError: email already registered (any letter case)
        InternalError: the repository failed to store the user
    """
    if not email or not email.strip() or not password or not first_name:
        raise ValidationError("Email, password, and first name are required")

    if repo.get_by_email(email):
        raise ConflictError("User already exists with this email")

    password_hash = _hash_password(password)

    # The repository repeats the uniqueness check atomically, so a concurrent
    # registration that slipped past the check above still ends in ConflictError.
    user = repo.create(
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name or '',
    )
    if not user:
        raise InternalError("Failed to create user")
    return user


def authenticate(repo: UserRepository, email: str | None, password: str | None) -> User:
    """Authenticate a user by email and password.

    Returns the authenticated User with last_login refreshed.
    Unknown email and wrong password share one message so callers can't
    probe which emails exist.

    Raises:
        ValidationError: email or password missing
        AuthenticationError: invalid credentials or deactivated account
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = repo.get_by_email(email)
    if not user:
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    if not _verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not repo.update_last_login(user.id):
        logger.warning("Failed to record last_login", extra={"userId": user.id})
        return user
    return repo.get_by_id(user.id) or user


def get_profile(repo: UserRepository, user_id: str) -> User:
    """Return the user behind an authenticated request.

    Raises:
        NotFoundError: the id no longer resolves to a user
    """
    return _require_user(repo, user_id)


def update_profile(repo: UserRepository, user_id: str, **changes) -> User:
    """Apply a partial profile update.

    Only the keyword arguments actually passed are written; an empty string
    is a legitimate new value. Unsupported fields are rejected.

    Raises:
        ValidationError: a field other than first_name/last_name was supplied
        NotFoundError: the id no longer resolves to a user
    """
    unknown = set(changes) - set(PROFILE_FIELDS)
    if unknown:
        raise ValidationError(f"Unsupported profile fields: {', '.join(sorted(unknown))}")

    user = repo.update(user_id, **changes)
    if not user:
        raise NotFoundError("User not found")
    return user


def change_password(
    repo: UserRepository,
    user_id: str,
    current_password: str | None,
    new_password: str | None,
) -> None:
    """Replace the password after verifying the current one.

    No strength rules are applied here.

    Raises:
        ValidationError: either password missing
        NotFoundError: the id no longer resolves to a user
        AuthenticationError: current password is wrong
    """
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")

    user = _require_user(repo, user_id)

    if not _verify_password(current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")

    if not repo.update(user_id, password_hash=_hash_password(new_password)):
        raise NotFoundError("User not found")
