"""Account signup and login.

Passwords are stored as bcrypt hashes. The logged-in user id
lives in the config file; everything else about the session is built from it.
"""

import logging
from datetime import datetime
from pathlib import Path

import bcrypt

from spendwise.config import get_current_user_id, set_current_user_id
from spendwise.errors import DuplicateAccountError, InvalidCredentialsError, NotLoggedInError, ValidationError
from spendwise.session import User
from spendwise.store.queries import get_max_user_id, get_user_by_email, get_user_by_id, insert_user

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# Longest password bcrypt accepts
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password for storage with a fresh salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _new_user_id(db_path: Path | None) -> int:
    candidate = int(datetime.now().timestamp() * 1000)
    highest = get_max_user_id(db_path)
    if highest is not None and candidate <= highest:
        candidate = highest + 1
    return candidate


def signup(
    name: str, email: str, password: str, db_path: Path | None = None, config_path: Path | None = None
) -> User:
    """Create an account and log it in.

    Raises:
        ValidationError: If a field is empty.
        DuplicateAccountError: If the email is already registered.
        sqlite3.Error: If database operation fails.
    """
    email = normalize_email(email)
    name = name.strip()
    if not name or not email or not password:
        raise ValidationError("Name, email and password are required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    if get_user_by_email(email, db_path) is not None:
        raise DuplicateAccountError()

    user_id = _new_user_id(db_path)
    inserted = insert_user(user_id, name, email, hash_password(password), datetime.now().isoformat(), db_path)
    if not inserted:
        raise DuplicateAccountError()

    logger.info("Created account %s", user_id)
    set_current_user_id(user_id, config_path)
    return User(id=user_id, name=name, email=email)


def login(email: str, password: str, db_path: Path | None = None, config_path: Path | None = None) -> User:
    """Log in with email and password.

    Raises:
        InvalidCredentialsError: If no account matches.
        sqlite3.Error: If database operation fails.
    """
    row = get_user_by_email(normalize_email(email), db_path)
    if row is None or not verify_password(password, row["password_hash"]):
        raise InvalidCredentialsError()

    set_current_user_id(row["id"], config_path)
    return User(id=row["id"], name=row["name"], email=row["email"])


def logout(config_path: Path | None = None) -> None:
    set_current_user_id(None, config_path)


def current_user(db_path: Path | None = None, config_path: Path | None = None) -> User:
    """The logged-in user.

    Raises:
        NotLoggedInError: If nobody is logged in or the account is gone.
    """
    user_id = get_current_user_id(config_path)
    if user_id is None:
        raise NotLoggedInError()

    row = get_user_by_id(user_id, db_path)
    if row is None:
        logger.info("Logged-in user %s no longer exists", user_id)
        raise NotLoggedInError()
    return User(id=row["id"], name=row["name"], email=row["email"])
