"""
Password hashing utilities.
Provides salted bcrypt digests and verification through passlib.
"""

from passlib.context import CryptContext
import secrets


BCRYPT_ROUNDS = 10

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Every call draws a fresh salt, so hashing the same password twice
    yields two different digests that both verify.

    Args:
        password: Plain text password

    Returns:
        Hashed password string

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password is required")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password against hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password from database

    Returns:
        True if password matches, False otherwise (including unusable digests)
    """
    if not plain_password or not hashed_password:
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def generate_random_password(length: int = 32) -> str:
    """Random password for accounts created through an external identity provider."""
    return secrets.token_urlsafe(length)
