"""
Password hashing helpers.
"""

import secrets
import string

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_driver_password() -> str:
    """Random one-time password in the ``Driver<8 chars>!`` shape."""
    alphabet = string.ascii_lowercase + string.digits
    return "Driver" + "".join(secrets.choice(alphabet) for _ in range(8)) + "!"
