"""
Password Hasher Implementation
"""
from typing import Optional

import bcrypt

from core.config import settings
from application.services.auth.interfaces import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt with a configurable cost factor"""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or settings.BCRYPT_ROUNDS

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed hash stored for the account
            return False
