"""
Password hashing for the in-memory auth backend.

Hashes are argon2id strings from argon2-cffi defaults.
"""

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError


class Argon2PasswordHasher:
    def __init__(self) -> None:
        self.ph = PasswordHasher()

    def hash_password(self, password: str) -> str:
        return str(self.ph.hash(password))

    def verify_password(self, password: str, hash_str: str) -> bool:
        try:
            self.ph.verify(hash_str, password)
            return True
        except VerifyMismatchError:
            return False
