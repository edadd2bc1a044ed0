"""
bookshelf_api.auth.passwords

Password hashing with bcrypt. Only hashes are stored; plaintext never leaves the request.
"""

from __future__ import annotations

import bcrypt

# bcrypt only looks at the first 72 bytes; longer secrets are refused at validation time.
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds
        # Compared against when the username is unknown so both login failures cost the same.
        self._dummy_hash = self.hash("not-a-real-password-0")

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)).decode(
            "ascii"
        )

    def verify(self, password: str, password_hash: str | None) -> bool:
        candidate = password.encode("utf-8")
        if len(candidate) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(candidate, (password_hash or self._dummy_hash).encode("ascii"))
        except ValueError:
            # Malformed stored hash.
            return False
