from __future__ import annotations

import hashlib
import secrets

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 390_000


class Pbkdf2Hasher:
    """Salted PBKDF2-SHA256 hashes encoded as ``algo$iterations$salt$digest``."""

    def __init__(self, iterations: int = ITERATIONS):
        self.iterations = iterations

    def hash(self, password: str) -> str:
        salt = secrets.token_hex(16)
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt.encode("ascii"), self.iterations
        ).hex()
        return f"{ALGORITHM}${self.iterations}${salt}${digest}"

    def verify(self, password: str, hashed: str) -> bool:
        try:
            algorithm, iterations, salt, digest = hashed.split("$", 3)
        except ValueError:
            return False
        if algorithm != ALGORITHM:
            return False
        candidate = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt.encode("ascii"), int(iterations)
        ).hex()
        return secrets.compare_digest(candidate, digest)
