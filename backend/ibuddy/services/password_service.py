"""Password hashing with bcrypt.

Only the identity store uses this; hashes are compared through
`bcrypt.checkpw`, never by value.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Salted, cost-factored one-way hashing.

    Examples
    --------
    >>> hasher = PasswordHasher(rounds=4)
    >>> hashed = hasher.hash("correct horse")
    >>> hasher.verify("correct horse", hashed)
    True
    >>> hasher.verify("battery staple", hashed)
    False
    """

    def __init__(self, rounds: int = 10):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # malformed stored hash
            return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]
