# kixidb/utils/hashing.py
import bcrypt

__all__ = ["hash_password"]


def hash_password(password: str, rounds: int = 12) -> str:
    """bcrypt 해시 (salt 포함, '$2b$<rounds>$...' 형태의 str)."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")
