import hashlib
import hmac
import secrets

# ─────────────────────────────────────────
#  УТИЛИТЫ: хеш паролей и токены
# ─────────────────────────────────────────

PBKDF2_ITERATIONS = 260_000


def hash_password(password: str, salt: str | None = None) -> tuple[str, str]:
    """PBKDF2-HMAC-SHA256 хеш пароля с уникальной солью"""
    if salt is None:
        salt = secrets.token_hex(16)
    key = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS)
    return key.hex(), salt


def verify_password(password: str, stored_hash: str, salt: str) -> bool:
    return hmac.compare_digest(hash_password(password, salt)[0], stored_hash)


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """В базе лежит только sha256 от токена"""
    return hashlib.sha256(token.encode()).hexdigest()
